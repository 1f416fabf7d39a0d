"""Backoffice — Grid Widget Form Parsing.

Translates the widget's flat form fields (``search[value]``,
``order[0][column]``, ``columns[3][data]``...) into a `QueryRequest`.
"""

from typing import Any, Mapping, Optional

from backoffice.config import settings
from backoffice.models.table_models import QueryRequest, SortDirection


def _int_or(value: Any, default: int) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def _clamp_length(length: int) -> int:
    # The widget sends -1 for "show all"; pages are capped instead.
    if length <= 0 or length > settings.max_page_size:
        return settings.max_page_size
    return length


def parse_query_request(form: Mapping[str, Any]) -> QueryRequest:
    """Build a `QueryRequest` from grid widget form fields."""
    draw = _int_or(form.get("draw"), 0)
    start = max(_int_or(form.get("start"), 0), 0)
    length = _clamp_length(_int_or(form.get("length"), settings.default_page_size))

    search_term: Optional[str] = form.get("search[value]") or None

    sort_column: Optional[str] = None
    column_index = form.get("order[0][column]")
    if column_index is not None and str(column_index).strip() != "":
        sort_column = form.get(f"columns[{str(column_index).strip()}][data]") or None

    return QueryRequest(
        draw=draw,
        start=start,
        length=length,
        search_term=search_term,
        sort_column=sort_column,
        sort_direction=SortDirection.parse(form.get("order[0][dir]")),
    )
