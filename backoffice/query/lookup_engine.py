"""Backoffice — Type-ahead Lookup Engine.

A reduced grid query for selector widgets: substring search, stable ordering,
1-based paging and a minimal ``{id, label}`` projection.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Sequence

from sqlalchemy import func
from sqlmodel import Session, select

from backoffice.models.table_models import LookupItem, LookupResult
from backoffice.query.tabular_engine import search_criteria


@dataclass
class LookupDescriptor:
    """One selector's source table.

    `order_by` must end in a unique column so pages never overlap; `extra_of`
    adds widget-specific keys (e.g. a product's unit price) to each item.
    """

    name: str
    model: Any
    id_of: Callable[[Any], Any]
    label_of: Callable[[Any], str]
    order_by: Sequence[Any]
    searchable: Sequence[Any] = ()
    extra_of: Callable[[Any], Dict[str, Any]] = field(default=lambda row: {})


def lookup(
    session: Session,
    descriptor: LookupDescriptor,
    term: str | None,
    page: int = 1,
    page_size: int = 10,
) -> LookupResult:
    """Return page `page` (1-based) of rows matching `term`.

    A blank term matches everything. `has_more` is true while rows remain
    beyond this page.
    """
    page = max(page, 1)
    page_size = max(page_size, 1)

    criteria = search_criteria(descriptor.searchable, term)

    count_statement = select(func.count()).select_from(descriptor.model)
    row_statement = select(descriptor.model)
    if criteria is not None:
        count_statement = count_statement.where(criteria)
        row_statement = row_statement.where(criteria)

    total = int(session.exec(count_statement).one())
    rows = session.exec(
        row_statement.order_by(*descriptor.order_by)
        .offset((page - 1) * page_size)
        .limit(page_size)
    ).all()

    return LookupResult(
        results=[
            LookupItem(
                id=descriptor.id_of(row),
                label=descriptor.label_of(row),
                extra=descriptor.extra_of(row),
            )
            for row in rows
        ],
        has_more=(page * page_size) < total,
    )
