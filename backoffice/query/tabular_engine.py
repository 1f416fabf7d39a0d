"""Backoffice — Server-side Tabular Query Engine.

Every grid screen (orders, stocks, products) runs the same steps:

  count → search → count → sort → page → project

A screen only declares *what* to query through a `TableDescriptor`; this
module owns *how*. To-one references are outer-joined and populated from the
same SELECT, to-many children needed for derived fields are loaded with one
extra bulk IN query, so a page never triggers per-row lookups.

Derived fields (e.g. order totals) are folded inside the projection, after
paging. Sorting by a derived field is not supported: such names are simply
absent from `sort_columns` and fall back to identifier order.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from sqlalchemy import String, cast, func, or_
from sqlalchemy.orm import contains_eager, selectinload
from sqlmodel import Session, select

from backoffice.config import settings
from backoffice.models.table_models import (
    QueryError,
    QueryRequest,
    QueryResponse,
    SortDirection,
)
from backoffice.core.logging import get_logger

logger = get_logger("query.tabular")

Projection = Callable[[Any, str], Dict[str, Any]]


@dataclass
class TableDescriptor:
    """Declarative description of one grid's data source."""

    name: str
    model: Any
    id_column: Any
    projection: Projection
    searchable: Sequence[Any] = ()
    sort_columns: Mapping[str, Any] = field(default_factory=dict)
    joins: Sequence[Any] = ()
    """To-one relationship attributes, outer-joined and eagerly populated."""
    collections: Sequence[Any] = ()
    """To-many relationship attributes, bulk-loaded for derived fields."""
    placeholder: str = field(default_factory=lambda: settings.unknown_placeholder)


def normalize_term(term: Optional[str]) -> str:
    """Trim a free-text search term. Case folding happens in the database."""
    return (term or "").strip()


def search_criteria(searchable: Sequence[Any], term: Optional[str]):
    """OR of case-insensitive substring matches, or None for a blank term.

    Both sides go through the same SQL `lower()`, so a term typed in the
    stored case always matches even where the backend folds only ASCII.
    """
    needle = normalize_term(term)
    if not needle or not searchable:
        return None
    return or_(
        *[cast(expr, String).icontains(needle, autoescape=True) for expr in searchable]
    )


def _search_criteria(descriptor: TableDescriptor, term: Optional[str]):
    return search_criteria(descriptor.searchable, term)


def _order_by(
    descriptor: TableDescriptor,
    sort_column: Optional[str],
    direction: SortDirection,
) -> List[Any]:
    expr = descriptor.sort_columns.get(sort_column) if sort_column else None
    if expr is None:
        expr = descriptor.id_column
    clauses = [expr.desc() if direction == SortDirection.DESC else expr.asc()]
    # identifier tie-break keeps pages stable across requests
    if expr is not descriptor.id_column:
        clauses.append(descriptor.id_column.asc())
    return clauses


def _joined(statement, descriptor: TableDescriptor):
    for relationship in descriptor.joins:
        statement = statement.outerjoin(relationship)
    return statement


def _row_statement(descriptor: TableDescriptor):
    statement = _joined(select(descriptor.model), descriptor)
    options = [contains_eager(rel) for rel in descriptor.joins]
    options.extend(selectinload(rel) for rel in descriptor.collections)
    if options:
        statement = statement.options(*options)
    return statement


def _count(session: Session, descriptor: TableDescriptor, criteria=None) -> int:
    statement = _joined(
        select(func.count()).select_from(descriptor.model), descriptor
    )
    if criteria is not None:
        statement = statement.where(criteria)
    return int(session.exec(statement).one())


def execute(
    session: Session,
    request: QueryRequest,
    descriptor: TableDescriptor,
) -> Union[QueryResponse, QueryError]:
    """Produce one page for a grid.

    Never raises: any failure is logged and returned as `QueryError`, so the
    widget always receives a JSON body. Callers tell success from failure by
    the type (on the wire: by the presence of an ``error`` key).
    """
    try:
        records_total = _count(session, descriptor)

        criteria = _search_criteria(descriptor, request.search_term)
        if criteria is None:
            records_filtered = records_total
        else:
            records_filtered = _count(session, descriptor, criteria)

        statement = _row_statement(descriptor)
        if criteria is not None:
            statement = statement.where(criteria)
        statement = (
            statement.order_by(
                *_order_by(descriptor, request.sort_column, request.sort_direction)
            )
            .offset(request.start)
            .limit(request.length)
        )
        rows = session.exec(statement).all()

        data = [descriptor.projection(row, descriptor.placeholder) for row in rows]
        return QueryResponse(
            draw=request.draw,
            records_total=records_total,
            records_filtered=records_filtered,
            data=data,
        )
    except Exception as e:
        logger.error(
            f"Grid query failed for {descriptor.name}: {e}",
            exc_info=True,
            extra={"endpoint": descriptor.name},
        )
        return QueryError(error=str(e))


def collect_rows(
    session: Session,
    descriptor: TableDescriptor,
    search_term: Optional[str] = None,
    sort_column: Optional[str] = None,
    sort_direction: SortDirection = SortDirection.ASC,
) -> List[Dict[str, Any]]:
    """All matching rows, projected, unpaged. Errors propagate."""
    statement = _row_statement(descriptor)
    criteria = _search_criteria(descriptor, search_term)
    if criteria is not None:
        statement = statement.where(criteria)
    statement = statement.order_by(*_order_by(descriptor, sort_column, sort_direction))
    rows = session.exec(statement).all()
    return [descriptor.projection(row, descriptor.placeholder) for row in rows]
