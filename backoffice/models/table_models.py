"""Backoffice — Grid & Lookup Request/Response Shapes.

Wire names follow the server-side grid widget convention
(`draw`, `recordsTotal`, `recordsFiltered`, `data`) and the type-ahead
selector convention (`results`, `pagination.more`).
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortDirection":
        """Case-insensitive; anything other than desc is ascending."""
        if value and value.strip().lower() == "desc":
            return cls.DESC
        return cls.ASC


class QueryRequest(BaseModel):
    """One page request from a server-side grid."""

    draw: int = 0
    start: int = Field(default=0, ge=0)
    length: int = Field(default=10, gt=0)
    search_term: Optional[str] = None
    sort_column: Optional[str] = None
    sort_direction: SortDirection = SortDirection.ASC


class QueryResponse(BaseModel):
    """One page of projected rows plus the counts the widget needs."""

    draw: int
    records_total: int = Field(serialization_alias="recordsTotal")
    records_filtered: int = Field(serialization_alias="recordsFiltered")
    data: List[Dict[str, Any]] = []

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class QueryError(BaseModel):
    """Returned instead of a page when the query could not be built or run."""

    error: str

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump()


class LookupItem(BaseModel):
    id: Any
    label: str
    extra: Dict[str, Any] = {}


class LookupResult(BaseModel):
    results: List[LookupItem] = []
    has_more: bool = False

    def to_wire(self) -> Dict[str, Any]:
        return {
            "results": [
                {"id": item.id, "text": item.label, **item.extra}
                for item in self.results
            ],
            "pagination": {"more": self.has_more},
        }
