"""Wire models for the remote record store."""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel


@dataclass(frozen=True)
class FieldFilter:
    """Filter predicate applied to a record field."""

    field: str
    operator: str
    values: list[object]


@dataclass(frozen=True)
class SortOrder:
    """Sort key and direction for a query."""

    field: str
    direction: str = "DESC"


@dataclass(frozen=True)
class RecordQuery:
    """Field selection, filters, ordering and paging for a fetch."""

    fields: list[str]
    where: list[FieldFilter] = field(default_factory=list)
    order_by: list[SortOrder] = field(default_factory=list)
    limit: int | None = None
    offset: int = 0

    def to_payload(self) -> dict[str, object]:
        """Render the query in the record store's JSON shape."""
        payload: dict[str, object] = {
            "fields": [{"field": {"Name": name}} for name in self.fields],
        }
        if self.where:
            payload["where"] = [
                {
                    "FieldName": predicate.field,
                    "Operator": predicate.operator,
                    "Values": list(predicate.values),
                }
                for predicate in self.where
            ]
        if self.order_by:
            payload["orderBy"] = [
                {"fieldName": order.field, "sorttype": order.direction}
                for order in self.order_by
            ]
        if self.limit is not None:
            payload["pagingInfo"] = {"limit": self.limit, "offset": self.offset}
        return payload


class RecordResult(BaseModel):
    """Outcome for a single record in a batch write."""

    success: bool
    message: str | None = None
    data: dict[str, Any] | None = None


class RecordResponse(BaseModel):
    """Response envelope returned by every record store call."""

    success: bool
    message: str | None = None
    data: list[dict[str, Any]] | dict[str, Any] | None = None
    results: list[RecordResult] | None = None

    def rows(self) -> list[dict[str, Any]]:
        """Return fetched rows as a list."""
        if isinstance(self.data, list):
            return self.data
        return []

    def row(self) -> dict[str, Any] | None:
        """Return a single fetched row, if present."""
        if isinstance(self.data, dict):
            return self.data
        return None
