"""Supabase-backed record store."""

import logging
from dataclasses import dataclass

from postgrest.exceptions import APIError
from supabase import Client

from upload_tracker.domain.records import (
    FieldFilter,
    RecordQuery,
    RecordResponse,
    RecordResult,
)
from upload_tracker.services.uploads import RecordStoreClient

_ID_COLUMN = "Id"

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseRecordStore(RecordStoreClient):
    """Record store implementation over Supabase tables."""

    client: Client

    async def fetch_records(
        self, collection: str, query: RecordQuery
    ) -> RecordResponse:
        """Select rows matching the query filters, order and paging."""
        builder = self.client.table(collection).select(", ".join(query.fields))
        for predicate in query.where:
            builder = _apply_filter(builder, predicate)
        for order in query.order_by:
            builder = builder.order(order.field, desc=order.direction == "DESC")
        if query.limit is not None:
            builder = builder.range(query.offset, query.offset + query.limit - 1)
        try:
            response = builder.execute()
        except APIError as exc:
            return _failure(collection, "fetch", exc)
        return RecordResponse(success=True, data=response.data or [])

    async def get_record_by_id(
        self, collection: str, record_id: int, query: RecordQuery
    ) -> RecordResponse:
        """Select a single row by id."""
        try:
            response = (
                self.client.table(collection)
                .select(", ".join(query.fields))
                .eq(_ID_COLUMN, record_id)
                .limit(1)
                .execute()
            )
        except APIError as exc:
            return _failure(collection, "get", exc)
        row = response.data[0] if response.data else None
        return RecordResponse(success=True, data=row)

    async def create_record(
        self, collection: str, records: list[dict[str, object]]
    ) -> RecordResponse:
        """Insert rows and return one result per inserted row."""
        try:
            response = self.client.table(collection).insert(records).execute()
        except APIError as exc:
            return _failure(collection, "create", exc)
        return RecordResponse(
            success=True,
            results=_row_results(response.data),
        )

    async def update_record(
        self, collection: str, records: list[dict[str, object]]
    ) -> RecordResponse:
        """Update each row by id; rows that match nothing fail individually."""
        results: list[RecordResult] = []
        for record in records:
            payload = {key: value for key, value in record.items() if key != _ID_COLUMN}
            record_id = record[_ID_COLUMN]
            try:
                response = (
                    self.client.table(collection)
                    .update(payload)
                    .eq(_ID_COLUMN, record_id)
                    .execute()
                )
            except APIError as exc:
                return _failure(collection, "update", exc)
            if response.data:
                results.append(RecordResult(success=True, data=response.data[0]))
            else:
                results.append(
                    RecordResult(
                        success=False, message=f"Record {record_id} not found"
                    )
                )
        return RecordResponse(success=True, results=results)

    async def delete_record(
        self, collection: str, record_ids: list[int]
    ) -> RecordResponse:
        """Delete rows by id and return one result per deleted row."""
        try:
            response = (
                self.client.table(collection)
                .delete()
                .in_(_ID_COLUMN, record_ids)
                .execute()
            )
        except APIError as exc:
            return _failure(collection, "delete", exc)
        return RecordResponse(
            success=True,
            results=_row_results(response.data),
        )


def _apply_filter(builder, predicate: FieldFilter):  # type: ignore[no-untyped-def]
    """Translate a record store predicate into a PostgREST filter."""
    if predicate.operator == "EqualTo":
        return builder.eq(predicate.field, predicate.values[0])
    if predicate.operator == "NotEqualTo":
        return builder.neq(predicate.field, predicate.values[0])
    if predicate.operator == "HasValue":
        return builder.not_.is_(predicate.field, "null")
    raise ValueError(f"Unsupported filter operator: {predicate.operator}")


def _failure(collection: str, action: str, exc: APIError) -> RecordResponse:
    _logger.warning("Supabase %s on %s failed: %s", action, collection, exc.message)
    return RecordResponse(success=False, message=exc.message)


def _row_results(rows: list[dict[str, object]] | None) -> list[RecordResult]:
    return [RecordResult(success=True, data=row) for row in rows or []]
