"""Upload service backed by a remote record store."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any, Protocol

from upload_tracker.domain.errors import (
    CompletionError,
    CreationError,
    DeletionError,
    NotFoundError,
    RecordStoreError,
    SizeExceededError,
    UnsupportedTypeError,
    UpdateError,
)
from upload_tracker.domain.records import (
    FieldFilter,
    RecordQuery,
    RecordResponse,
    SortOrder,
)
from upload_tracker.domain.uploads import (
    FileDescriptor,
    Upload,
    UploadDraft,
    UploadSession,
    UploadStatus,
)

UPLOAD_COLLECTION = "upload_c"
SESSION_COLLECTION = "upload_session_c"

UPLOAD_FIELDS = [
    "Id",
    "name_c",
    "size_c",
    "type_c",
    "status_c",
    "progress_c",
    "uploaded_at_c",
    "url_c",
]

MAX_FILE_SIZE = 10 * 1024 * 1024
ALLOWED_TYPES = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
        "text/csv",
        "application/json",
    }
)

_PAGE_LIMIT = 100
_PROGRESS_STEPS = range(0, 101, 10)

_logger = logging.getLogger(__name__)


class RecordStoreClient(Protocol):
    """Interface for the remote record store."""

    async def fetch_records(
        self, collection: str, query: RecordQuery
    ) -> RecordResponse:
        """Return the records matching a query."""

    async def get_record_by_id(
        self, collection: str, record_id: int, query: RecordQuery
    ) -> RecordResponse:
        """Return a single record by id."""

    async def create_record(
        self, collection: str, records: list[dict[str, object]]
    ) -> RecordResponse:
        """Create records and return per-record results."""

    async def update_record(
        self, collection: str, records: list[dict[str, object]]
    ) -> RecordResponse:
        """Update records by id and return per-record results."""

    async def delete_record(
        self, collection: str, record_ids: list[int]
    ) -> RecordResponse:
        """Delete records by id and return per-record results."""


@dataclass
class UploadService:
    """Maps upload operations onto record store calls."""

    client: RecordStoreClient
    progress_step_delay_seconds: float = 0.15
    validation_delay_seconds: float = 0.1

    async def get_all(self) -> list[Upload]:
        """Return the most recent uploads, or an empty list on failure."""
        query = RecordQuery(
            fields=UPLOAD_FIELDS,
            order_by=[SortOrder("Id", "DESC")],
            limit=_PAGE_LIMIT,
        )
        return await self._fetch_uploads(query, label="uploads")

    async def get_by_id(self, upload_id: int) -> Upload:
        """Return one upload or raise NotFoundError."""
        query = RecordQuery(fields=UPLOAD_FIELDS)
        response = await self.client.get_record_by_id(
            UPLOAD_COLLECTION, int(upload_id), query
        )
        default = f"Upload with ID {upload_id} not found"
        if not response.success:
            _logger.error("Error fetching upload %s: %s", upload_id, response.message)
            raise NotFoundError(response.message or default)
        row = response.row()
        if row is None:
            _logger.error("Error fetching upload %s: no data", upload_id)
            raise NotFoundError(default)
        return _to_upload(row)

    async def create(self, data: UploadDraft) -> Upload:
        """Create an upload, defaulting status to pending and progress to 0."""
        record = _to_record(
            replace(
                data,
                status=data.status or UploadStatus.PENDING,
                progress=data.progress or 0,
            )
        )
        response = await self.client.create_record(UPLOAD_COLLECTION, [record])
        row = _first_success(
            response, CreationError, "Failed to create upload record", "create upload"
        )
        return _to_upload(row)

    async def update(self, upload_id: int, data: UploadDraft) -> Upload:
        """Overwrite every field of an upload."""
        record = {"Id": int(upload_id), **_to_record(data)}
        response = await self.client.update_record(UPLOAD_COLLECTION, [record])
        row = _first_success(
            response, UpdateError, "Failed to update upload record", "update upload"
        )
        return _to_upload(row)

    async def delete(self, upload_id: int) -> bool:
        """Delete an upload and report whether a record was removed."""
        response = await self.client.delete_record(UPLOAD_COLLECTION, [int(upload_id)])
        if not response.success:
            _logger.error("Error deleting upload: %s", response.message)
            raise DeletionError(response.message or "Failed to delete upload record")
        if response.results is None:
            return False
        _raise_failed(response, DeletionError, "delete upload")
        return any(result.success for result in response.results)

    async def simulate_upload(
        self, upload_id: int, on_progress: Callable[[int], None] | None = None
    ) -> Upload:
        """Step an upload through fixed progress writes and mark it completed."""
        upload = await self.get_by_id(upload_id)
        snapshot = upload.to_draft()

        for progress in _PROGRESS_STEPS:
            await asyncio.sleep(self.progress_step_delay_seconds)
            await self.update(
                upload_id,
                replace(snapshot, progress=progress, status=UploadStatus.UPLOADING),
            )
            _logger.debug("Upload %s progress %s%%", upload_id, progress)
            if on_progress is not None:
                on_progress(progress)

        return await self.update(
            upload_id,
            replace(
                snapshot,
                status=UploadStatus.COMPLETED,
                progress=100,
                url=f"/uploads/{upload.name}",
                uploaded_at=datetime.now(tz=UTC),
            ),
        )

    async def validate_file(self, file: FileDescriptor) -> bool:
        """Check a candidate file against the size limit and type allow-list."""
        await asyncio.sleep(self.validation_delay_seconds)
        return validate_file(file)

    async def create_session(self, files: Sequence[Upload]) -> UploadSession:
        """Create a session grouping the given uploads."""
        total_size = sum(upload.size for upload in files)
        record: dict[str, object] = {
            "files_c": ",".join(str(upload.id) for upload in files),
            "total_size_c": total_size,
            "started_at_c": datetime.now(tz=UTC).isoformat(),
            "completed_at_c": None,
        }
        response = await self.client.create_record(SESSION_COLLECTION, [record])
        if not response.success:
            _logger.error("Error creating session: %s", response.message)
            raise CreationError(response.message or "Failed to create upload session")
        row = _leading_result(response)
        if row is None:
            raise CreationError("Failed to create upload session")
        return _to_session(row)

    async def complete_session(self, session_id: int) -> UploadSession:
        """Stamp the completion time on a session."""
        record: dict[str, object] = {
            "Id": int(session_id),
            "completed_at_c": datetime.now(tz=UTC).isoformat(),
        }
        response = await self.client.update_record(SESSION_COLLECTION, [record])
        if not response.success:
            _logger.error("Error completing session: %s", response.message)
            raise CompletionError(
                response.message or "Failed to complete upload session"
            )
        row = _leading_result(response)
        if row is None:
            first = response.results[0] if response.results else None
            message = first.message if first is not None else None
            _logger.error("Error completing session %s: %s", session_id, message)
            raise NotFoundError(
                message or f"Upload session with ID {session_id} not found"
            )
        return _to_session(row)

    async def get_history(self) -> list[Upload]:
        """Return completed uploads, newest first, or an empty list on failure."""
        query = RecordQuery(
            fields=UPLOAD_FIELDS,
            where=[
                FieldFilter("status_c", "EqualTo", [UploadStatus.COMPLETED.value]),
                FieldFilter("uploaded_at_c", "HasValue", [""]),
            ],
            order_by=[SortOrder("uploaded_at_c", "DESC")],
            limit=_PAGE_LIMIT,
        )
        return await self._fetch_uploads(query, label="upload history")

    async def _fetch_uploads(self, query: RecordQuery, *, label: str) -> list[Upload]:
        """Fetch and map uploads, swallowing every failure."""
        try:
            response = await self.client.fetch_records(UPLOAD_COLLECTION, query)
            if not response.success:
                _logger.error("Error fetching %s: %s", label, response.message)
                return []
            rows = response.rows()
        except Exception:
            _logger.exception("Error fetching %s", label)
            return []
        uploads: list[Upload] = []
        for row in rows:
            try:
                uploads.append(_to_upload(row))
            except (KeyError, TypeError, ValueError):
                _logger.exception("Skipping malformed upload row %s", row.get("Id"))
        return uploads


def validate_file(file: FileDescriptor) -> bool:
    """Raise if the file is too large or of a disallowed type."""
    if file.size > MAX_FILE_SIZE:
        raise SizeExceededError(round(file.size / 1024 / 1024, 2))
    if file.type not in ALLOWED_TYPES:
        raise UnsupportedTypeError(file.type)
    return True


def _first_success(
    response: RecordResponse,
    error: type[RecordStoreError],
    default: str,
    action: str,
) -> dict[str, Any]:
    """Return the first successful row of a write or raise the given error."""
    if not response.success:
        _logger.error("Failed to %s: %s", action, response.message)
        raise error(response.message or default)
    if response.results:
        _raise_failed(response, error, action)
        for result in response.results:
            if result.success and result.data is not None:
                return result.data
    raise error(default)


def _raise_failed(
    response: RecordResponse, error: type[RecordStoreError], action: str
) -> None:
    failed = [result for result in response.results or [] if not result.success]
    if not failed:
        return
    _logger.error(
        "Failed to %s: %s", action, [result.model_dump() for result in failed]
    )
    for result in failed:
        if result.message:
            raise error(result.message)


def _leading_result(response: RecordResponse) -> dict[str, Any] | None:
    if not response.results:
        return None
    first = response.results[0]
    if not first.success:
        return None
    return first.data


def _to_record(data: UploadDraft) -> dict[str, object]:
    """Map domain fields to record store fields."""
    return {
        "name_c": data.name,
        "size_c": data.size,
        "type_c": data.type,
        "status_c": data.status.value if data.status else None,
        "progress_c": data.progress,
        "uploaded_at_c": data.uploaded_at.isoformat() if data.uploaded_at else None,
        "url_c": data.url,
    }


def _to_upload(row: dict[str, Any]) -> Upload:
    """Map a record store row to an upload."""
    return Upload(
        id=int(row["Id"]),
        name=str(row.get("name_c") or ""),
        size=int(row.get("size_c") or 0),
        type=str(row.get("type_c") or ""),
        status=_parse_status(row.get("status_c")),
        progress=int(row.get("progress_c") or 0),
        uploaded_at=_parse_timestamp(row.get("uploaded_at_c")),
        url=row.get("url_c") or None,
    )


def _to_session(row: dict[str, Any]) -> UploadSession:
    """Map a record store row to an upload session."""
    files_raw = row.get("files_c")
    files = (
        [int(chunk) for chunk in str(files_raw).split(",") if chunk.strip()]
        if files_raw
        else []
    )
    return UploadSession(
        id=int(row["Id"]),
        files=files,
        total_size=int(row.get("total_size_c") or 0),
        started_at=_parse_timestamp(row.get("started_at_c")),
        completed_at=_parse_timestamp(row.get("completed_at_c")),
    )


def _parse_status(raw: object) -> UploadStatus | None:
    if not raw:
        return None
    try:
        return UploadStatus(raw)
    except ValueError:
        _logger.warning("Unknown upload status %r", raw)
        return None


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, str) and raw:
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            _logger.warning("Unparseable timestamp %r", raw)
    return None
