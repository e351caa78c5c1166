"""Tests for upload sessions."""

import asyncio

import pytest

from tests.fakes import InMemoryRecordStore
from upload_tracker.domain.errors import CompletionError, CreationError, NotFoundError
from upload_tracker.domain.records import RecordResponse, RecordResult
from upload_tracker.domain.uploads import Upload, UploadStatus
from upload_tracker.services.uploads import SESSION_COLLECTION, UploadService


def _upload(upload_id: int, size: int) -> Upload:
    return Upload(
        id=upload_id,
        name=f"file-{upload_id}",
        size=size,
        type="text/plain",
        status=UploadStatus.COMPLETED,
        progress=100,
    )


def test_create_session_sums_sizes_and_joins_ids(
    upload_service: UploadService, record_store: InMemoryRecordStore
) -> None:
    session = asyncio.run(
        upload_service.create_session([_upload(1, 100), _upload(2, 200)])
    )

    assert session.total_size == 300
    assert session.files == [1, 2]
    assert session.started_at is not None
    assert session.completed_at is None
    row = record_store.tables[SESSION_COLLECTION][session.id]
    assert row["files_c"] == "1,2"
    assert row["completed_at_c"] is None


def test_create_session_with_no_files(upload_service: UploadService) -> None:
    session = asyncio.run(upload_service.create_session([]))

    assert session.files == []
    assert session.total_size == 0


def test_create_session_raises_store_message(
    upload_service: UploadService, record_store: InMemoryRecordStore
) -> None:
    record_store.failures["create"] = RecordResponse(success=False, message="denied")

    with pytest.raises(CreationError, match="denied"):
        asyncio.run(upload_service.create_session([_upload(1, 1)]))


def test_create_session_raises_when_first_result_fails(
    upload_service: UploadService, record_store: InMemoryRecordStore
) -> None:
    record_store.failures["create"] = RecordResponse(
        success=True, results=[RecordResult(success=False, message="bad row")]
    )

    with pytest.raises(CreationError, match="Failed to create upload session"):
        asyncio.run(upload_service.create_session([_upload(1, 1)]))


def test_complete_session_sets_completion_time(
    upload_service: UploadService, record_store: InMemoryRecordStore
) -> None:
    created = asyncio.run(upload_service.create_session([_upload(3, 50)]))

    completed = asyncio.run(upload_service.complete_session(created.id))

    assert completed.id == created.id
    assert completed.files == [3]
    assert completed.started_at is not None
    assert completed.completed_at is not None
    assert completed.completed_at >= completed.started_at
    written = record_store.updates(SESSION_COLLECTION)[-1]
    assert set(written) == {"Id", "completed_at_c"}


def test_complete_session_missing_raises_not_found(
    upload_service: UploadService,
) -> None:
    with pytest.raises(NotFoundError):
        asyncio.run(upload_service.complete_session(77))


def test_complete_session_raises_on_store_failure(
    upload_service: UploadService, record_store: InMemoryRecordStore
) -> None:
    record_store.failures["update"] = RecordResponse(success=False)

    with pytest.raises(CompletionError, match="Failed to complete upload session"):
        asyncio.run(upload_service.complete_session(1))


def test_complete_session_keeps_per_record_message(
    upload_service: UploadService, record_store: InMemoryRecordStore
) -> None:
    record_store.failures["update"] = RecordResponse(
        success=True,
        results=[RecordResult(success=False, message="Session is locked")],
    )

    with pytest.raises(NotFoundError, match="Session is locked"):
        asyncio.run(upload_service.complete_session(4))


def test_complete_session_without_results_uses_default_message(
    upload_service: UploadService, record_store: InMemoryRecordStore
) -> None:
    record_store.failures["update"] = RecordResponse(success=True, results=[])

    with pytest.raises(NotFoundError, match="Upload session with ID 4 not found"):
        asyncio.run(upload_service.complete_session(4))
