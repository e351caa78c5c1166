"""Shared test fixtures."""

import pytest

from tests.fakes import InMemoryRecordStore
from upload_tracker.config import Settings
from upload_tracker.containers import AppContainer
from upload_tracker.services.uploads import UploadService


@pytest.fixture
def settings() -> Settings:
    return Settings(
        record_store_backend="http",
        record_store_url="https://records.example.com/api",
        record_store_project_id="project-1",
        record_store_public_key="public-key",
        progress_step_delay_seconds=0,
        validation_delay_seconds=0,
    )


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def upload_service(record_store: InMemoryRecordStore) -> UploadService:
    return UploadService(
        client=record_store,
        progress_step_delay_seconds=0,
        validation_delay_seconds=0,
    )


@pytest.fixture
def container(
    settings: Settings,
    record_store: InMemoryRecordStore,
    upload_service: UploadService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        record_store=record_store,
        upload_service=upload_service,
        close_resources=close_resources,
    )
