"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from upload_tracker.adapters.record_store_client import HttpxRecordStoreClient
from upload_tracker.adapters.supabase_record_store import SupabaseRecordStore
from upload_tracker.config import Settings, missing_settings
from upload_tracker.services.uploads import RecordStoreClient, UploadService

_HTTP_SETTINGS = [
    "record_store_url",
    "record_store_project_id",
    "record_store_public_key",
]
_SUPABASE_SETTINGS = ["supabase_url", "supabase_service_key"]


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    record_store: RecordStoreClient
    upload_service: UploadService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    record_store = _build_record_store(resolved_settings)
    upload_service = UploadService(
        client=record_store,
        progress_step_delay_seconds=resolved_settings.progress_step_delay_seconds,
        validation_delay_seconds=resolved_settings.validation_delay_seconds,
    )

    async def close_resources() -> None:
        if isinstance(record_store, HttpxRecordStoreClient):
            await record_store.close()

    return AppContainer(
        settings=resolved_settings,
        record_store=record_store,
        upload_service=upload_service,
        close_resources=close_resources,
    )


def _build_record_store(settings: Settings) -> RecordStoreClient:
    """Create the record store selected by settings."""
    backend = settings.record_store_backend
    if backend == "http":
        _require(settings, _HTTP_SETTINGS, backend)
        return HttpxRecordStoreClient.create(
            base_url=settings.record_store_url,
            project_id=settings.record_store_project_id,
            public_key=settings.record_store_public_key,
            timeout=settings.record_store_timeout_seconds,
        )
    if backend == "supabase":
        _require(settings, _SUPABASE_SETTINGS, backend)
        supabase_client = create_client(
            settings.supabase_url, settings.supabase_service_key
        )
        return SupabaseRecordStore(supabase_client)
    raise ValueError(f"Unknown record store backend: {backend}")


def _require(settings: Settings, names: list[str], backend: str) -> None:
    missing = missing_settings(settings, names)
    if missing:
        raise ValueError(
            f"Missing settings for {backend} record store: {', '.join(missing)}"
        )
