"""Tests for container wiring."""

import asyncio

import pytest

from upload_tracker.adapters.record_store_client import HttpxRecordStoreClient
from upload_tracker.adapters.supabase_record_store import SupabaseRecordStore
from upload_tracker.config import Settings
from upload_tracker.containers import build_container


def test_build_container_uses_http_store(settings: Settings) -> None:
    container = build_container(settings)

    assert isinstance(container.record_store, HttpxRecordStoreClient)
    assert container.upload_service.client is container.record_store
    assert container.upload_service.progress_step_delay_seconds == 0
    asyncio.run(container.close_resources())


def test_build_container_uses_supabase_store(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    created: list[tuple[str, str]] = []

    def fake_create_client(url: str, key: str) -> object:
        created.append((url, key))
        return object()

    monkeypatch.setattr("upload_tracker.containers.create_client", fake_create_client)
    settings = Settings(
        record_store_backend="supabase",
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
    )

    container = build_container(settings)

    assert isinstance(container.record_store, SupabaseRecordStore)
    assert created == [("https://example.supabase.co", "service-key")]
    asyncio.run(container.close_resources())


def test_build_container_reports_missing_settings() -> None:
    settings = Settings(record_store_backend="http", record_store_url=None)

    with pytest.raises(ValueError, match="RECORD_STORE_URL"):
        build_container(settings)


def test_build_container_rejects_unknown_backend() -> None:
    with pytest.raises(ValueError, match="Unknown record store backend"):
        build_container(Settings(record_store_backend="sqlite"))
