"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from upload_tracker.api.schemas import FilePayload, SessionPayload, UploadPayload
from upload_tracker.app_logging import configure_logging
from upload_tracker.containers import AppContainer
from upload_tracker.domain.errors import (
    NotFoundError,
    SizeExceededError,
    UnsupportedTypeError,
    UploadError,
)
from upload_tracker.domain.uploads import Upload, UploadSession

_ERROR_STATUS: list[tuple[type[UploadError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (SizeExceededError, status.HTTP_413_CONTENT_TOO_LARGE),
    (UnsupportedTypeError, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE),
]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(UploadError)
    async def upload_error_handler(request: Request, exc: UploadError) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning("Record store failure on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"detail": exc.message})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/uploads")
    async def list_uploads(request: Request) -> list[Upload]:
        """Return the most recent uploads."""
        state_container: AppContainer = request.app.state.container
        return await state_container.upload_service.get_all()

    @app.get("/uploads/history")
    async def upload_history(request: Request) -> list[Upload]:
        """Return completed uploads, newest first."""
        state_container: AppContainer = request.app.state.container
        return await state_container.upload_service.get_history()

    @app.post("/uploads/validate")
    async def validate_upload(
        payload: FilePayload, request: Request
    ) -> dict[str, bool]:
        """Validate file metadata before uploading."""
        state_container: AppContainer = request.app.state.container
        valid = await state_container.upload_service.validate_file(
            payload.to_descriptor()
        )
        return {"valid": valid}

    @app.get("/uploads/{upload_id}")
    async def get_upload(upload_id: int, request: Request) -> Upload:
        """Return one upload."""
        state_container: AppContainer = request.app.state.container
        return await state_container.upload_service.get_by_id(upload_id)

    @app.post("/uploads", status_code=status.HTTP_201_CREATED)
    async def create_upload(payload: UploadPayload, request: Request) -> Upload:
        """Create an upload record."""
        state_container: AppContainer = request.app.state.container
        return await state_container.upload_service.create(payload.to_draft())

    @app.put("/uploads/{upload_id}")
    async def update_upload(
        upload_id: int, payload: UploadPayload, request: Request
    ) -> Upload:
        """Overwrite an upload record."""
        state_container: AppContainer = request.app.state.container
        return await state_container.upload_service.update(
            upload_id, payload.to_draft()
        )

    @app.delete("/uploads/{upload_id}")
    async def delete_upload(upload_id: int, request: Request) -> dict[str, bool]:
        """Delete an upload record."""
        state_container: AppContainer = request.app.state.container
        deleted = await state_container.upload_service.delete(upload_id)
        return {"deleted": deleted}

    @app.post("/uploads/{upload_id}/simulate")
    async def simulate_upload(upload_id: int, request: Request) -> Upload:
        """Run the simulated upload to completion."""
        state_container: AppContainer = request.app.state.container

        def log_progress(progress: int) -> None:
            logger.info("Upload %s at %s%%", upload_id, progress)

        return await state_container.upload_service.simulate_upload(
            upload_id, on_progress=log_progress
        )

    @app.post("/sessions", status_code=status.HTTP_201_CREATED)
    async def create_session(
        payload: SessionPayload, request: Request
    ) -> UploadSession:
        """Group existing uploads into a session."""
        state_container: AppContainer = request.app.state.container
        service = state_container.upload_service
        uploads = [
            await service.get_by_id(upload_id) for upload_id in payload.upload_ids
        ]
        return await service.create_session(uploads)

    @app.post("/sessions/{session_id}/complete")
    async def complete_session(session_id: int, request: Request) -> UploadSession:
        """Mark a session as completed."""
        state_container: AppContainer = request.app.state.container
        return await state_container.upload_service.complete_session(session_id)

    return app


def _status_for(exc: UploadError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_502_BAD_GATEWAY
