"""Pydantic models for API request payloads."""

from datetime import datetime

from pydantic import BaseModel, Field

from upload_tracker.domain.uploads import FileDescriptor, UploadDraft, UploadStatus


class UploadPayload(BaseModel):
    """Upload fields accepted on create and update."""

    name: str
    size: int = Field(ge=0)
    type: str
    status: UploadStatus | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    uploaded_at: datetime | None = None
    url: str | None = None

    def to_draft(self) -> UploadDraft:
        """Convert to the domain draft."""
        return UploadDraft(
            name=self.name,
            size=self.size,
            type=self.type,
            status=self.status,
            progress=self.progress,
            uploaded_at=self.uploaded_at,
            url=self.url,
        )


class FilePayload(BaseModel):
    """Candidate file metadata submitted for validation."""

    name: str = ""
    size: int = Field(ge=0)
    type: str

    def to_descriptor(self) -> FileDescriptor:
        """Convert to the domain descriptor."""
        return FileDescriptor(name=self.name, size=self.size, type=self.type)


class SessionPayload(BaseModel):
    """Upload ids grouped into a new session."""

    upload_ids: list[int]
