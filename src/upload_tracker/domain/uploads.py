"""Domain models for uploads and upload sessions."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class UploadStatus(str, Enum):
    """Lifecycle states of an upload."""

    PENDING = "pending"
    UPLOADING = "uploading"
    COMPLETED = "completed"


@dataclass(frozen=True)
class UploadDraft:
    """Writable fields of an upload record."""

    name: str
    size: int
    type: str
    status: UploadStatus | None = None
    progress: int | None = None
    uploaded_at: datetime | None = None
    url: str | None = None


@dataclass(frozen=True)
class Upload:
    """Represents an upload stored in the record store."""

    id: int
    name: str
    size: int
    type: str
    status: UploadStatus | None
    progress: int
    uploaded_at: datetime | None = None
    url: str | None = None

    def to_draft(self) -> UploadDraft:
        """Return the writable fields of this upload."""
        return UploadDraft(
            name=self.name,
            size=self.size,
            type=self.type,
            status=self.status,
            progress=self.progress,
            uploaded_at=self.uploaded_at,
            url=self.url,
        )


@dataclass(frozen=True)
class UploadSession:
    """Group of uploads sent together."""

    id: int
    files: list[int]
    total_size: int
    started_at: datetime | None
    completed_at: datetime | None = None


@dataclass(frozen=True)
class FileDescriptor:
    """Candidate file submitted for validation."""

    name: str
    size: int
    type: str
