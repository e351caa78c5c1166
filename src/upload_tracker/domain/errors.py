"""Errors raised by upload operations."""


class UploadError(Exception):
    """Base error for upload operations."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(UploadError):
    """Requested record does not exist or could not be read."""


class RecordStoreError(UploadError):
    """The record store reported a failed write."""


class CreationError(RecordStoreError):
    """Creating a record failed."""


class UpdateError(RecordStoreError):
    """Updating a record failed."""


class DeletionError(RecordStoreError):
    """Deleting a record failed."""


class CompletionError(RecordStoreError):
    """Completing an upload session failed."""


class ValidationError(UploadError):
    """A candidate file was rejected."""


class SizeExceededError(ValidationError):
    """File is larger than the upload limit."""

    def __init__(self, size_mb: float) -> None:
        super().__init__(f"File size exceeds 10MB limit. Current size: {size_mb:.2f}MB")
        self.size_mb = size_mb


class UnsupportedTypeError(ValidationError):
    """File MIME type is not on the allow-list."""

    def __init__(self, mime_type: str) -> None:
        super().__init__(
            f'File type "{mime_type}" is not allowed. '
            "Supported types: images, PDF, Word documents, text files."
        )
        self.mime_type = mime_type
