"""Domain errors raised by the document lifecycle.

Every error is scoped to a single operation; the HTTP layer turns each one
into exactly one user-facing message.
"""

from enum import Enum
from typing import Optional
from uuid import UUID


class RejectionReason(str, Enum):
    """Why a file was refused before reaching object storage"""
    TOO_LARGE = "too_large"
    UNSUPPORTED_TYPE = "unsupported_type"
    INVALID_NAME = "invalid_name"


class DocumentError(Exception):
    """Base exception for document lifecycle operations."""
    pass


class DuplicateNameError(DocumentError):
    """A file with the same name already exists in the owner's namespace.

    Recoverable: the user renames the file or replaces the existing document.
    """

    def __init__(self, storage_path: str):
        self.storage_path = storage_path
        super().__init__(
            "A file with this name already exists. "
            "Rename your file or update the existing document."
        )


class UploadRejectedError(DocumentError):
    """File violates the namespace constraints (size, type or name)."""

    def __init__(self, reason: RejectionReason, detail: Optional[str] = None):
        self.reason = reason
        self.detail = detail
        super().__init__(detail or _REJECTION_MESSAGES[reason])


class MetadataWriteError(DocumentError):
    """Metadata write failed after the blob was stored.

    The blob at storage_path is left in place (orphaned) and reported.
    """

    def __init__(self, storage_path: str, cause: Optional[Exception] = None):
        self.storage_path = storage_path
        self.cause = cause
        super().__init__(f"Error saving document info for {storage_path}")


class PreviewUnavailableError(DocumentError):
    """A preview link could not be issued for the given path."""

    def __init__(self, storage_path: str, detail: Optional[str] = None):
        self.storage_path = storage_path
        super().__init__(detail or "Could not generate preview URL.")


class DocumentNotFoundError(DocumentError):
    """Document does not exist or belongs to another owner."""

    def __init__(self, document_id: UUID):
        self.document_id = document_id
        super().__init__("Document not found")


class InvalidStatusTransitionError(DocumentError):
    """Requested status change is not allowed by the state machine."""

    def __init__(self, from_status, to_status):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Cannot change document status from "
            f"{getattr(from_status, 'value', from_status)} to "
            f"{getattr(to_status, 'value', to_status)}"
        )


_REJECTION_MESSAGES = {
    RejectionReason.TOO_LARGE: "File size exceeds the maximum allowed limit (10MB).",
    RejectionReason.UNSUPPORTED_TYPE: "Unsupported file type. Allowed: PDF, DOC, DOCX.",
    RejectionReason.INVALID_NAME: "Invalid file name.",
}
