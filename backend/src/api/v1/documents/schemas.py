"""Document API request/response schemas"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.documents.models import DocumentRecord
from domain.documents.preview import PreviewLink


class DocumentResponse(BaseModel):
    """Metadata of one uploaded document"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Document ID")
    storage_path: str = Field(..., description="Namespaced path ({owner}/{filename})")
    file_name: str = Field(..., description="Original filename")
    status: str = Field(..., description="pending, verified or rejected")
    feedback: Optional[str] = Field(None, description="Reviewer feedback, if any")
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: DocumentRecord) -> "DocumentResponse":
        return cls(
            id=record.id,
            storage_path=record.storage_path,
            file_name=record.file_name,
            status=record.status.value,
            feedback=record.feedback,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class DocumentListResponse(BaseModel):
    """Owner's documents, newest first"""
    items: List[DocumentResponse]
    total: int


class PreviewRequest(BaseModel):
    storage_path: str = Field(..., min_length=1, description="Path of a stored document")


class PreviewResponse(BaseModel):
    """Short-lived preview URL"""
    url: str = Field(..., description="Signed read URL")
    expires_in_seconds: int = Field(..., description="Lifetime of the URL")
    expires_at: datetime

    @classmethod
    def from_link(cls, link: PreviewLink) -> "PreviewResponse":
        return cls(
            url=link.url,
            expires_in_seconds=link.expires_in_seconds,
            expires_at=link.expires_at,
        )


class ErrorResponse(BaseModel):
    """Single user-facing error message"""
    error: str = Field(..., description="Error code (e.g., duplicate_name, too_large)")
    message: str = Field(..., description="Human-readable error message")
