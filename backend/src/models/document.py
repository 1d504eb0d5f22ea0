"""Document SQLAlchemy model

Document represents an uploaded file awaiting or having received review.
Tracks the namespaced storage path, verification status and reviewer feedback.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum as SQLEnum, Index, Text, UniqueConstraint, Uuid

from domain.documents.document_status import DocumentStatus
from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(Base):
    """Document model representing an owner's uploaded file.

    The blob lives in object storage at storage_path ({owner_id}/{file_name});
    (owner_id, storage_path) is unique. created_at is set once and survives
    replacements, updated_at moves on every change.
    """
    __tablename__ = "document"
    __table_args__ = (
        UniqueConstraint("owner_id", "storage_path", name="uq_document_owner_path"),
        Index("ix_document_owner_created", "owner_id", "created_at"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), nullable=False)
    storage_path = Column(Text, nullable=False)
    status = Column(
        SQLEnum(
            DocumentStatus,
            name="documentstatus",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=DocumentStatus.PENDING,
    )
    feedback = Column(Text, nullable=True)  # Set by the reviewer, cleared on replace
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

