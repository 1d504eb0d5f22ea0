"""Document domain models"""

from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Optional, Union
from uuid import UUID

from .document_status import DocumentStatus


@dataclass
class IncomingFile:
    """A file handed to the core by the caller.

    Only `content` and `content_type` influence uploads and comparisons;
    `name` is the original filename and `last_modified` is display only.
    Comparisons also accept a readable binary stream as `content`; uploads
    need bytes.
    """
    name: str
    content_type: str
    content: Union[bytes, BinaryIO]
    last_modified: Optional[datetime] = None

    @property
    def size(self) -> Optional[int]:
        if isinstance(self.content, (bytes, bytearray, memoryview)):
            return len(self.content)
        return None


# Comparison inputs carry the same fields as uploads
ComparableFile = IncomingFile


@dataclass
class DocumentRecord:
    """Represents a stored document's metadata.

    This is the domain model (not the database model). Records are never
    cached beyond one request; re-fetch after every mutation.
    """
    id: UUID
    owner_id: UUID
    storage_path: str
    status: DocumentStatus
    created_at: datetime
    feedback: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def file_name(self) -> str:
        return self.storage_path.rsplit("/", 1)[-1]
