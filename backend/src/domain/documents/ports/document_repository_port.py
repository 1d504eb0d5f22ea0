"""Document Repository Port - Domain interface for document metadata rows.

Every owner-facing lookup takes the owner id; implementations must filter
on it so one owner can never read or mutate another owner's documents.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from ..document_status import DocumentStatus
from ..models import DocumentRecord


class RepositoryError(Exception):
    """Base exception for metadata store operations."""
    pass


class DocumentRepositoryPort(ABC):
    """Port interface for persisting document metadata."""

    @abstractmethod
    async def add(self, owner_id: UUID, storage_path: str) -> DocumentRecord:
        """Insert a new row with status=pending and no feedback.

        Raises:
            RepositoryError: If the insert fails
        """
        pass

    @abstractmethod
    async def get(self, document_id: UUID) -> Optional[DocumentRecord]:
        """Load a document regardless of owner (reviewer use only)."""
        pass

    @abstractmethod
    async def get_for_owner(self, document_id: UUID, owner_id: UUID) -> Optional[DocumentRecord]:
        """Load a document if it exists and belongs to owner_id."""
        pass

    @abstractmethod
    async def find_by_path(self, owner_id: UUID, storage_path: str) -> Optional[DocumentRecord]:
        """Find the owner's document stored at storage_path."""
        pass

    @abstractmethod
    async def list_for_owner(self, owner_id: UUID) -> List[DocumentRecord]:
        """All of the owner's documents, newest first (created_at descending)."""
        pass

    @abstractmethod
    async def replace_content(
        self,
        document_id: UUID,
        owner_id: UUID,
        storage_path: str,
        clear_feedback: bool = True,
    ) -> DocumentRecord:
        """Point an existing row at new content and reset status to pending.

        created_at is left untouched.

        Raises:
            RepositoryError: If the update fails or the row disappeared
        """
        pass

    @abstractmethod
    async def set_review(
        self,
        document_id: UUID,
        status: DocumentStatus,
        feedback: Optional[str],
    ) -> DocumentRecord:
        """Record a reviewer verdict.

        Raises:
            RepositoryError: If the update fails or the row disappeared
        """
        pass
