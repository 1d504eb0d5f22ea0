"""Object Storage Port - Domain interface for the document blob store.

This port defines the narrow contract the lifecycle needs from durable storage:
conditional/unconditional puts with a typed conflict signal, time-limited
signed URLs, and idempotent namespace creation.

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional

from config import get_settings

from ..errors import RejectionReason
from ..validation import UPLOAD_ALLOWED_TYPES, is_eligible, validate_file_size


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class PutResult(str, Enum):
    """Outcome of a put that did not fail outright"""
    OK = "ok"
    CONFLICT = "conflict"  # overwrite=False and an object already exists


@dataclass(frozen=True)
class NamespaceConstraints:
    """Limits enforced by the store for every object in a namespace.

    Attributes:
        max_size_bytes: Largest accepted object (default: MAX_UPLOAD_SIZE_BYTES)
        allowed_types: MIME allow-list, prefix entries end with '/'
    """
    max_size_bytes: int = field(default_factory=lambda: get_settings().MAX_UPLOAD_SIZE_BYTES)
    allowed_types: FrozenSet[str] = field(default_factory=lambda: UPLOAD_ALLOWED_TYPES)

    def check(self, size_bytes: int, content_type: Optional[str]) -> Optional[RejectionReason]:
        """Return the reason a file would be refused, or None if it fits.

        Size is checked before type.
        """
        fits, _ = validate_file_size(size_bytes, self.max_size_bytes)
        if not fits:
            return RejectionReason.TOO_LARGE
        if not is_eligible(content_type, self.allowed_types):
            return RejectionReason.UNSUPPORTED_TYPE
        return None


class ObjectStoragePort(ABC):
    """Port interface for the document blob store.

    Key Design Principles:
    - The store is the only authority for "does this path exist"; concurrent
      creates on one path resolve to exactly one OK and one CONFLICT
    - Namespace constraints are checked before any bytes are sent
    - Signed URLs are time-bound, not single-use

    Example Usage:
        storage = S3StorageAdapter(...)
        await storage.ensure_namespace(NamespaceConstraints())

        result = await storage.put(
            path='u1/report.pdf',
            data=b'%PDF-1.4...',
            content_type='application/pdf',
            overwrite=False,
        )
        if result is PutResult.CONFLICT:
            ...

        url = await storage.get_signed_url('u1/report.pdf', ttl_seconds=60)
    """

    @abstractmethod
    async def ensure_namespace(self, constraints: NamespaceConstraints) -> None:
        """Create the storage namespace if missing and record its constraints.

        Idempotent: an already existing namespace is not an error.

        Raises:
            StorageError: If the namespace cannot be checked or created
        """
        pass

    @abstractmethod
    async def put(
        self,
        path: str,
        data: bytes,
        content_type: str,
        overwrite: bool = False,
    ) -> PutResult:
        """Write an object at path.

        Args:
            path: Namespaced key ({owner}/{filename})
            data: Object content
            content_type: Declared MIME type
            overwrite: Replace an existing object instead of signalling conflict

        Returns:
            PutResult.OK on write, PutResult.CONFLICT if overwrite=False and
            an object already exists at path

        Raises:
            UploadRejectedError: If the object violates namespace constraints
                (raised before any write is attempted)
            StorageError: For any other failure
        """
        pass

    @abstractmethod
    async def get_signed_url(self, path: str, ttl_seconds: int) -> str:
        """Generate a read-only capability URL that expires after ttl_seconds.

        Raises:
            FileNotFoundError: If no object exists at path
            StorageError: If URL generation fails
        """
        pass

    @abstractmethod
    async def file_exists(self, path: str) -> bool:
        """Check if an object exists at path."""
        pass
