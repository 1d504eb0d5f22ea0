"""Preview link issuer.

Every call mints a fresh signed URL with a fixed 60 second lifetime; nothing
is cached, since the object behind a path can change between previews.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from .errors import PreviewUnavailableError
from .ports.object_storage_port import ObjectStoragePort, StorageError
from .validation import is_owned_path

logger = logging.getLogger(__name__)

PREVIEW_TTL_SECONDS = 60


@dataclass
class PreviewLink:
    """A short-lived read-only URL for one stored document"""
    url: str
    storage_path: str
    expires_in_seconds: int
    expires_at: datetime


class PreviewLinkIssuer:
    """Issues time-limited preview URLs for documents in the owner's namespace."""

    def __init__(self, storage: ObjectStoragePort, ttl_seconds: int = PREVIEW_TTL_SECONDS):
        self.storage = storage
        self.ttl_seconds = ttl_seconds

    async def issue_preview(self, owner_id: UUID, storage_path: str) -> PreviewLink:
        """Mint a new preview URL for storage_path.

        Args:
            owner_id: Authenticated owner; the path must be in their namespace
            storage_path: Path of a stored document ({owner}/{filename})

        Returns:
            PreviewLink valid for ttl_seconds

        Raises:
            PreviewUnavailableError: Path not owned, not found, or the store
                could not sign a URL
        """
        if not is_owned_path(owner_id, storage_path):
            logger.warning(
                f"Preview refused for path outside owner namespace: {storage_path}",
                extra={"owner_id": owner_id, "storage_path": storage_path},
            )
            raise PreviewUnavailableError(storage_path)

        try:
            url = await self.storage.get_signed_url(storage_path, self.ttl_seconds)
        except FileNotFoundError as e:
            logger.warning(
                f"Preview requested for missing object: {storage_path}",
                extra={"owner_id": owner_id, "storage_path": storage_path},
            )
            raise PreviewUnavailableError(storage_path) from e
        except StorageError as e:
            logger.error(
                f"Preview URL generation failed: storage_path={storage_path}, error={e}",
                extra={"owner_id": owner_id, "storage_path": storage_path},
            )
            raise PreviewUnavailableError(storage_path) from e

        issued_at = datetime.now(timezone.utc)
        return PreviewLink(
            url=url,
            storage_path=storage_path,
            expires_in_seconds=self.ttl_seconds,
            expires_at=issued_at + timedelta(seconds=self.ttl_seconds),
        )
