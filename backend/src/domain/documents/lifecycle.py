"""Document lifecycle service: create, replace, list and review documents.

The object store is written first and is the only authority for whether a
path is taken. Metadata is written second; if that fails the blob stays in
place and MetadataWriteError reports the orphan.
"""

import logging
from typing import List, Optional
from uuid import UUID

from .document_status import DocumentStatus, REVIEW_STATUSES, can_transition
from .errors import (
    DocumentNotFoundError,
    DuplicateNameError,
    InvalidStatusTransitionError,
    MetadataWriteError,
    RejectionReason,
    UploadRejectedError,
)
from .models import DocumentRecord, IncomingFile
from .ports.document_repository_port import DocumentRepositoryPort, RepositoryError
from .ports.object_storage_port import ObjectStoragePort, PutResult
from .validation import build_storage_path, validate_filename

logger = logging.getLogger(__name__)


class DocumentLifecycleService:
    """Owns the pending/verified/rejected lifecycle of uploaded documents.

    Example:
        service = DocumentLifecycleService(storage=storage, repository=repo)
        record = await service.create(owner_id, IncomingFile(
            name='report.pdf',
            content_type='application/pdf',
            content=data,
        ))
        documents = await service.list(owner_id)
    """

    def __init__(
        self,
        storage: ObjectStoragePort,
        repository: DocumentRepositoryPort,
        clear_feedback_on_replace: bool = True,
    ):
        self.storage = storage
        self.repository = repository
        self.clear_feedback_on_replace = clear_feedback_on_replace

    async def create(self, owner_id: UUID, file: IncomingFile) -> DocumentRecord:
        """Upload a new document into the owner's namespace.

        Args:
            owner_id: Authenticated owner
            file: File to store; its name becomes part of the storage path

        Returns:
            DocumentRecord: New row with status=pending

        Raises:
            UploadRejectedError: Name, size or type refused (nothing written)
            DuplicateNameError: An object already exists at {owner}/{name}
                (metadata untouched)
            MetadataWriteError: Blob stored but the row insert failed
            StorageError: Store failure other than conflict
        """
        storage_path = self._storage_path(owner_id, file)

        result = await self.storage.put(
            path=storage_path,
            data=file.content,
            content_type=file.content_type,
            overwrite=False,
        )
        if result is PutResult.CONFLICT:
            logger.info(
                f"Duplicate upload refused: storage_path={storage_path}",
                extra={"owner_id": owner_id, "storage_path": storage_path},
            )
            raise DuplicateNameError(storage_path)

        try:
            record = await self.repository.add(owner_id=owner_id, storage_path=storage_path)
        except RepositoryError as e:
            logger.error(
                f"Metadata insert failed after store write, blob orphaned: "
                f"storage_path={storage_path}, error={e}",
                extra={"owner_id": owner_id, "storage_path": storage_path},
            )
            raise MetadataWriteError(storage_path, cause=e) from e

        logger.info(
            f"Document created: id={record.id}, storage_path={storage_path}, "
            f"size={file.size}",
            extra={"owner_id": owner_id, "storage_path": storage_path},
        )
        return record

    async def update(self, document_id: UUID, owner_id: UUID, file: IncomingFile) -> DocumentRecord:
        """Replace a document's file and reset it to pending.

        The path is recomputed from the new file's name. When the name
        changed, the object at the previous path is left in the store.

        Raises:
            DocumentNotFoundError: No such document for this owner
            UploadRejectedError: Name, size or type refused (nothing written)
            DuplicateNameError: The new name belongs to another of the owner's
                documents
            MetadataWriteError: Blob stored but the row update failed
            StorageError: Store failure
        """
        existing = await self.repository.get_for_owner(document_id, owner_id)
        if existing is None:
            raise DocumentNotFoundError(document_id)

        storage_path = self._storage_path(owner_id, file)

        if storage_path != existing.storage_path:
            # Overwriting would silently change another document's content
            other = await self.repository.find_by_path(owner_id, storage_path)
            if other is not None and other.id != existing.id:
                logger.info(
                    f"Replace refused, path owned by document {other.id}: "
                    f"storage_path={storage_path}",
                    extra={"owner_id": owner_id, "storage_path": storage_path},
                )
                raise DuplicateNameError(storage_path)

        result = await self.storage.put(
            path=storage_path,
            data=file.content,
            content_type=file.content_type,
            overwrite=True,
        )
        if result is PutResult.CONFLICT:
            raise DuplicateNameError(storage_path)

        if storage_path != existing.storage_path:
            logger.warning(
                f"Document renamed on replace, previous object kept: "
                f"old={existing.storage_path}, new={storage_path}",
                extra={"owner_id": owner_id, "storage_path": existing.storage_path},
            )

        try:
            record = await self.repository.replace_content(
                document_id=document_id,
                owner_id=owner_id,
                storage_path=storage_path,
                clear_feedback=self.clear_feedback_on_replace,
            )
        except RepositoryError as e:
            logger.error(
                f"Metadata update failed after store write: "
                f"id={document_id}, storage_path={storage_path}, error={e}",
                extra={"owner_id": owner_id, "storage_path": storage_path},
            )
            raise MetadataWriteError(storage_path, cause=e) from e

        logger.info(
            f"Document replaced: id={document_id}, storage_path={storage_path}, "
            f"previous_status={existing.status.value}",
            extra={"owner_id": owner_id, "storage_path": storage_path},
        )
        return record

    async def list(self, owner_id: UUID) -> List[DocumentRecord]:
        """All documents of the owner, newest first."""
        return await self.repository.list_for_owner(owner_id)

    async def get(self, document_id: UUID, owner_id: UUID) -> DocumentRecord:
        """Load one of the owner's documents.

        Raises:
            DocumentNotFoundError: Missing or owned by someone else
        """
        record = await self.repository.get_for_owner(document_id, owner_id)
        if record is None:
            raise DocumentNotFoundError(document_id)
        return record

    async def review(
        self,
        document_id: UUID,
        status: DocumentStatus,
        feedback: Optional[str] = None,
    ) -> DocumentRecord:
        """Record a reviewer's verdict on a pending document.

        Only VERIFIED or REJECTED may be set here, and only from PENDING.

        Raises:
            DocumentNotFoundError: No such document
            InvalidStatusTransitionError: Target or current status not allowed
        """
        existing = await self.repository.get(document_id)
        if existing is None:
            raise DocumentNotFoundError(document_id)

        if status not in REVIEW_STATUSES or not can_transition(existing.status, status):
            raise InvalidStatusTransitionError(existing.status, status)

        record = await self.repository.set_review(document_id, status, feedback)
        logger.info(
            f"Document reviewed: id={document_id}, status={status.value}",
            extra={"owner_id": record.owner_id, "storage_path": record.storage_path},
        )
        return record

    @staticmethod
    def _storage_path(owner_id: UUID, file: IncomingFile) -> str:
        is_valid, error_msg = validate_filename(file.name)
        if not is_valid:
            raise UploadRejectedError(RejectionReason.INVALID_NAME, error_msg)
        return build_storage_path(owner_id, file.name)
