"""Document repository for database operations"""

import asyncio
import logging
from functools import partial
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.document import Document as DocumentModel
from domain.documents.document_status import DocumentStatus
from domain.documents.models import DocumentRecord
from domain.documents.ports.document_repository_port import (
    DocumentRepositoryPort,
    RepositoryError,
)

logger = logging.getLogger(__name__)


def _to_record(row: DocumentModel) -> DocumentRecord:
    return DocumentRecord(
        id=row.id,
        owner_id=row.owner_id,
        storage_path=row.storage_path,
        status=DocumentStatus(row.status),
        feedback=row.feedback,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _owned_row(db: Session, document_id: UUID, owner_id: UUID) -> Optional[DocumentModel]:
    stmt = select(DocumentModel).where(
        DocumentModel.id == document_id,
        DocumentModel.owner_id == owner_id,
    )
    return db.execute(stmt).scalar_one_or_none()


class SQLAlchemyDocumentRepository(DocumentRepositoryPort):
    """Repository for document table operations.

    Every owner-facing query filters on owner_id. Write failures are rolled
    back and re-raised as RepositoryError.

    Each call opens its own session and runs it in the default executor, so
    the synchronous driver never blocks the event loop.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize repository with a session factory.

        Args:
            session_factory: Callable returning a new SQLAlchemy session
                (e.g. database.SessionLocal)
        """
        self.session_factory = session_factory

    async def _run(self, func, *args):
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, partial(func, *args))

    def _commit(self, db: Session, row: DocumentModel) -> DocumentRecord:
        try:
            db.commit()
            db.refresh(row)
        except SQLAlchemyError as e:
            db.rollback()
            raise RepositoryError(str(e)) from e
        return _to_record(row)

    # Synchronous bodies, executed off the event loop

    def _add(self, owner_id: UUID, storage_path: str) -> DocumentRecord:
        with self.session_factory() as db:
            row = DocumentModel(
                owner_id=owner_id,
                storage_path=storage_path,
                status=DocumentStatus.PENDING,
                feedback=None,
            )
            db.add(row)
            return self._commit(db, row)

    def _get(self, document_id: UUID) -> Optional[DocumentRecord]:
        with self.session_factory() as db:
            row = db.get(DocumentModel, document_id)
            return _to_record(row) if row is not None else None

    def _get_for_owner(self, document_id: UUID, owner_id: UUID) -> Optional[DocumentRecord]:
        with self.session_factory() as db:
            row = _owned_row(db, document_id, owner_id)
            return _to_record(row) if row is not None else None

    def _find_by_path(self, owner_id: UUID, storage_path: str) -> Optional[DocumentRecord]:
        with self.session_factory() as db:
            stmt = select(DocumentModel).where(
                DocumentModel.owner_id == owner_id,
                DocumentModel.storage_path == storage_path,
            )
            row = db.execute(stmt).scalar_one_or_none()
            return _to_record(row) if row is not None else None

    def _list_for_owner(self, owner_id: UUID) -> List[DocumentRecord]:
        with self.session_factory() as db:
            stmt = (
                select(DocumentModel)
                .where(DocumentModel.owner_id == owner_id)
                .order_by(DocumentModel.created_at.desc())
            )
            return [_to_record(row) for row in db.execute(stmt).scalars().all()]

    def _replace_content(
        self,
        document_id: UUID,
        owner_id: UUID,
        storage_path: str,
        clear_feedback: bool,
    ) -> DocumentRecord:
        with self.session_factory() as db:
            row = _owned_row(db, document_id, owner_id)
            if row is None:
                raise RepositoryError(f"Document {document_id} no longer exists")

            row.storage_path = storage_path
            row.status = DocumentStatus.PENDING
            if clear_feedback:
                row.feedback = None
            return self._commit(db, row)

    def _set_review(
        self,
        document_id: UUID,
        status: DocumentStatus,
        feedback: Optional[str],
    ) -> DocumentRecord:
        with self.session_factory() as db:
            row = db.get(DocumentModel, document_id)
            if row is None:
                raise RepositoryError(f"Document {document_id} no longer exists")

            row.status = status
            row.feedback = feedback
            return self._commit(db, row)

    # DocumentRepositoryPort

    async def add(self, owner_id: UUID, storage_path: str) -> DocumentRecord:
        return await self._run(self._add, owner_id, storage_path)

    async def get(self, document_id: UUID) -> Optional[DocumentRecord]:
        return await self._run(self._get, document_id)

    async def get_for_owner(self, document_id: UUID, owner_id: UUID) -> Optional[DocumentRecord]:
        return await self._run(self._get_for_owner, document_id, owner_id)

    async def find_by_path(self, owner_id: UUID, storage_path: str) -> Optional[DocumentRecord]:
        return await self._run(self._find_by_path, owner_id, storage_path)

    async def list_for_owner(self, owner_id: UUID) -> List[DocumentRecord]:
        return await self._run(self._list_for_owner, owner_id)

    async def replace_content(
        self,
        document_id: UUID,
        owner_id: UUID,
        storage_path: str,
        clear_feedback: bool = True,
    ) -> DocumentRecord:
        return await self._run(
            self._replace_content, document_id, owner_id, storage_path, clear_feedback
        )

    async def set_review(
        self,
        document_id: UUID,
        status: DocumentStatus,
        feedback: Optional[str],
    ) -> DocumentRecord:
        return await self._run(self._set_review, document_id, status, feedback)
