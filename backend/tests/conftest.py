"""Pytest fixtures for the document verification service.

Provides reusable test fixtures for:
- In-memory SQLite database (tables created per test) shared by every session
- In-memory object storage implementing ObjectStoragePort
- Lifecycle service, preview issuer and comparison engine wired to the fakes
- Test clients with JWT bearer tokens for two owners

Usage:
    def test_list(owner_client):
        response = owner_client.get("/api/v1/documents")
        assert response.status_code == 200
"""

import os
import sys
import threading
from itertools import count
from pathlib import Path
from typing import Dict, Generator, List, Optional, Tuple
from uuid import UUID

# Set environment variables BEFORE any imports to ensure they take effect
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("MINIO_ROOT_USER", "minioadmin")
os.environ.setdefault("MINIO_ROOT_PASSWORD", "minioadmin")
os.environ.setdefault("MINIO_ENDPOINT", "localhost:9000")
os.environ.setdefault("LOG_JSON", "false")

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from auth.jwt import create_access_token
from database import get_db as database_get_db
from dependencies import get_repository, get_storage
from domain.documents.comparison import ComparisonEngine
from domain.documents.errors import UploadRejectedError
from domain.documents.lifecycle import DocumentLifecycleService
from domain.documents.ports.object_storage_port import (
    NamespaceConstraints,
    ObjectStoragePort,
    PutResult,
    StorageError,
)
from domain.documents.preview import PreviewLinkIssuer
from infrastructure.repositories.document_repository import SQLAlchemyDocumentRepository
from models import Base


PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"
OTHER_PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog /Pages 2 0 R >>\nendobj\n%%EOF\n"
PDF = "application/pdf"

OWNER_ID = UUID("a1b2c3d4-e5f6-7890-abcd-ef1234567890")
OTHER_OWNER_ID = UUID("b2c3d4e5-f6a7-8901-bcde-f12345678901")


class InMemoryObjectStorage(ObjectStoragePort):
    """ObjectStoragePort fake with atomic put-if-absent and counting signed URLs.

    Every put is recorded in `put_calls` (including rejected ones that never
    reach `objects`).
    """

    def __init__(self, constraints: Optional[NamespaceConstraints] = None):
        self.constraints = constraints or NamespaceConstraints()
        self.objects: Dict[str, Tuple[bytes, str]] = {}
        self.put_calls: List[Tuple[str, bool]] = []
        self.signed_url_calls: List[Tuple[str, int]] = []
        self.namespace_created = False
        self.fail_signing = False
        self._lock = threading.Lock()
        self._tokens = count(1)

    async def ensure_namespace(self, constraints: NamespaceConstraints) -> None:
        self.constraints = constraints
        self.namespace_created = True

    async def put(self, path: str, data: bytes, content_type: str, overwrite: bool = False) -> PutResult:
        self.put_calls.append((path, overwrite))
        reason = self.constraints.check(len(data), content_type)
        if reason is not None:
            raise UploadRejectedError(reason)

        with self._lock:
            if not overwrite and path in self.objects:
                return PutResult.CONFLICT
            self.objects[path] = (data, content_type)
        return PutResult.OK

    async def get_signed_url(self, path: str, ttl_seconds: int) -> str:
        self.signed_url_calls.append((path, ttl_seconds))
        if self.fail_signing:
            raise StorageError("signing backend unreachable")
        if path not in self.objects:
            raise FileNotFoundError(f"File not found: {path}")
        return f"https://storage.test/{path}?expires={ttl_seconds}&token={next(self._tokens)}"

    async def file_exists(self, path: str) -> bool:
        return path in self.objects


test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def storage() -> InMemoryObjectStorage:
    return InMemoryObjectStorage()


@pytest.fixture
def repository(db_session: Session) -> SQLAlchemyDocumentRepository:
    """Repository opening its own sessions on the test engine (tables from db_session)"""
    return SQLAlchemyDocumentRepository(TestingSessionLocal)


@pytest.fixture
def lifecycle(storage, repository) -> DocumentLifecycleService:
    return DocumentLifecycleService(storage=storage, repository=repository)


@pytest.fixture
def preview_issuer(storage) -> PreviewLinkIssuer:
    return PreviewLinkIssuer(storage=storage)


@pytest.fixture
def comparison_engine() -> ComparisonEngine:
    return ComparisonEngine()


def auth_headers(owner_id: UUID) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(owner_id)}"}


@pytest.fixture(scope="function")
def client(db_session: Session, storage: InMemoryObjectStorage):
    """Test client with database and storage overridden, no credentials.

    Entering the client runs the application lifespan (table creation and
    namespace setup against the fake storage).
    """
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[database_get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_repository] = lambda: SQLAlchemyDocumentRepository(TestingSessionLocal)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def owner_headers() -> Dict[str, str]:
    return auth_headers(OWNER_ID)


@pytest.fixture
def other_owner_headers() -> Dict[str, str]:
    return auth_headers(OTHER_OWNER_ID)
