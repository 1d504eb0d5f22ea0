"""Global FastAPI dependencies wiring the document core to its adapters.

This module provides:
- get_storage: Process-wide S3 storage adapter
- get_repository: Document repository opening one session per call
- get_lifecycle_service / get_preview_issuer / get_comparison_engine

Tests replace get_storage, get_repository and get_db through
app.dependency_overrides.
"""

import logging
from typing import Optional

from fastapi import Depends

from config import get_settings
from database import SessionLocal
from domain.documents.comparison import ComparisonEngine
from domain.documents.lifecycle import DocumentLifecycleService
from domain.documents.ports.document_repository_port import DocumentRepositoryPort
from domain.documents.ports.object_storage_port import ObjectStoragePort
from domain.documents.preview import PreviewLinkIssuer
from infrastructure.repositories.document_repository import SQLAlchemyDocumentRepository
from infrastructure.storage.s3_storage_adapter import S3StorageAdapter
from infrastructure.storage.storage_config import load_storage_config_from_env

logger = logging.getLogger(__name__)

# Storage adapter singleton (initialized once)
_storage_adapter: Optional[S3StorageAdapter] = None


def get_storage() -> ObjectStoragePort:
    """Get or create the storage adapter singleton.

    Raises:
        ValueError: If storage configuration is invalid
        StorageError: If the S3 client cannot be created
    """
    global _storage_adapter

    if _storage_adapter is None:
        config = load_storage_config_from_env()
        _storage_adapter = S3StorageAdapter(
            endpoint_url=config.endpoint_url,
            access_key=config.access_key,
            secret_key=config.secret_key,
            bucket_name=config.bucket_name,
            region=config.region,
            constraints=config.namespace_constraints(),
        )
        logger.info("Initialized storage adapter")

    return _storage_adapter


def get_repository() -> DocumentRepositoryPort:
    return SQLAlchemyDocumentRepository(SessionLocal)


def get_lifecycle_service(
    storage: ObjectStoragePort = Depends(get_storage),
    repository: DocumentRepositoryPort = Depends(get_repository),
) -> DocumentLifecycleService:
    return DocumentLifecycleService(
        storage=storage,
        repository=repository,
        clear_feedback_on_replace=get_settings().CLEAR_FEEDBACK_ON_REPLACE,
    )


def get_preview_issuer(storage: ObjectStoragePort = Depends(get_storage)) -> PreviewLinkIssuer:
    return PreviewLinkIssuer(storage=storage)


def get_comparison_engine() -> ComparisonEngine:
    return ComparisonEngine()
