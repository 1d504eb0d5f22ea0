"""Document API endpoints.

Upload, replace, list and preview documents in the caller's namespace.
Domain errors propagate to the handlers registered in main.py.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status

from auth.dependencies import CurrentOwner
from dependencies import get_lifecycle_service, get_preview_issuer
from domain.documents.errors import DocumentError, DuplicateNameError, MetadataWriteError, UploadRejectedError
from domain.documents.lifecycle import DocumentLifecycleService
from domain.documents.models import IncomingFile
from domain.documents.preview import PreviewLinkIssuer
from domain.documents.ports.object_storage_port import StorageError
from observability.metrics import document_operations_total, orphaned_blobs_total, preview_links_total
from .schemas import (
    DocumentListResponse,
    DocumentResponse,
    ErrorResponse,
    PreviewRequest,
    PreviewResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])

DEFAULT_CONTENT_TYPE = "application/octet-stream"


async def _incoming_file(upload: UploadFile) -> IncomingFile:
    return IncomingFile(
        name=upload.filename or "",
        content_type=upload.content_type or DEFAULT_CONTENT_TYPE,
        content=await upload.read(),
    )


def _outcome(error: Exception) -> str:
    if isinstance(error, DuplicateNameError):
        return "duplicate"
    if isinstance(error, UploadRejectedError):
        return "rejected"
    if isinstance(error, MetadataWriteError):
        return "metadata_error"
    if isinstance(error, StorageError):
        return "storage_error"
    return "error"


async def _tracked(operation: str, call):
    try:
        record = await call
    except (DocumentError, StorageError) as e:
        document_operations_total.labels(operation=operation, outcome=_outcome(e)).inc()
        if isinstance(e, MetadataWriteError):
            orphaned_blobs_total.inc()
        raise
    document_operations_total.labels(operation=operation, outcome="success").inc()
    return record


@router.post(
    "",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        415: {"model": ErrorResponse},
    },
)
async def create_document(
    owner_id: CurrentOwner,
    file: UploadFile = File(...),
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
):
    """Upload a new document. The file name must not exist yet for this owner.

    Returns the new document with status "pending".
    """
    incoming = await _incoming_file(file)
    record = await _tracked("create", service.create(owner_id, incoming))
    return DocumentResponse.from_record(record)


@router.put(
    "/{document_id}",
    response_model=DocumentResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        415: {"model": ErrorResponse},
    },
)
async def update_document(
    document_id: UUID,
    owner_id: CurrentOwner,
    file: UploadFile = File(...),
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
):
    """Replace a document's file. Status returns to "pending"."""
    incoming = await _incoming_file(file)
    record = await _tracked("update", service.update(document_id, owner_id, incoming))
    return DocumentResponse.from_record(record)


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    owner_id: CurrentOwner,
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
):
    """List the caller's documents, newest first."""
    records = await service.list(owner_id)
    items = [DocumentResponse.from_record(r) for r in records]
    return DocumentListResponse(items=items, total=len(items))


@router.post(
    "/preview",
    response_model=PreviewResponse,
    responses={502: {"model": ErrorResponse}},
)
async def preview_document(
    request: PreviewRequest,
    owner_id: CurrentOwner,
    issuer: PreviewLinkIssuer = Depends(get_preview_issuer),
):
    """Issue a fresh 60 second preview URL for a stored document."""
    try:
        link = await issuer.issue_preview(owner_id, request.storage_path)
    except DocumentError:
        preview_links_total.labels(outcome="unavailable").inc()
        raise
    preview_links_total.labels(outcome="issued").inc()
    return PreviewResponse.from_link(link)


@router.get(
    "/{document_id}",
    response_model=DocumentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_document(
    document_id: UUID,
    owner_id: CurrentOwner,
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
):
    """Get one of the caller's documents."""
    record = await service.get(document_id, owner_id)
    return DocumentResponse.from_record(record)
