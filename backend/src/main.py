"""Document Verification Service - Main FastAPI Application

This module creates and configures the FastAPI application, including:
- Document and comparison routers
- Middleware (request ID correlation, CORS)
- Exception handlers turning each domain error into one user-facing message
- Health and metrics endpoints
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from config import get_settings
from database import init_db
from dependencies import get_storage

from observability.logging_config import configure_logging
from observability.middleware import RequestIDMiddleware
from observability.router import router as observability_router

from api.v1.documents.router import router as documents_router
from api.v1.comparisons.router import router as comparisons_router

from domain.documents.errors import (
    DocumentError,
    DocumentNotFoundError,
    DuplicateNameError,
    InvalidStatusTransitionError,
    MetadataWriteError,
    PreviewUnavailableError,
    RejectionReason,
    UploadRejectedError,
)
from domain.documents.ports.object_storage_port import StorageError
from infrastructure.storage.storage_config import load_storage_config_from_env

settings = get_settings()

configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    - Startup: create missing tables, make sure the documents bucket exists
    """
    logger.info("Document service starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    init_db()

    # Uploads fail with 502 until storage is reachable; the API stays up
    try:
        storage = app.dependency_overrides.get(get_storage, get_storage)()
        await storage.ensure_namespace(load_storage_config_from_env().namespace_constraints())
    except (StorageError, ValueError) as e:
        logger.error(f"Document namespace setup failed: {e}")

    yield

    logger.info("Document service shutting down...")


_docs_enabled = settings.ENVIRONMENT != "production"

app = FastAPI(
    title="Document Verification API",
    description="Upload, verify, preview and compare documents",
    version="0.1.0",
    docs_url="/docs" if _docs_enabled else None,
    redoc_url="/redoc" if _docs_enabled else None,
    openapi_url="/openapi.json" if _docs_enabled else None,
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE CONFIGURATION
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

# Added last so it runs first
app.add_middleware(RequestIDMiddleware)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

_REJECTION_STATUS = {
    RejectionReason.TOO_LARGE: status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    RejectionReason.UNSUPPORTED_TYPE: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    RejectionReason.INVALID_NAME: status.HTTP_400_BAD_REQUEST,
}


def _error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message},
    )


@app.exception_handler(DocumentError)
async def document_exception_handler(request: Request, exc: DocumentError) -> JSONResponse:
    """Map a domain error to its status code and single message."""
    if isinstance(exc, UploadRejectedError):
        return _error_response(_REJECTION_STATUS[exc.reason], exc.reason.value, str(exc))

    if isinstance(exc, DuplicateNameError):
        return _error_response(status.HTTP_409_CONFLICT, "duplicate_name", str(exc))

    if isinstance(exc, DocumentNotFoundError):
        return _error_response(status.HTTP_404_NOT_FOUND, "not_found", str(exc))

    if isinstance(exc, InvalidStatusTransitionError):
        return _error_response(status.HTTP_409_CONFLICT, "invalid_status_transition", str(exc))

    if isinstance(exc, PreviewUnavailableError):
        return _error_response(status.HTTP_502_BAD_GATEWAY, "preview_unavailable", str(exc))

    if isinstance(exc, MetadataWriteError):
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "metadata_write_failed",
            "Error saving document info. Please try again.",
        )

    logger.error(f"Unmapped document error on {request.method} {request.url.path}", exc_info=exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "document_error", str(exc))


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error(f"Storage error on {request.method} {request.url.path}: {exc}")
    return _error_response(
        status.HTTP_502_BAD_GATEWAY,
        "storage_error",
        "Document storage is unavailable. Please try again later.",
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors with field-level details."""
    logger.warning(f"Validation error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request,
    exc: SQLAlchemyError
) -> JSONResponse:
    """Log the full error but return a generic message."""
    logger.error(
        f"Database error on {request.method} {request.url.path}",
        exc_info=exc
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "database_error",
        "A database error occurred. Please try again later.",
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred. Please try again later.",
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

# Observability (health, metrics)
app.include_router(observability_router)

app.include_router(documents_router, prefix="/api/v1")
app.include_router(comparisons_router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root() -> dict[str, Any]:
    """Root endpoint - API information."""
    return {
        "name": "Document Verification API",
        "version": "0.1.0",
        "status": "running",
        "docs": "/docs" if _docs_enabled else None,
    }


if __name__ == "__main__":
    import os
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
