"""Storage configuration for S3-compatible object storage.

Builds the adapter configuration and the document namespace constraints from
application settings. Supports both MinIO (development) and AWS S3
(production) with the same interface.
"""

from dataclasses import dataclass
from typing import Optional

from config import Settings, get_settings
from domain.documents.ports.object_storage_port import NamespaceConstraints
from domain.documents.validation import UPLOAD_ALLOWED_TYPES


@dataclass
class StorageConfig:
    """Configuration for S3-compatible object storage.

    Attributes:
        endpoint_url: S3 endpoint URL (e.g., 'http://localhost:9000' for MinIO,
                      None for AWS S3 which uses default regional endpoints)
        access_key: S3 access key ID
        secret_key: S3 secret access key
        bucket_name: Bucket holding every owner's documents
        region: AWS region (default: 'us-east-1')
        max_upload_size_bytes: Namespace size limit (default: 10MB)
    """
    endpoint_url: Optional[str]
    access_key: str
    secret_key: str
    bucket_name: str
    region: str = "us-east-1"
    max_upload_size_bytes: int = 10 * 1024 * 1024

    def namespace_constraints(self) -> NamespaceConstraints:
        """Constraints applied to every object in the documents bucket"""
        return NamespaceConstraints(
            max_size_bytes=self.max_upload_size_bytes,
            allowed_types=UPLOAD_ALLOWED_TYPES,
        )


def load_storage_config_from_env(settings: Optional[Settings] = None) -> StorageConfig:
    """Load storage configuration from environment-backed settings.

    Environment Variables:
        MINIO_ENDPOINT: MinIO endpoint (e.g., 'localhost:9000')
                        If not set, assumes AWS S3 with default regional endpoints
        MINIO_ROOT_USER: Access key for MinIO/S3
        MINIO_ROOT_PASSWORD: Secret key for MinIO/S3
        MINIO_USE_SSL: Whether to use SSL for MINIO_ENDPOINT (default: false)
        DOCUMENTS_BUCKET: Bucket name (default: 'documents')
        AWS_REGION: AWS region (default: 'us-east-1')
        MAX_UPLOAD_SIZE_BYTES: Size limit (default: 10485760)

    Returns:
        StorageConfig: Validated storage configuration

    Raises:
        ValueError: If required settings are missing or invalid
    """
    settings = settings or get_settings()

    endpoint_url = None
    if settings.MINIO_ENDPOINT:
        protocol = "https" if settings.MINIO_USE_SSL else "http"
        endpoint_url = f"{protocol}://{settings.MINIO_ENDPOINT}"

    if not settings.MINIO_ROOT_USER or not settings.MINIO_ROOT_PASSWORD:
        raise ValueError(
            "Missing required storage credentials. "
            "Set MINIO_ROOT_USER and MINIO_ROOT_PASSWORD environment variables. "
            "For MinIO: use 'minioadmin' for both in development. "
            "For AWS S3: use your IAM credentials."
        )

    config = StorageConfig(
        endpoint_url=endpoint_url,
        access_key=settings.MINIO_ROOT_USER,
        secret_key=settings.MINIO_ROOT_PASSWORD,
        bucket_name=settings.DOCUMENTS_BUCKET,
        region=settings.AWS_REGION,
        max_upload_size_bytes=settings.MAX_UPLOAD_SIZE_BYTES,
    )
    validate_storage_config(config)
    return config


def validate_storage_config(config: StorageConfig) -> None:
    """Validate storage configuration.

    Raises:
        ValueError: If configuration is invalid
    """
    if not config.bucket_name:
        raise ValueError("Storage bucket_name is required")

    if config.max_upload_size_bytes <= 0:
        raise ValueError("MAX_UPLOAD_SIZE_BYTES must be positive")

    if config.endpoint_url:
        if not config.endpoint_url.startswith(("http://", "https://")):
            raise ValueError(
                f"Invalid endpoint_url: {config.endpoint_url}. "
                "Must start with http:// or https://"
            )
    elif not config.region:
        raise ValueError("AWS region is required when using S3 (MINIO_ENDPOINT not set)")
