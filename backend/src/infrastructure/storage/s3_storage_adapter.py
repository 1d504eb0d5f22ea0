"""S3 Storage Adapter - Implementation of ObjectStoragePort using boto3.

Provides S3-compatible storage operations for AWS S3, MinIO, and other S3-compatible services.
Implements conditional creates (put-if-absent), overwrites, and presigned URLs.

Architecture: Hexagonal - Adapter implementation in infrastructure layer
"""

import asyncio
import logging
from functools import partial
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from domain.documents.errors import UploadRejectedError
from domain.documents.ports.object_storage_port import (
    NamespaceConstraints,
    ObjectStoragePort,
    PutResult,
    StorageError,
)

logger = logging.getLogger(__name__)

# Error codes S3-compatible stores return for a failed If-None-Match precondition
CONFLICT_ERROR_CODES = {"PreconditionFailed", "ConditionalRequestConflict", "412", "409"}
NOT_FOUND_ERROR_CODES = {"404", "NoSuchKey", "NotFound", "NoSuchBucket"}


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "Unknown")


class S3StorageAdapter(ObjectStoragePort):
    """S3-compatible storage adapter using boto3.

    Features:
    - Atomic put-if-absent via conditional PutObject (If-None-Match: *)
    - Namespace constraints (size limit, MIME allow-list) checked before upload
    - Presigned URLs for time-limited read access
    - Storage key format: {owner_id}/{original_filename}

    boto3 calls are blocking and run in the default executor.

    Example:
        config = load_storage_config_from_env()
        storage = S3StorageAdapter(
            endpoint_url=config.endpoint_url,
            access_key=config.access_key,
            secret_key=config.secret_key,
            bucket_name=config.bucket_name,
            region=config.region,
        )
        await storage.ensure_namespace(NamespaceConstraints())

        result = await storage.put(
            path='u1/report.pdf',
            data=content,
            content_type='application/pdf',
        )
    """

    def __init__(
        self,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket_name: str,
        region: str = "us-east-1",
        constraints: Optional[NamespaceConstraints] = None,
    ):
        """Initialize S3 storage adapter.

        Args:
            endpoint_url: S3 endpoint URL (None for AWS S3, URL for MinIO)
            access_key: S3 access key ID
            secret_key: S3 secret access key
            bucket_name: S3 bucket name (the document namespace)
            region: AWS region (default: 'us-east-1')
            constraints: Namespace constraints (default: 10MB, PDF/DOC/DOCX)

        Raises:
            StorageError: If S3 client initialization fails
        """
        try:
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
            )
            self.bucket_name = bucket_name
            self.region = region
            self.constraints = constraints or NamespaceConstraints()

            logger.info(
                f"Initialized S3 storage adapter: bucket={bucket_name}, "
                f"endpoint={endpoint_url or 'AWS S3'}, region={region}"
            )
        except NoCredentialsError as e:
            raise StorageError(f"Invalid S3 credentials: {e}")
        except Exception as e:
            raise StorageError(f"Failed to initialize S3 client: {e}")

    async def _run(self, func, **kwargs):
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, partial(func, **kwargs))

    async def ensure_namespace(self, constraints: NamespaceConstraints) -> None:
        """Create the bucket if it does not exist and adopt the given constraints.

        Called once at application startup. An existing bucket is not an error.

        Raises:
            StorageError: If bucket check or creation fails
        """
        self.constraints = constraints

        try:
            await self._run(self.s3_client.head_bucket, Bucket=self.bucket_name)
            logger.info(f"Verified bucket exists: {self.bucket_name}")
            return
        except ClientError as e:
            error_code = _error_code(e)
            if error_code not in NOT_FOUND_ERROR_CODES:
                raise StorageError(f"Failed to verify bucket: {error_code}")
        except BotoCoreError as e:
            raise StorageError(f"Failed to reach object storage: {e}")

        create_kwargs = {"Bucket": self.bucket_name}
        if self.region != "us-east-1":
            create_kwargs["CreateBucketConfiguration"] = {
                "LocationConstraint": self.region
            }

        try:
            await self._run(self.s3_client.create_bucket, **create_kwargs)
            logger.info(
                f"Created bucket: {self.bucket_name}, "
                f"max_size={constraints.max_size_bytes}, "
                f"allowed_types={sorted(constraints.allowed_types)}"
            )
        except ClientError as e:
            error_code = _error_code(e)
            if error_code in ("BucketAlreadyOwnedByYou", "BucketAlreadyExists"):
                logger.info(f"Bucket created concurrently: {self.bucket_name}")
                return
            raise StorageError(f"Failed to create bucket: {error_code}")
        except BotoCoreError as e:
            raise StorageError(f"Failed to reach object storage: {e}")

    async def put(
        self,
        path: str,
        data: bytes,
        content_type: str,
        overwrite: bool = False,
    ) -> PutResult:
        """Store an object, refusing to replace an existing one unless overwrite=True.

        Implementation:
        1. Check namespace constraints (no request sent on violation)
        2. PutObject, with If-None-Match: * when overwrite=False
        3. Map precondition failures (412/409) to PutResult.CONFLICT

        Raises:
            UploadRejectedError: If size/type violate the namespace constraints
            StorageError: If upload fails
        """
        reason = self.constraints.check(len(data), content_type)
        if reason is not None:
            logger.info(
                f"Upload rejected by namespace constraints: storage_key={path}, "
                f"reason={reason.value}, size={len(data)}, mime_type={content_type}"
            )
            raise UploadRejectedError(reason)

        put_kwargs = {
            "Bucket": self.bucket_name,
            "Key": path,
            "Body": data,
            "ContentType": content_type,
        }
        if not overwrite:
            put_kwargs["IfNoneMatch"] = "*"

        try:
            await self._run(self.s3_client.put_object, **put_kwargs)
        except ClientError as e:
            error_code = _error_code(e)
            if not overwrite and error_code in CONFLICT_ERROR_CODES:
                logger.info(f"Object already exists: storage_key={path}")
                return PutResult.CONFLICT
            logger.error(
                f"S3 upload failed: storage_key={path}, "
                f"error={error_code}, message={e}"
            )
            raise StorageError(f"Failed to upload file: {error_code}")
        except Exception as e:
            logger.error(f"Unexpected error during upload: {e}")
            raise StorageError(f"Failed to upload file: {e}")

        logger.info(
            f"Uploaded file: storage_key={path}, size={len(data)}, "
            f"mime_type={content_type}, overwrite={overwrite}"
        )
        return PutResult.OK

    async def file_exists(self, path: str) -> bool:
        """Check if an object exists in S3.

        Uses HEAD request (faster than GET).

        Raises:
            StorageError: On errors other than not-found
        """
        try:
            await self._run(
                self.s3_client.head_object,
                Bucket=self.bucket_name,
                Key=path,
            )
            return True
        except ClientError as e:
            error_code = _error_code(e)
            if error_code in NOT_FOUND_ERROR_CODES:
                return False
            logger.warning(
                f"Error checking file existence: storage_key={path}, "
                f"error={error_code}"
            )
            raise StorageError(f"Failed to check file existence: {error_code}")
        except BotoCoreError as e:
            raise StorageError(f"Failed to reach object storage: {e}")

    async def get_signed_url(self, path: str, ttl_seconds: int) -> str:
        """Generate a presigned GET URL valid for ttl_seconds.

        Raises:
            FileNotFoundError: If file doesn't exist
            StorageError: If URL generation fails
        """
        if not await self.file_exists(path):
            raise FileNotFoundError(f"File not found: {path}")

        try:
            url = await self._run(
                self.s3_client.generate_presigned_url,
                ClientMethod="get_object",
                Params={
                    "Bucket": self.bucket_name,
                    "Key": path,
                },
                ExpiresIn=ttl_seconds,
            )
        except ClientError as e:
            error_code = _error_code(e)
            logger.error(
                f"Presigned URL generation failed: storage_key={path}, "
                f"error={error_code}"
            )
            raise StorageError(f"Failed to generate presigned URL: {error_code}")
        except Exception as e:
            logger.error(f"Unexpected error generating presigned URL: {e}")
            raise StorageError(f"Failed to generate presigned URL: {e}")

        logger.info(
            f"Generated presigned URL: storage_key={path}, "
            f"expires_in={ttl_seconds}s"
        )
        return url
