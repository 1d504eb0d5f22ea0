"""Unit tests for S3 Storage Adapter using moto

Covers conditional creates, overwrites, namespace constraints, presigned URLs
and bucket setup against a mocked S3.
"""

from urllib.parse import parse_qs, urlparse
from uuid import UUID

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from domain.documents.errors import RejectionReason, UploadRejectedError
from domain.documents.ports.object_storage_port import NamespaceConstraints, PutResult
from infrastructure.storage.s3_storage_adapter import (
    S3StorageAdapter,
    StorageError,
)


# Test constants
TEST_BUCKET = "test-documents-bucket"
TEST_REGION = "us-east-1"
TEST_ACCESS_KEY = "test-access-key"
TEST_SECRET_KEY = "test-secret-key"
TEST_OWNER_ID = UUID("a1b2c3d4-e5f6-7890-abcd-ef1234567890")
PDF = "application/pdf"
KEY = f"{TEST_OWNER_ID}/invoice.pdf"


def make_adapter(bucket=TEST_BUCKET, region=TEST_REGION, constraints=None):
    return S3StorageAdapter(
        endpoint_url=None,  # AWS S3 (moto mocks this)
        access_key=TEST_ACCESS_KEY,
        secret_key=TEST_SECRET_KEY,
        bucket_name=bucket,
        region=region,
        constraints=constraints,
    )


@pytest.fixture
def s3_client():
    """Mock S3 environment with the documents bucket"""
    with mock_aws():
        client = boto3.client(
            "s3",
            region_name=TEST_REGION,
            aws_access_key_id=TEST_ACCESS_KEY,
            aws_secret_access_key=TEST_SECRET_KEY,
        )
        client.create_bucket(Bucket=TEST_BUCKET)
        yield client


@pytest.fixture
def storage_adapter(s3_client):
    return make_adapter()


class TestS3AdapterInitialization:
    """Test S3 adapter initialization"""

    def test_adapter_creation_success(self):
        with mock_aws():
            adapter = make_adapter()
            assert adapter.bucket_name == TEST_BUCKET
            assert adapter.region == TEST_REGION
            assert adapter.constraints == NamespaceConstraints()

    def test_adapter_with_minio_endpoint(self):
        with mock_aws():
            adapter = S3StorageAdapter(
                endpoint_url="http://localhost:9000",
                access_key=TEST_ACCESS_KEY,
                secret_key=TEST_SECRET_KEY,
                bucket_name=TEST_BUCKET,
            )
            assert adapter.bucket_name == TEST_BUCKET


class TestPut:
    """Conditional and unconditional writes"""

    @pytest.mark.asyncio
    async def test_put_new_object(self, storage_adapter, s3_client):
        result = await storage_adapter.put(KEY, b"%PDF-1.4 one", PDF)

        assert result is PutResult.OK
        obj = s3_client.get_object(Bucket=TEST_BUCKET, Key=KEY)
        assert obj["Body"].read() == b"%PDF-1.4 one"
        assert obj["ContentType"] == PDF

    @pytest.mark.asyncio
    async def test_put_existing_object_conflicts(self, storage_adapter, s3_client):
        await storage_adapter.put(KEY, b"%PDF-1.4 one", PDF)

        result = await storage_adapter.put(KEY, b"%PDF-1.4 two", PDF)

        assert result is PutResult.CONFLICT
        obj = s3_client.get_object(Bucket=TEST_BUCKET, Key=KEY)
        assert obj["Body"].read() == b"%PDF-1.4 one"

    @pytest.mark.asyncio
    async def test_overwrite_replaces_object(self, storage_adapter, s3_client):
        await storage_adapter.put(KEY, b"%PDF-1.4 one", PDF)

        result = await storage_adapter.put(KEY, b"%PDF-1.4 two", PDF, overwrite=True)

        assert result is PutResult.OK
        obj = s3_client.get_object(Bucket=TEST_BUCKET, Key=KEY)
        assert obj["Body"].read() == b"%PDF-1.4 two"

    @pytest.mark.asyncio
    async def test_overwrite_on_missing_object_creates_it(self, storage_adapter):
        result = await storage_adapter.put(KEY, b"%PDF-1.4", PDF, overwrite=True)

        assert result is PutResult.OK
        assert await storage_adapter.file_exists(KEY) is True

    @pytest.mark.asyncio
    async def test_zero_byte_object(self, storage_adapter):
        assert await storage_adapter.put(KEY, b"", PDF) is PutResult.OK

    @pytest.mark.asyncio
    async def test_missing_bucket_raises_storage_error(self, s3_client):
        adapter = make_adapter(bucket="no-such-bucket")

        with pytest.raises(StorageError):
            await adapter.put(KEY, b"%PDF-1.4", PDF)


class TestNamespaceConstraints:
    """Violations are refused before any request is sent"""

    @pytest.mark.asyncio
    async def test_oversized_file_rejected(self, s3_client):
        adapter = make_adapter(constraints=NamespaceConstraints(max_size_bytes=10))

        with pytest.raises(UploadRejectedError) as exc_info:
            await adapter.put(KEY, b"x" * 11, PDF)

        assert exc_info.value.reason is RejectionReason.TOO_LARGE
        with pytest.raises(ClientError):
            s3_client.head_object(Bucket=TEST_BUCKET, Key=KEY)

    @pytest.mark.asyncio
    async def test_unsupported_type_rejected(self, storage_adapter, s3_client):
        with pytest.raises(UploadRejectedError) as exc_info:
            await storage_adapter.put(f"{TEST_OWNER_ID}/photo.png", b"\x89PNG", "image/png")

        assert exc_info.value.reason is RejectionReason.UNSUPPORTED_TYPE
        assert s3_client.list_objects_v2(Bucket=TEST_BUCKET).get("KeyCount") == 0

    @pytest.mark.asyncio
    async def test_size_checked_before_type(self, s3_client):
        adapter = make_adapter(constraints=NamespaceConstraints(max_size_bytes=1))

        with pytest.raises(UploadRejectedError) as exc_info:
            await adapter.put(KEY, b"too big", "image/png")

        assert exc_info.value.reason is RejectionReason.TOO_LARGE


class TestFileExists:

    @pytest.mark.asyncio
    async def test_exists_after_put(self, storage_adapter):
        await storage_adapter.put(KEY, b"%PDF-1.4", PDF)
        assert await storage_adapter.file_exists(KEY) is True

    @pytest.mark.asyncio
    async def test_missing_object(self, storage_adapter):
        assert await storage_adapter.file_exists(f"{TEST_OWNER_ID}/missing.pdf") is False


class TestSignedUrl:

    @pytest.mark.asyncio
    async def test_presigned_url_for_existing_object(self, storage_adapter):
        await storage_adapter.put(KEY, b"%PDF-1.4", PDF)

        url = await storage_adapter.get_signed_url(KEY, ttl_seconds=60)

        parsed = urlparse(url)
        assert TEST_BUCKET in url
        assert parsed.path.endswith("invoice.pdf")
        query = parse_qs(parsed.query)
        assert "X-Amz-Expires" in query or "Expires" in query

    @pytest.mark.asyncio
    async def test_presigned_url_for_missing_object(self, storage_adapter):
        with pytest.raises(FileNotFoundError):
            await storage_adapter.get_signed_url(f"{TEST_OWNER_ID}/missing.pdf", ttl_seconds=60)


class TestEnsureNamespace:

    @pytest.mark.asyncio
    async def test_creates_missing_bucket(self):
        with mock_aws():
            adapter = make_adapter(bucket="fresh-bucket")
            constraints = NamespaceConstraints(max_size_bytes=1024)

            await adapter.ensure_namespace(constraints)

            assert adapter.constraints == constraints
            adapter.s3_client.head_bucket(Bucket="fresh-bucket")

    @pytest.mark.asyncio
    async def test_idempotent(self, storage_adapter):
        await storage_adapter.ensure_namespace(NamespaceConstraints())
        await storage_adapter.ensure_namespace(NamespaceConstraints())

        buckets = storage_adapter.s3_client.list_buckets()["Buckets"]
        assert [b["Name"] for b in buckets] == [TEST_BUCKET]

    @pytest.mark.asyncio
    async def test_creates_bucket_outside_default_region(self):
        with mock_aws():
            adapter = make_adapter(bucket="eu-bucket", region="eu-central-1")

            await adapter.ensure_namespace(NamespaceConstraints())

            location = adapter.s3_client.get_bucket_location(Bucket="eu-bucket")
            assert location["LocationConstraint"] == "eu-central-1"
