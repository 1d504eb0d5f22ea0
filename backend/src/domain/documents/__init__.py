"""Documents domain module - upload lifecycle, duplicate detection, previews, comparison"""

from .document_status import (
    DocumentStatus,
    can_transition,
    get_allowed_transitions,
    ALLOWED_TRANSITIONS,
    REVIEW_STATUSES,
)
from .errors import (
    DocumentError,
    DuplicateNameError,
    UploadRejectedError,
    RejectionReason,
    MetadataWriteError,
    PreviewUnavailableError,
    DocumentNotFoundError,
    InvalidStatusTransitionError,
)
from .validation import (
    is_eligible,
    is_supported_upload_type,
    is_comparable_type,
    validate_file_size,
    validate_filename,
    build_storage_path,
    is_owned_path,
    UPLOAD_ALLOWED_TYPES,
    COMPARISON_ALLOWED_TYPES,
)
from .hashing import compute_sha256, compute_sha256_stream, hash_content
from .models import ComparableFile, DocumentRecord, IncomingFile
from .comparison import (
    ComparisonEngine,
    ComparisonResult,
    ComparisonVerdict,
    compare_files,
)
from .lifecycle import DocumentLifecycleService
from .preview import PreviewLinkIssuer, PreviewLink, PREVIEW_TTL_SECONDS

__all__ = [
    "DocumentStatus",
    "can_transition",
    "get_allowed_transitions",
    "ALLOWED_TRANSITIONS",
    "REVIEW_STATUSES",
    "DocumentError",
    "DuplicateNameError",
    "UploadRejectedError",
    "RejectionReason",
    "MetadataWriteError",
    "PreviewUnavailableError",
    "DocumentNotFoundError",
    "InvalidStatusTransitionError",
    "is_eligible",
    "is_supported_upload_type",
    "is_comparable_type",
    "validate_file_size",
    "validate_filename",
    "build_storage_path",
    "is_owned_path",
    "UPLOAD_ALLOWED_TYPES",
    "COMPARISON_ALLOWED_TYPES",
    "compute_sha256",
    "compute_sha256_stream",
    "hash_content",
    "DocumentRecord",
    "IncomingFile",
    "ComparableFile",
    "ComparisonEngine",
    "ComparisonResult",
    "ComparisonVerdict",
    "compare_files",
    "DocumentLifecycleService",
    "PreviewLinkIssuer",
    "PreviewLink",
    "PREVIEW_TTL_SECONDS",
]
