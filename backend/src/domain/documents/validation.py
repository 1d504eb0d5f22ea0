"""File validation utilities for document uploads and comparisons

Two independent allow-lists gate the two operations:
- UPLOAD_ALLOWED_TYPES: what may be stored for verification (PDF, DOC, DOCX)
- COMPARISON_ALLOWED_TYPES: what is eligible for deep comparison (images + the
  three document types)

Entries ending in "/" match by prefix, all others match exactly.
"""

from typing import Iterable, Optional, Tuple

from config import get_settings


PDF = 'application/pdf'
DOC = 'application/msword'
DOCX = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'

UPLOAD_ALLOWED_TYPES = frozenset({PDF, DOC, DOCX})

COMPARISON_ALLOWED_TYPES = frozenset({
    'image/',  # any image subtype
    PDF,
    DOC,
    DOCX,
})


def is_eligible(declared_type: Optional[str], allowed: Iterable[str]) -> bool:
    """Check a declared media type against an allow-list

    Args:
        declared_type: MIME type as declared by the client (e.g., 'image/png')
        allowed: Allow-list entries; 'image/' style entries match by prefix

    Returns:
        True if the type is permitted, False otherwise

    Example:
        >>> is_eligible('image/png', COMPARISON_ALLOWED_TYPES)
        True
        >>> is_eligible('application/pdf+zip', UPLOAD_ALLOWED_TYPES)
        False
    """
    if not declared_type:
        return False

    declared_type = declared_type.strip().lower()
    for entry in allowed:
        if entry.endswith('/'):
            if declared_type.startswith(entry):
                return True
        elif declared_type == entry:
            return True
    return False


def is_supported_upload_type(mime_type: Optional[str]) -> bool:
    """Check if MIME type may be uploaded for verification"""
    return is_eligible(mime_type, UPLOAD_ALLOWED_TYPES)


def is_comparable_type(mime_type: Optional[str]) -> bool:
    """Check if MIME type is eligible for deep comparison"""
    return is_eligible(mime_type, COMPARISON_ALLOWED_TYPES)


def validate_file_size(size_bytes: int, max_size: Optional[int] = None) -> Tuple[bool, Optional[str]]:
    """Validate file size is within limits

    Zero-byte files are accepted; only the upper bound is enforced.

    Args:
        size_bytes: File size in bytes
        max_size: Maximum allowed size (defaults to MAX_UPLOAD_SIZE_BYTES)

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> validate_file_size(1024)
        (True, None)
        >>> validate_file_size(11 * 1024 * 1024)
        (False, 'File exceeds maximum size...')
    """
    if max_size is None:
        max_size = get_settings().MAX_UPLOAD_SIZE_BYTES

    if size_bytes > max_size:
        return False, f"File exceeds maximum size of {max_size} bytes (got {size_bytes} bytes)"

    return True, None


def validate_filename(filename: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate an original filename before it becomes part of a storage path

    Validation rules:
    - Not empty
    - Max 255 characters
    - No directory separators, and not "." or ".." (dots elsewhere are fine)
    - No null bytes or control characters

    Example:
        >>> validate_filename('report.pdf')
        (True, None)
        >>> validate_filename('../../etc/passwd')
        (False, 'Filename contains path traversal or directory separators')
    """
    if not filename or len(filename.strip()) == 0:
        return False, "Filename cannot be empty"

    if len(filename) > 255:
        return False, f"Filename exceeds 255 characters (got {len(filename)})"

    if filename in ('.', '..') or '/' in filename or '\\' in filename:
        return False, "Filename contains path traversal or directory separators"

    if '\x00' in filename:
        return False, "Filename contains null bytes"

    if any(ord(c) < 32 for c in filename):
        return False, "Filename contains control characters"

    return True, None


def build_storage_path(owner_id, filename: str) -> str:
    """Derive the namespaced storage path for an owner's file.

    The original filename is kept verbatim: (owner, filename) is the identity
    of a document, so renaming a file changes which document it maps to.

    Example:
        >>> build_storage_path('u1', 'report.pdf')
        'u1/report.pdf'
    """
    return f"{owner_id}/{filename}"


def is_owned_path(owner_id, storage_path: str) -> bool:
    """Check that a storage path lives in the owner's namespace"""
    prefix = f"{owner_id}/"
    if not storage_path or not storage_path.startswith(prefix):
        return False
    is_valid, _ = validate_filename(storage_path[len(prefix):])
    return is_valid
