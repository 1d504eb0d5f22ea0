"""Content hashing for duplicate detection and file comparison.

Digests are SHA-256 over the raw bytes only; file name, MIME label and
modification time never enter the hash.
"""

import asyncio
import hashlib
from typing import BinaryIO, Union

CHUNK_SIZE = 8192  # 8KB chunks


def compute_sha256(content: bytes) -> str:
    """Compute a SHA-256 hex digest of in-memory content.

    Args:
        content: Raw bytes to hash (may be empty)

    Returns:
        Lowercase hex string of the SHA-256 digest (64 characters)
    """
    return hashlib.sha256(content).hexdigest()


def compute_sha256_stream(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> str:
    """Compute a SHA-256 hex digest while reading a stream in chunks.

    Read failures propagate as OSError.

    Args:
        stream: Readable binary stream, consumed to EOF
        chunk_size: Bytes per read

    Returns:
        Lowercase hex string of the SHA-256 digest
    """
    sha256_hash = hashlib.sha256()
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        sha256_hash.update(chunk)
    return sha256_hash.hexdigest()


async def hash_content(content: Union[bytes, BinaryIO]) -> str:
    """Hash bytes or a binary stream without blocking the event loop."""
    def _digest() -> str:
        if isinstance(content, (bytes, bytearray, memoryview)):
            return compute_sha256(bytes(content))
        return compute_sha256_stream(content)

    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, _digest)
