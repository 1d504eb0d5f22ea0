"""File comparison engine.

Decides whether two files are identical, different, or unsupported for deep
comparison. Nothing here touches persisted state.

Algorithm:
1. Declared types differ -> DIFFERENT ("type mismatch"), no hashing
2. SHA-256 digests equal -> IDENTICAL ("content hash match")
3. Digests differ, type not in the comparison allow-list -> UNSUPPORTED
4. Digests differ, type eligible -> DIFFERENT ("content differs"), optionally
   annotated by a DiffExplainerPort
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .hashing import hash_content
from .models import ComparableFile
from .ports.diff_explainer_port import DiffExplainerPort
from .validation import COMPARISON_ALLOWED_TYPES, is_eligible

logger = logging.getLogger(__name__)

REASON_TYPE_MISMATCH = "type mismatch"
REASON_HASH_MATCH = "content hash match"
REASON_UNSUPPORTED = "type not supported for deep comparison"
REASON_CONTENT_DIFFERS = "content differs"


class ComparisonVerdict(str, Enum):
    """Outcome of comparing two files"""
    IDENTICAL = "identical"
    DIFFERENT = "different"
    UNSUPPORTED = "unsupported"


@dataclass
class ComparisonResult:
    """Result of a comparison. Ephemeral, never persisted.

    Attributes:
        verdict: identical / different / unsupported
        reason: Human-readable explanation
        digest_a: SHA-256 of the first file (None on type mismatch)
        digest_b: SHA-256 of the second file (None on type mismatch)
        details: Difference summary from a diff explainer, if one ran
    """
    verdict: ComparisonVerdict
    reason: str
    digest_a: Optional[str] = None
    digest_b: Optional[str] = None
    details: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "verdict": self.verdict.value,
            "reason": self.reason,
            "digest_a": self.digest_a,
            "digest_b": self.digest_b,
            "details": self.details,
        }


def _normalize_type(content_type: Optional[str]) -> str:
    # Deliberately not byte-exact: MIME types are case-insensitive, so
    # "Application/PDF" and "application/pdf" count as the same type.
    return (content_type or "").strip().lower()


class ComparisonEngine:
    """Compares two files by declared type and content digest.

    Example:
        engine = ComparisonEngine()
        result = await engine.compare(file_a, file_b)
        if result.verdict is ComparisonVerdict.IDENTICAL:
            ...
    """

    def __init__(
        self,
        allowed_types=COMPARISON_ALLOWED_TYPES,
        diff_explainer: Optional[DiffExplainerPort] = None,
    ):
        self.allowed_types = allowed_types
        self.diff_explainer = diff_explainer

    async def compare(self, file_a: ComparableFile, file_b: ComparableFile) -> ComparisonResult:
        """Compare two files.

        Args:
            file_a: First file
            file_b: Second file

        Returns:
            ComparisonResult with verdict and reason

        Raises:
            OSError: If a file's content cannot be read
        """
        type_a = _normalize_type(file_a.content_type)
        type_b = _normalize_type(file_b.content_type)

        if type_a != type_b:
            logger.info(
                f"Comparison short-circuited on type mismatch: "
                f"{file_a.name} ({type_a}) vs {file_b.name} ({type_b})"
            )
            return ComparisonResult(
                verdict=ComparisonVerdict.DIFFERENT,
                reason=REASON_TYPE_MISMATCH,
            )

        if file_a.content is file_b.content:
            # A stream can only be consumed once
            digest_a = digest_b = await hash_content(file_a.content)
        else:
            digest_a, digest_b = await asyncio.gather(
                hash_content(file_a.content),
                hash_content(file_b.content),
            )

        if digest_a == digest_b:
            return ComparisonResult(
                verdict=ComparisonVerdict.IDENTICAL,
                reason=REASON_HASH_MATCH,
                digest_a=digest_a,
                digest_b=digest_b,
            )

        if not is_eligible(type_a, self.allowed_types):
            return ComparisonResult(
                verdict=ComparisonVerdict.UNSUPPORTED,
                reason=REASON_UNSUPPORTED,
                digest_a=digest_a,
                digest_b=digest_b,
            )

        details = None
        if self.diff_explainer is not None:
            details = await self.diff_explainer.explain(file_a, file_b)

        return ComparisonResult(
            verdict=ComparisonVerdict.DIFFERENT,
            reason=REASON_CONTENT_DIFFERS,
            digest_a=digest_a,
            digest_b=digest_b,
            details=details,
        )


async def compare_files(file_a: ComparableFile, file_b: ComparableFile) -> ComparisonResult:
    """Compare two files with the default allow-list and no diff explainer."""
    return await ComparisonEngine().compare(file_a, file_b)
