"""Unit tests for the file comparison engine"""

import io

import pytest

from domain.documents.comparison import (
    ComparisonEngine,
    ComparisonVerdict,
    REASON_CONTENT_DIFFERS,
    REASON_HASH_MATCH,
    REASON_TYPE_MISMATCH,
    REASON_UNSUPPORTED,
    compare_files,
)
from domain.documents.hashing import compute_sha256
from domain.documents.models import ComparableFile
from domain.documents.ports.diff_explainer_port import DiffExplainerPort

PDF = "application/pdf"


def make_file(name, content_type, content):
    return ComparableFile(name=name, content_type=content_type, content=content)


class RecordingExplainer(DiffExplainerPort):
    def __init__(self):
        self.calls = []

    async def explain(self, file_a, file_b):
        self.calls.append((file_a.name, file_b.name))
        return "page 2 differs"


class TestTypeGate:
    """Files of different declared types are never hashed"""

    @pytest.mark.asyncio
    async def test_same_bytes_different_type_is_different(self):
        a = make_file("a.png", "image/png", b"same")
        b = make_file("b.jpg", "image/jpeg", b"same")

        result = await compare_files(a, b)

        assert result.verdict is ComparisonVerdict.DIFFERENT
        assert result.reason == REASON_TYPE_MISMATCH
        assert result.digest_a is None
        assert result.digest_b is None

    @pytest.mark.asyncio
    async def test_type_comparison_ignores_case(self):
        a = make_file("a.pdf", "application/PDF", b"same")
        b = make_file("b.pdf", "application/pdf", b"same")

        result = await compare_files(a, b)

        assert result.verdict is ComparisonVerdict.IDENTICAL


class TestHashComparison:
    """Same-typed files are compared by SHA-256 digest"""

    @pytest.mark.asyncio
    async def test_identical_content(self):
        a = make_file("one.pdf", PDF, b"%PDF-1.4 content")
        b = make_file("two.pdf", PDF, b"%PDF-1.4 content")

        result = await compare_files(a, b)

        assert result.verdict is ComparisonVerdict.IDENTICAL
        assert result.reason == REASON_HASH_MATCH
        assert result.digest_a == result.digest_b == compute_sha256(b"%PDF-1.4 content")

    @pytest.mark.asyncio
    async def test_names_do_not_matter(self):
        """Renamed copies of a file are identical"""
        a = make_file("invoice.pdf", PDF, b"bytes")
        b = make_file("invoice (copy).pdf", PDF, b"bytes")

        assert (await compare_files(a, b)).verdict is ComparisonVerdict.IDENTICAL

    @pytest.mark.asyncio
    async def test_same_stream_compared_with_itself(self):
        """A stream passed as both files is read once and matches itself"""
        body = b"%PDF-1.4 content" * 5000
        f = make_file("big.pdf", PDF, io.BytesIO(body))

        result = await compare_files(f, f)

        assert result.verdict is ComparisonVerdict.IDENTICAL
        assert result.digest_a == result.digest_b == compute_sha256(body)
        assert result.digest_a != compute_sha256(b"")

    @pytest.mark.asyncio
    async def test_eligible_type_different_content(self):
        a = make_file("a.pdf", PDF, b"%PDF-1.4 A")
        b = make_file("b.pdf", PDF, b"%PDF-1.4 B")

        result = await compare_files(a, b)

        assert result.verdict is ComparisonVerdict.DIFFERENT
        assert result.reason == REASON_CONTENT_DIFFERS
        assert result.digest_a != result.digest_b

    @pytest.mark.asyncio
    async def test_ineligible_type_different_content_is_unsupported(self):
        a = make_file("a.zip", "application/zip", b"PK\x03\x04 one")
        b = make_file("b.zip", "application/zip", b"PK\x03\x04 two")

        result = await compare_files(a, b)

        assert result.verdict is ComparisonVerdict.UNSUPPORTED
        assert result.reason == REASON_UNSUPPORTED

    @pytest.mark.asyncio
    async def test_ineligible_type_identical_content_is_identical(self):
        """Equal digests win before the eligibility check"""
        a = make_file("a.zip", "application/zip", b"PK\x03\x04")
        b = make_file("b.zip", "application/zip", b"PK\x03\x04")

        assert (await compare_files(a, b)).verdict is ComparisonVerdict.IDENTICAL

    @pytest.mark.asyncio
    async def test_zero_byte_files_are_identical(self):
        a = make_file("empty1.png", "image/png", b"")
        b = make_file("empty2.png", "image/png", b"")

        assert (await compare_files(a, b)).verdict is ComparisonVerdict.IDENTICAL

    @pytest.mark.asyncio
    async def test_image_subtypes_are_eligible(self):
        a = make_file("a.webp", "image/webp", b"RIFF one")
        b = make_file("b.webp", "image/webp", b"RIFF two")

        assert (await compare_files(a, b)).verdict is ComparisonVerdict.DIFFERENT


class TestDiffExplainer:
    """The optional explainer only runs for eligible files that differ"""

    @pytest.mark.asyncio
    async def test_explainer_adds_details(self):
        explainer = RecordingExplainer()
        engine = ComparisonEngine(diff_explainer=explainer)

        result = await engine.compare(
            make_file("a.pdf", PDF, b"A"),
            make_file("b.pdf", PDF, b"B"),
        )

        assert result.details == "page 2 differs"
        assert explainer.calls == [("a.pdf", "b.pdf")]

    @pytest.mark.asyncio
    async def test_explainer_not_called_for_identical_files(self):
        explainer = RecordingExplainer()
        engine = ComparisonEngine(diff_explainer=explainer)

        await engine.compare(make_file("a.pdf", PDF, b"A"), make_file("b.pdf", PDF, b"A"))

        assert explainer.calls == []

    @pytest.mark.asyncio
    async def test_explainer_not_called_for_unsupported_or_mismatched(self):
        explainer = RecordingExplainer()
        engine = ComparisonEngine(diff_explainer=explainer)

        await engine.compare(make_file("a.zip", "application/zip", b"A"), make_file("b.zip", "application/zip", b"B"))
        await engine.compare(make_file("a.pdf", PDF, b"A"), make_file("b.png", "image/png", b"B"))

        assert explainer.calls == []


class TestResultSerialization:

    @pytest.mark.asyncio
    async def test_to_dict(self):
        result = await compare_files(make_file("a.png", "image/png", b"x"), make_file("b.pdf", PDF, b"x"))

        assert result.to_dict() == {
            "verdict": "different",
            "reason": "type mismatch",
            "digest_a": None,
            "digest_b": None,
            "details": None,
        }
