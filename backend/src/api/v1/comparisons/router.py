"""File comparison endpoint.

Compares two uploaded files without storing either of them.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from auth.dependencies import CurrentOwner
from dependencies import get_comparison_engine
from domain.documents.comparison import ComparisonEngine
from domain.documents.models import ComparableFile
from observability.metrics import comparisons_total
from .schemas import ComparisonResponse

router = APIRouter(prefix="/comparisons", tags=["comparisons"])


async def _comparable(upload: UploadFile) -> ComparableFile:
    return ComparableFile(
        name=upload.filename or "",
        content_type=upload.content_type or "",
        content=await upload.read(),
    )


@router.post("", response_model=ComparisonResponse)
async def compare_uploaded_files(
    owner_id: CurrentOwner,
    file_a: UploadFile = File(...),
    file_b: UploadFile = File(...),
    engine: ComparisonEngine = Depends(get_comparison_engine),
):
    """Compare two files by declared type and SHA-256 digest.

    A type mismatch is reported as "different", not as an error.
    """
    a = await _comparable(file_a)
    b = await _comparable(file_b)

    result = await engine.compare(a, b)
    comparisons_total.labels(verdict=result.verdict.value).inc()

    return ComparisonResponse.build(result, a.name, a.size, b.name, b.size)
