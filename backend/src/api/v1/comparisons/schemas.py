"""Comparison API response schema"""

from typing import Optional

from pydantic import BaseModel, Field

from domain.documents.comparison import ComparisonResult


class ComparisonResponse(BaseModel):
    """Verdict for two compared files"""
    verdict: str = Field(..., description="identical, different or unsupported")
    reason: str = Field(..., description="Why the verdict was reached")
    file_a: str = Field(..., description="Name of the first file")
    file_b: str = Field(..., description="Name of the second file")
    size_a: int
    size_b: int
    digest_a: Optional[str] = Field(None, description="SHA-256 of the first file")
    digest_b: Optional[str] = Field(None, description="SHA-256 of the second file")
    details: Optional[str] = None

    @classmethod
    def build(cls, result: ComparisonResult, name_a: str, size_a: int,
              name_b: str, size_b: int) -> "ComparisonResponse":
        return cls(
            file_a=name_a,
            file_b=name_b,
            size_a=size_a,
            size_b=size_b,
            **result.to_dict(),
        )
