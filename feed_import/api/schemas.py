"""
feed_import/api/schemas.py

Response schemas for feed import endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from feed_import.types import ImportResult


class ImportSummaryResponse(BaseModel):
    """
    API response model for one completed (or partially completed) import run.
    """

    target: str
    format: str
    processed: int = Field(..., ge=0)
    skipped: int = Field(..., ge=0)
    batches: int = Field(default=0, ge=0)
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, *, target: str, format: str, result: ImportResult) -> ImportSummaryResponse:
        return cls(
            target=target,
            format=format,
            processed=result.processed,
            skipped=result.skipped,
            batches=result.batches,
            errors=list(result.errors),
        )


class HealthResponse(BaseModel):
    status: str = "ok"
