"""Standardized error response schema."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error body for every failure rendered by the exception filter."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    errors: dict[str, list[str]] | None = Field(
        default=None,
        description="Field name to violation messages; only for record_invalid",
    )
