"""Expense endpoint request/response schemas."""

from uuid import UUID

from pydantic import BaseModel, Field

from travelplan.schemas.reconciliation import UpdateFailure


class FixCategoriesRequest(BaseModel):
    """Request to backfill missing expense categories of a trip."""

    # Optional so a missing id is reported as RECON_001 rather than a
    # generic validation error.
    trip_id: UUID | None = Field(None, description="Trip whose expenses should be repaired")


class FixCategoriesResult(BaseModel):
    """Result of a category backfill run."""

    success: bool = True
    message: str
    fixed: int = Field(description="Expenses whose category was set")
    total: int = Field(description="Uncategorized expenses considered")
    skipped: dict[str, int] = Field(
        default_factory=dict, description="Expenses left untouched, counted by reason"
    )
    failures: list[UpdateFailure] = Field(
        default_factory=list, description="Expenses whose update failed"
    )


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    error: str
    details: str
    error_code: str
    suggestion: str
    retry_allowed: bool
