"""Internal data schemas for the expense category backfill.

These models are loaded fresh at the start of a run and discarded at its
end. Identifiers are opaque: the SQL stores hand out UUIDs, other stores
may use strings.
"""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

RecordId = UUID | str


class ReferenceRecord(BaseModel):
    """A categorized record that expenses were derived from (an activity)."""

    model_config = ConfigDict(frozen=True)

    id: RecordId
    title: str
    domain_category: str | None = None


class DefectiveRecord(BaseModel):
    """An expense missing its category assignment."""

    model_config = ConfigDict(frozen=True)

    id: RecordId
    title: str
    category_id: RecordId | None = None


class CategoryCatalogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: RecordId
    name: str


class MatchReason(str, Enum):
    MATCHED = "matched"
    NO_REFERENCE_MATCH = "no-reference-match"
    REFERENCE_HAS_NO_CATEGORY = "reference-has-no-category"
    CATEGORY_NOT_IN_CATALOG = "category-not-in-catalog"


class MatchResult(BaseModel):
    """Outcome of matching and resolving one defective record."""

    model_config = ConfigDict(frozen=True)

    defective_record_id: RecordId
    resolved_category_id: RecordId | None = None
    reason: MatchReason

    @property
    def is_matched(self) -> bool:
        return self.reason is MatchReason.MATCHED and self.resolved_category_id is not None


class CategoryUpdate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: RecordId
    category_id: RecordId


class UpdateFailure(BaseModel):
    id: RecordId
    error: str


class BatchResult(BaseModel):
    """Aggregate outcome of a batch of category updates."""

    applied_count: int = 0
    failures: list[UpdateFailure] = Field(default_factory=list)


class ReconciliationSummary(BaseModel):
    """Summary of one backfill run.

    ``skipped_reasons`` only counts records that were never sent to the
    updater. Records whose update failed are listed in ``failures``.
    """

    fixed_count: int = 0
    total_candidates: int = 0
    skipped_reasons: dict[str, int] = Field(default_factory=dict)
    failures: list[UpdateFailure] = Field(default_factory=list)
    results: list[MatchResult] = Field(default_factory=list)

    @property
    def attempted_count(self) -> int:
        return self.fixed_count + len(self.failures)
