"""Expense category backfill engine.

One run repairs the uncategorized expenses of one trip:
1. Load the category catalog, the trip's activities and its uncategorized
   expenses, concurrently
2. Match each expense to an activity by title
3. Resolve the activity's category to a catalog id
4. Apply every resolved category as an independent update
5. Summarize fixed, skipped and failed records

The engine holds no state between runs. Fixed expenses drop out of the
uncategorized set, so running it again only picks up what was missed.
"""

import asyncio
import logging
from collections import Counter
from collections.abc import Awaitable, Mapping, Sequence
from typing import TypeVar

from travelplan.core.exceptions import InputError, LoadError
from travelplan.reconciliation.matcher import match
from travelplan.reconciliation.ports import CatalogStore, DefectiveStore, ReferenceStore
from travelplan.reconciliation.resolver import (
    DISPLAY_NAMES,
    DEFAULT_LOCALE,
    build_catalog_map,
    resolve_with_reason,
)
from travelplan.reconciliation.updater import BatchUpdater
from travelplan.schemas.reconciliation import (
    CategoryUpdate,
    DefectiveRecord,
    MatchReason,
    MatchResult,
    RecordId,
    ReconciliationSummary,
    ReferenceRecord,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _load(source: str, loader: Awaitable[T]) -> T:
    try:
        return await loader
    except Exception as e:
        logger.error(
            "Backfill load failed",
            extra={"source": source, "error_type": type(e).__name__},
        )
        raise LoadError(source, str(e) or type(e).__name__) from e


def _dedupe(records: Sequence[DefectiveRecord]) -> list[DefectiveRecord]:
    seen: set[RecordId] = set()
    unique = []
    for record in records:
        if record.id in seen:
            logger.warning("Duplicate expense in batch ignored", extra={"expense_id": str(record.id)})
            continue
        seen.add(record.id)
        unique.append(record)
    return unique


def classify(
    defective: DefectiveRecord,
    references: Sequence[ReferenceRecord],
    catalog: Mapping[str, RecordId],
    display_names: Mapping[str, str],
) -> MatchResult:
    """Match and resolve one expense. Pure; never raises for unmatched records."""
    reference = match(defective, references)
    if reference is None:
        return MatchResult(
            defective_record_id=defective.id, reason=MatchReason.NO_REFERENCE_MATCH
        )

    category_id, reason = resolve_with_reason(reference, catalog, display_names)
    return MatchResult(
        defective_record_id=defective.id,
        resolved_category_id=category_id,
        reason=reason,
    )


class ReconciliationEngine:
    """Backfills missing expense categories from related activities."""

    def __init__(
        self,
        references: ReferenceStore,
        defectives: DefectiveStore,
        catalog: CatalogStore,
        locale: str = DEFAULT_LOCALE,
        max_concurrency: int = 20,
    ):
        self.references = references
        self.defectives = defectives
        self.catalog = catalog
        self.display_names = DISPLAY_NAMES[locale]
        self.updater = BatchUpdater(defectives, max_concurrency=max_concurrency)

    async def run(self, scope_id: RecordId | None) -> ReconciliationSummary:
        """Repair the uncategorized expenses of one trip.

        Args:
            scope_id: Trip identifier

        Returns:
            ReconciliationSummary with fixed/total counts, skip tally and
            per-record update failures

        Raises:
            InputError: If scope_id is missing or blank
            LoadError: If any of the three loads fails (nothing is mutated)
        """
        if scope_id is None or (isinstance(scope_id, str) and not scope_id.strip()):
            raise InputError({"field": "trip_id"})

        log_extra = {"trip_id": str(scope_id)}
        logger.info("Fixing expense categories", extra=log_extra)

        # Let all three reads settle before surfacing the first failure.
        loaded = await asyncio.gather(
            _load("categories", self.catalog.list_categories()),
            _load("activities", self.references.list_references(scope_id)),
            _load("expenses", self.defectives.list_uncategorized(scope_id)),
            return_exceptions=True,
        )
        for outcome in loaded:
            if isinstance(outcome, BaseException):
                raise outcome
        categories, references, defectives = loaded
        logger.info(
            "Backfill data loaded",
            extra={
                **log_extra,
                "activities_count": len(references),
                "expenses_count": len(defectives),
                "categories_count": len(categories),
            },
        )

        defectives = _dedupe(defectives)
        if not defectives:
            return ReconciliationSummary()

        catalog_map = build_catalog_map(categories)
        results = [
            classify(defective, references, catalog_map, self.display_names)
            for defective in defectives
        ]

        updates = []
        skipped: Counter[str] = Counter()
        for defective, result in zip(defectives, results):
            if result.is_matched:
                updates.append(
                    CategoryUpdate(id=defective.id, category_id=result.resolved_category_id)
                )
                logger.debug(
                    "Expense matched",
                    extra={"expense_id": str(defective.id), "category_id": str(result.resolved_category_id)},
                )
            else:
                skipped[result.reason.value] += 1
                logger.debug(
                    "Expense skipped",
                    extra={"expense_id": str(defective.id), "reason": result.reason.value},
                )

        batch = await self.updater.apply(updates)

        summary = ReconciliationSummary(
            fixed_count=batch.applied_count,
            total_candidates=len(defectives),
            skipped_reasons=dict(skipped),
            failures=batch.failures,
            results=results,
        )
        logger.info(
            "Expense categories fixed",
            extra={
                **log_extra,
                "fixed": summary.fixed_count,
                "total": summary.total_candidates,
                "skipped": summary.skipped_reasons,
                "failed": len(summary.failures),
            },
        )
        return summary
