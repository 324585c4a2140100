"""Concurrent, best-effort application of category updates."""

import asyncio
import logging
from collections.abc import Sequence

from travelplan.reconciliation.ports import DefectiveStore
from travelplan.schemas.reconciliation import BatchResult, CategoryUpdate, UpdateFailure

logger = logging.getLogger(__name__)


class BatchUpdater:
    """Dispatch one update per record and wait for all of them to settle.

    Updates are independent: a failure is recorded for that record and
    never cancels or rolls back its siblings. At most ``max_concurrency``
    updates are in flight at once.
    """

    def __init__(self, store: DefectiveStore, max_concurrency: int = 20):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.store = store
        self.max_concurrency = max_concurrency

    async def apply(self, updates: Sequence[CategoryUpdate]) -> BatchResult:
        if not updates:
            return BatchResult()

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _apply_one(update: CategoryUpdate) -> None:
            async with semaphore:
                await self.store.update_category(update.id, update.category_id)

        outcomes = await asyncio.gather(
            *(_apply_one(update) for update in updates), return_exceptions=True
        )

        result = BatchResult()
        for update, outcome in zip(updates, outcomes):
            if isinstance(outcome, BaseException):
                if isinstance(outcome, asyncio.CancelledError):
                    raise outcome
                logger.warning(
                    "Category update failed",
                    extra={"expense_id": str(update.id), "error_type": type(outcome).__name__},
                )
                result.failures.append(
                    UpdateFailure(id=update.id, error=str(outcome) or type(outcome).__name__)
                )
            else:
                result.applied_count += 1

        return result
