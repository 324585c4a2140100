"""Expense category backfill service.

This module connects the backfill engine to the database and turns a run
summary into the API result:
1. Adapt the activity, expense and category repositories to the engine's
   store interfaces
2. Run the engine for one trip
3. Build the success envelope, or raise when every attempted update failed
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from travelplan.config import settings
from travelplan.core.exceptions import BatchUpdateError, ExpenseNotFoundError
from travelplan.reconciliation.engine import ReconciliationEngine
from travelplan.repositories.activity import ActivityRepository
from travelplan.repositories.category import CategoryRepository
from travelplan.repositories.expense import TripExpenseRepository
from travelplan.schemas.expense import FixCategoriesResult
from travelplan.schemas.reconciliation import (
    CategoryCatalogEntry,
    DefectiveRecord,
    ReferenceRecord,
)

logger = logging.getLogger(__name__)


# Every store call opens its own session: the engine runs loads and
# updates concurrently and an AsyncSession can't be shared between tasks.


class SqlActivityStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def list_references(self, scope_id: UUID) -> list[ReferenceRecord]:
        async with self.session_factory() as session:
            activities = await ActivityRepository(session).get_by_trip(scope_id)
        return [
            ReferenceRecord(id=a.id, title=a.title, domain_category=a.category)
            for a in activities
        ]


class SqlExpenseStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def list_uncategorized(self, scope_id: UUID) -> list[DefectiveRecord]:
        async with self.session_factory() as session:
            expenses = await TripExpenseRepository(session).get_uncategorized_by_trip(scope_id)
        return [
            DefectiveRecord(id=e.id, title=e.title, category_id=e.category_id)
            for e in expenses
        ]

    async def update_category(self, record_id: UUID, category_id: UUID) -> None:
        async with self.session_factory() as session:
            updated = await TripExpenseRepository(session).set_category(record_id, category_id)
        if not updated:
            raise ExpenseNotFoundError(f"Expense {record_id} not found")


class SqlCategoryStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def list_categories(self) -> list[CategoryCatalogEntry]:
        async with self.session_factory() as session:
            categories = await CategoryRepository(session).get_all_live()
        return [CategoryCatalogEntry(id=c.id, name=c.name) for c in categories]


def build_message(fixed: int, total: int) -> str:
    if total == 0:
        return "No expenses need fixing"
    return f"Successfully fixed {fixed} expense{'' if fixed == 1 else 's'}"


class ExpenseCategoryService:
    """Runs the category backfill for a trip against the database."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        locale: str | None = None,
        max_concurrency: int | None = None,
        engine: ReconciliationEngine | None = None,
    ):
        """Initialize the service.

        Args:
            session_factory: Factory for the per-task database sessions
            locale: Display-name table for category names (default: settings)
            max_concurrency: Max in-flight updates (default: settings)
            engine: Prebuilt engine, replacing the database-backed one
        """
        self.engine = engine or ReconciliationEngine(
            references=SqlActivityStore(session_factory),
            defectives=SqlExpenseStore(session_factory),
            catalog=SqlCategoryStore(session_factory),
            locale=locale or settings.category_locale,
            max_concurrency=max_concurrency or settings.backfill_max_concurrency,
        )

    async def fix_categories(self, trip_id: UUID | None) -> FixCategoriesResult:
        """Backfill missing categories for one trip.

        Args:
            trip_id: Trip whose uncategorized expenses should be repaired

        Returns:
            FixCategoriesResult success envelope

        Raises:
            InputError: If trip_id is missing
            LoadError: If activities, expenses or categories can't be read
            BatchUpdateError: If updates were attempted and all of them failed
        """
        summary = await self.engine.run(trip_id)

        if summary.failures and summary.fixed_count == 0:
            raise BatchUpdateError(
                attempted=summary.attempted_count,
                failures=[f.model_dump(mode="json") for f in summary.failures],
            )

        return FixCategoriesResult(
            success=True,
            message=build_message(summary.fixed_count, summary.total_candidates),
            fixed=summary.fixed_count,
            total=summary.total_candidates,
            skipped=summary.skipped_reasons,
            failures=summary.failures,
        )
