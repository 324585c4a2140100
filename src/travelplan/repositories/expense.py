"""Trip expense repository."""
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from travelplan.models.expense import TripExpense
from travelplan.repositories.base import BaseRepository


class TripExpenseRepository(BaseRepository[TripExpense]):
    """Repository for TripExpense model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, TripExpense)

    async def get_uncategorized_by_trip(self, trip_id: UUID) -> list[TripExpense]:
        """Get the trip's expenses that have no category assigned."""
        result = await self.db.execute(
            select(TripExpense)
            .where(
                TripExpense.trip_id == trip_id,
                TripExpense.category_id.is_(None),
                TripExpense.deleted_at.is_(None),
            )
            .order_by(TripExpense.created_at.asc(), TripExpense.id.asc())
        )
        return list(result.scalars().all())

    async def set_category(self, expense_id: UUID, category_id: UUID) -> int:
        """Set the category of one expense and commit.

        Returns:
            Number of rows updated (0 when the expense no longer exists)
        """
        result = await self.db.execute(
            update(TripExpense)
            .where(TripExpense.id == expense_id, TripExpense.deleted_at.is_(None))
            .values(category_id=category_id)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return int(result.rowcount or 0)
