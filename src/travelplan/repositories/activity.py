"""Activity repository with trip-scoped queries."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from travelplan.models.activity import Activity
from travelplan.repositories.base import BaseRepository


class ActivityRepository(BaseRepository[Activity]):
    """Repository for Activity model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Activity)

    async def get_by_trip(self, trip_id: UUID) -> list[Activity]:
        """Get every activity of a trip, with or without a category.

        Ordered by creation time so "first in input order" is stable.
        """
        result = await self.db.execute(
            select(Activity)
            .where(Activity.trip_id == trip_id, Activity.deleted_at.is_(None))
            .order_by(Activity.created_at.asc(), Activity.id.asc())
        )
        return list(result.scalars().all())
