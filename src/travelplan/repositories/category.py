"""Category catalog repository (read only)."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from travelplan.models.category import Category
from travelplan.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Category)

    async def get_all_live(self) -> list[Category]:
        """Get the whole catalog, ordered by name."""
        result = await self.db.execute(
            select(Category).where(Category.deleted_at.is_(None)).order_by(Category.name)
        )
        return list(result.scalars().all())
