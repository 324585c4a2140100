"""FastAPI dependency injection for database access and services."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from travelplan.db.session import get_db, get_session_factory
from travelplan.services.expense_categories import ExpenseCategoryService

__all__ = ["get_db", "get_session_factory", "get_expense_category_service"]


async def get_expense_category_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> ExpenseCategoryService:
    """
    Get expense category backfill service instance.

    Args:
        session_factory: Factory for the per-task sessions the backfill needs

    Returns:
        ExpenseCategoryService instance
    """
    return ExpenseCategoryService(session_factory)
