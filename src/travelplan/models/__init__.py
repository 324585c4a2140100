"""Database models."""
from travelplan.models.activity import Activity
from travelplan.models.category import Category
from travelplan.models.expense import TripExpense

__all__ = ["Activity", "Category", "TripExpense"]
