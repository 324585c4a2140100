"""Expense category catalog."""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from travelplan.models.base import BaseModel


class Category(BaseModel):
    """Expense category, managed outside this service."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"
