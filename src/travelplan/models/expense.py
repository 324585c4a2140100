"""Trip expense model."""
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from travelplan.models.base import BaseModel


class TripExpense(BaseModel):
    """An expense of a trip.

    Expenses created from an activity carry the activity title plus a
    "(Planning)" or "(Split)" annotation. A null ``category_id`` marks an
    expense the category backfill may repair.
    """

    __tablename__ = "trip_expenses"

    trip_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    category_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (
        Index("ix_trip_expenses_trip_id_category_id", "trip_id", "category_id"),
    )

    def __repr__(self) -> str:
        return f"<TripExpense(id={self.id}, title={self.title}, category_id={self.category_id})>"
