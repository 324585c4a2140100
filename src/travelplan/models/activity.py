"""Activity model: planned or executed items of a trip."""
from uuid import UUID

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from travelplan.models.base import BaseModel


class Activity(BaseModel):
    """A trip activity. Its ``category`` is the domain vocabulary
    (``flight``, ``accommodation``, ...), not a catalog identifier."""

    __tablename__ = "activities"

    trip_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<Activity(id={self.id}, title={self.title}, category={self.category})>"
