"""Workout model."""

import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy import String, Date, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workout_logger.models.base import Base, TimestampMixin


class Workout(Base, TimestampMixin):
    """
    A named, dated training session owned by one user.

    The owner is the subject id issued by the identity provider; there is
    no local users table. Exercises are removed by the store's
    ON DELETE CASCADE when their workout row is deleted.
    """

    __tablename__ = "workouts"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        index=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    workout_date: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationships
    exercises: Mapped[List["Exercise"]] = relationship(
        "Exercise",
        back_populates="workout",
        passive_deletes=True,
        order_by="Exercise.created_at"
    )

    def __repr__(self) -> str:
        return f"<Workout(id={self.id}, name={self.name}, date={self.workout_date})>"
