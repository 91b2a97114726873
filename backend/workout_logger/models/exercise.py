"""Exercise model."""

import uuid
from datetime import datetime

from sqlalchemy import String, Integer, Numeric, ForeignKey, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workout_logger.models.base import Base, utcnow


class Exercise(Base):
    """One logged movement within a workout: name, sets, reps and weight."""

    __tablename__ = "exercises"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    workout_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("workouts.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        index=True
    )

    exercise_name: Mapped[str] = mapped_column(String(255), nullable=False)
    sets: Mapped[int] = mapped_column(Integer, nullable=False)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )

    # Relationships
    workout: Mapped["Workout"] = relationship("Workout", back_populates="exercises")

    def __repr__(self) -> str:
        return (
            f"<Exercise(id={self.id}, name={self.exercise_name}, "
            f"sets={self.sets}, reps={self.reps}, weight={self.weight})>"
        )
