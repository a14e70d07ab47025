"""Participant model holding per-meal claim state."""
from sqlalchemy import Column, String, Integer, Boolean, DateTime, CheckConstraint, Index
from datetime import datetime, UTC

from backend.database import Base
from backend.models.base import MealType, MEAL_TYPES
from backend.utils.datetime_helpers import ensure_utc


def _meal_state_constraint(meal: MealType) -> CheckConstraint:
    claimed = meal.claimed_column
    claimed_at = meal.claimed_at_column
    return CheckConstraint(
        f"({claimed} AND {claimed_at} IS NOT NULL) OR (NOT {claimed} AND {claimed_at} IS NULL)",
        name=f"ck_participants_{meal.value}_state",
    )


class Participant(Base):
    """One registered team member eligible to claim meals."""
    __tablename__ = "participants"

    participant_id = Column(String(32), primary_key=True)
    team_id = Column(String(20), nullable=False, index=True)
    team_name = Column(String(200), nullable=False)
    member_name = Column(String(200), nullable=False)
    member_number = Column(Integer, nullable=False)

    breakfast_claimed = Column(Boolean, default=False, nullable=False)
    breakfast_claimed_at = Column(DateTime(timezone=True), nullable=True)
    lunch_claimed = Column(Boolean, default=False, nullable=False)
    lunch_claimed_at = Column(DateTime(timezone=True), nullable=True)
    dinner_claimed = Column(Boolean, default=False, nullable=False)
    dinner_claimed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("member_number BETWEEN 1 AND 4", name="ck_participants_member_number"),
        _meal_state_constraint(MealType.BREAKFAST),
        _meal_state_constraint(MealType.LUNCH),
        _meal_state_constraint(MealType.DINNER),
        Index("ix_participants_team_member", "team_id", "member_number"),
    )

    def is_claimed(self, meal: MealType) -> bool:
        return bool(getattr(self, meal.claimed_column))

    def claimed_at(self, meal: MealType) -> datetime | None:
        return ensure_utc(getattr(self, meal.claimed_at_column))

    @property
    def meals(self) -> dict[str, dict]:
        """Meal map keyed by meal name, e.g. ``{"lunch": {"claimed": True, "claimed_at": ...}}``."""
        return {
            meal.value: {"claimed": self.is_claimed(meal), "claimed_at": self.claimed_at(meal)}
            for meal in MEAL_TYPES
        }

    def __repr__(self):
        return f"<Participant(participant_id={self.participant_id}, team_id={self.team_id})>"
