"""Claim history log model."""
from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint, Index
from datetime import datetime, UTC

from backend.database import Base


class MealClaim(Base):
    """Audit record of one active meal claim.

    Team and member names are a snapshot taken at claim time. A row exists
    exactly while the matching participant slot is claimed.
    """
    __tablename__ = "meal_claims"

    claim_id = Column(Integer, primary_key=True, autoincrement=True)
    participant_id = Column(String(32), nullable=False)
    team_id = Column(String(20), nullable=False)
    team_name = Column(String(200), nullable=False)
    member_name = Column(String(200), nullable=False)
    meal_type = Column(String(20), nullable=False)
    claimed_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    # Constraints - one active claim per participant per meal
    __table_args__ = (
        UniqueConstraint("participant_id", "meal_type", name="uq_meal_claims_participant_meal"),
        Index("ix_meal_claims_claimed_at", "claimed_at"),
    )

    def __repr__(self):
        return f"<MealClaim(participant_id={self.participant_id}, meal_type={self.meal_type})>"
