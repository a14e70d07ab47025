"""Participant store access: lookups and conditional claim-state updates."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func
from datetime import datetime
import logging

from backend.models.base import MealType
from backend.models.participant import Participant

logger = logging.getLogger(__name__)


def participant_summary(participant: Participant) -> dict:
    """Identity fields shown to callers alongside claim feedback."""
    return {
        "participant_id": participant.participant_id,
        "member_name": participant.member_name,
        "team_id": participant.team_id,
        "team_name": participant.team_name,
        "member_number": participant.member_number,
    }


class ParticipantService:
    """Service for reading and mutating participant records.

    Methods that write never commit; the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_participant(self, participant_id: str) -> Participant | None:
        """Fetch a participant by normalized id, refreshing any cached instance."""
        result = await self.db.execute(
            select(Participant)
            .where(Participant.participant_id == participant_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_participants(self) -> list[Participant]:
        """All participants ordered by team then member number."""
        result = await self.db.execute(
            select(Participant).order_by(Participant.team_id, Participant.member_number)
        )
        return list(result.scalars().all())

    async def list_team(self, team_id: str) -> list[Participant]:
        result = await self.db.execute(
            select(Participant)
            .where(Participant.team_id == team_id)
            .order_by(Participant.member_number)
        )
        return list(result.scalars().all())

    async def count_participants(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Participant))
        return int(result.scalar_one())

    async def mark_claimed(self, participant_id: str, meal: MealType, claimed_at: datetime) -> bool:
        """
        Flip a meal slot to claimed only if it is currently unclaimed.

        The check and the write are one UPDATE statement, so two concurrent
        callers cannot both observe the slot as free.

        Returns:
            True if this call claimed the slot, False if the participant is
            missing or the slot was already claimed.
        """
        claimed_col = getattr(Participant, meal.claimed_column)
        result = await self.db.execute(
            update(Participant)
            .where(Participant.participant_id == participant_id, claimed_col.is_(False))
            .values({meal.claimed_column: True, meal.claimed_at_column: claimed_at})
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) == 1

    async def mark_unclaimed(self, participant_id: str, meal: MealType) -> bool:
        """Clear a meal slot only if it is currently claimed."""
        claimed_col = getattr(Participant, meal.claimed_column)
        result = await self.db.execute(
            update(Participant)
            .where(Participant.participant_id == participant_id, claimed_col.is_(True))
            .values({meal.claimed_column: False, meal.claimed_at_column: None})
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) == 1

    def add_participant(
        self,
        participant_id: str,
        team_id: str,
        team_name: str,
        member_name: str,
        member_number: int,
    ) -> Participant:
        """Stage a new participant with every meal unclaimed."""
        participant = Participant(
            participant_id=participant_id,
            team_id=team_id,
            team_name=team_name,
            member_name=member_name,
            member_number=member_number,
            breakfast_claimed=False,
            lunch_claimed=False,
            dinner_claimed=False,
        )
        self.db.add(participant)
        return participant

    async def delete_all(self) -> int:
        result = await self.db.execute(delete(Participant))
        deleted_count = result.rowcount or 0
        logger.info(f"Deleted {deleted_count} participants")
        return deleted_count
