"""Claim history log: one audit row per active meal claim."""
from dataclasses import dataclass
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
import logging

from backend.models.base import MealType, MEAL_TYPES
from backend.models.meal_claim import MealClaim
from backend.models.participant import Participant

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    """Outcome of re-deriving history rows from participant state."""

    created: int = 0
    removed: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.created or self.removed)


class ClaimHistoryService:
    """Service for the claim history log.

    ``record_claim`` and ``remove_claims`` never commit, so the claim engine
    can pair them with the participant update in one transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record_claim(self, participant: Participant, meal: MealType, claimed_at: datetime) -> MealClaim:
        """Append a history row snapshotting the participant's team and name."""
        entry = MealClaim(
            participant_id=participant.participant_id,
            team_id=participant.team_id,
            team_name=participant.team_name,
            member_name=participant.member_name,
            meal_type=meal.value,
            claimed_at=claimed_at,
        )
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def get_claim(self, participant_id: str, meal: MealType) -> MealClaim | None:
        result = await self.db.execute(
            select(MealClaim)
            .where(MealClaim.participant_id == participant_id, MealClaim.meal_type == meal.value)
            .order_by(MealClaim.claimed_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def remove_claims(self, participant_id: str, meal: MealType) -> int:
        """Delete every history row for the pair; returns how many were removed."""
        result = await self.db.execute(
            delete(MealClaim).where(
                MealClaim.participant_id == participant_id,
                MealClaim.meal_type == meal.value,
            )
        )
        return result.rowcount or 0

    async def get_recent_claims(self, limit: int) -> list[MealClaim]:
        result = await self.db.execute(
            select(MealClaim)
            .order_by(MealClaim.claimed_at.desc(), MealClaim.claim_id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def delete_all(self) -> int:
        result = await self.db.execute(delete(MealClaim))
        deleted_count = result.rowcount or 0
        logger.info(f"Deleted {deleted_count} meal claim history rows")
        return deleted_count

    async def reconcile(self) -> ReconcileReport:
        """
        Rebuild the history log so it matches participant claim flags.

        Participant flags are authoritative: rows without a claimed slot
        (including rows for deleted participants) are removed, and claimed
        slots without a row get one using the slot's timestamp.

        Returns:
            ReconcileReport with the number of rows created and removed
        """
        report = ReconcileReport()

        participants = (await self.db.execute(select(Participant))).scalars().all()
        by_id = {participant.participant_id: participant for participant in participants}

        entries = (await self.db.execute(select(MealClaim))).scalars().all()
        seen: set[tuple[str, str]] = set()
        for entry in entries:
            key = (entry.participant_id, entry.meal_type)
            participant = by_id.get(entry.participant_id)
            valid_meal = entry.meal_type in {meal.value for meal in MEAL_TYPES}
            keep = (
                participant is not None
                and valid_meal
                and participant.is_claimed(MealType(entry.meal_type))
                and key not in seen
            )
            if keep:
                seen.add(key)
                continue
            await self.db.delete(entry)
            report.removed += 1
            logger.warning(f"Removing stale claim history row {entry.claim_id} for {key}")

        for participant in participants:
            for meal in MEAL_TYPES:
                if participant.is_claimed(meal) and (participant.participant_id, meal.value) not in seen:
                    await self.record_claim(participant, meal, participant.claimed_at(meal))
                    report.created += 1
                    logger.warning(
                        f"Recreated missing claim history row for {participant.participant_id}/{meal.value}"
                    )

        await self.db.commit()

        if report.changed:
            logger.info(f"Claim history reconciled: created={report.created}, removed={report.removed}")
        else:
            logger.debug("Claim history already consistent with participant state")

        return report
