"""Claim engine: at-most-once meal claims with a matching history row."""
from dataclasses import dataclass
from datetime import datetime, UTC
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from backend.models.base import MealType
from backend.models.participant import Participant
from backend.services.claim_history_service import ClaimHistoryService
from backend.services.participant_service import ParticipantService, participant_summary
from backend.services.validation import normalize_claim_request, normalize_participant_id
from backend.utils.datetime_helpers import ensure_utc
from backend.utils.exceptions import (
    AlreadyClaimedError,
    MealTrackerException,
    NotClaimedError,
    NotFoundError,
    StorageError,
)

logger = logging.getLogger(__name__)


@dataclass
class ClaimResult:
    """Successful claim: the refreshed participant and the new timestamp."""

    participant: Participant
    meal_type: MealType
    claimed_at: datetime


@dataclass
class UnclaimResult:
    """Successful reversal of a claim."""

    participant_id: str
    meal_type: MealType
    previous_claimed_at: datetime | None
    history_removed: int


class ClaimService:
    """Service enforcing the claim state machine for each participant and meal.

    Unclaimed --claim/manual_claim--> Claimed --unclaim--> Unclaimed

    Each transition updates the participant slot and the history log inside
    one transaction; any database failure rolls both back.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.participants = ParticipantService(db)
        self.history = ClaimHistoryService(db)

    async def get_participant(self, participant_id: str) -> Participant:
        """Look up a participant by id, raising NotFoundError if absent."""
        normalized_id = normalize_participant_id(participant_id)
        try:
            participant = await self.participants.get_participant(normalized_id)
        except SQLAlchemyError as exc:
            raise await self._storage_failure("participant lookup", normalized_id, exc) from exc
        if participant is None:
            raise NotFoundError("Participant not found", {"participant_id": normalized_id})
        return participant

    async def claim(self, participant_id: str, meal_type: str) -> ClaimResult:
        """
        Claim a meal for a participant.

        Args:
            participant_id: Participant id in any case, surrounding spaces allowed
            meal_type: breakfast, lunch or dinner in any case

        Returns:
            ClaimResult with the updated participant and claim timestamp

        Raises:
            ValidationError: Missing input or unknown meal type
            NotFoundError: No participant with this id
            AlreadyClaimedError: The meal was claimed before
            StorageError: The database failed; nothing was written
        """
        return await self._claim(participant_id, meal_type, source="self-service")

    async def manual_claim(self, participant_id: str, meal_type: str) -> ClaimResult:
        """Administrative claim with the same rules as ``claim``."""
        return await self._claim(participant_id, meal_type, source="manual")

    async def _claim(self, participant_id: str, meal_type: str, source: str) -> ClaimResult:
        normalized_id, meal = normalize_claim_request(participant_id, meal_type)
        claimed_at = datetime.now(UTC)

        try:
            if not await self.participants.mark_claimed(normalized_id, meal, claimed_at):
                await self.db.rollback()
                raise await self._claim_rejection(normalized_id, meal)

            participant = await self.participants.get_participant(normalized_id)
            await self.history.record_claim(participant, meal, claimed_at)
            await self.db.commit()
        except MealTrackerException:
            raise
        except SQLAlchemyError as exc:
            raise await self._storage_failure(f"{source} claim", normalized_id, exc) from exc

        logger.info(f"Meal claimed ({source}): participant={normalized_id}, meal={meal.value}, at={claimed_at}")
        return ClaimResult(participant=participant, meal_type=meal, claimed_at=claimed_at)

    async def _claim_rejection(self, participant_id: str, meal: MealType) -> MealTrackerException:
        """Work out why the conditional update matched no row."""
        participant = await self.participants.get_participant(participant_id)
        if participant is None:
            logger.info(f"Claim rejected, unknown participant: {participant_id}")
            return NotFoundError(
                "Participant ID not found. Please verify your ID.",
                {"participant_id": participant_id},
            )

        previous = participant.claimed_at(meal)
        logger.info(f"Claim rejected, {meal.value} already claimed: participant={participant_id}, at={previous}")
        when = previous.isoformat() if previous else "an earlier time"
        return AlreadyClaimedError(
            f"{meal.label} already claimed at {when}",
            claimed_at=previous,
            participant=participant_summary(participant),
        )

    async def unclaim(self, participant_id: str, meal_type: str) -> UnclaimResult:
        """
        Reverse a claim, clearing the slot and deleting its history rows.

        Raises:
            ValidationError: Missing input or unknown meal type
            NotFoundError: No participant with this id
            NotClaimedError: The meal is not currently claimed
            StorageError: The database failed; nothing was written
        """
        normalized_id, meal = normalize_claim_request(participant_id, meal_type)

        try:
            if not await self.participants.mark_unclaimed(normalized_id, meal):
                await self.db.rollback()
                participant = await self.participants.get_participant(normalized_id)
                if participant is None:
                    raise NotFoundError("Participant not found", {"participant_id": normalized_id})
                logger.info(f"Unclaim rejected, {meal.value} not claimed: participant={normalized_id}")
                raise NotClaimedError("Meal not claimed yet", {"participant_id": normalized_id, "meal_type": meal.value})

            entry = await self.history.get_claim(normalized_id, meal)
            previous_claimed_at = ensure_utc(entry.claimed_at) if entry else None
            removed = await self.history.remove_claims(normalized_id, meal)
            await self.db.commit()
        except MealTrackerException:
            raise
        except SQLAlchemyError as exc:
            raise await self._storage_failure("unclaim", normalized_id, exc) from exc

        if removed != 1:
            logger.warning(
                f"Unclaim removed {removed} history rows for {normalized_id}/{meal.value}; expected exactly one"
            )
        logger.info(f"Meal unclaimed: participant={normalized_id}, meal={meal.value}")
        return UnclaimResult(
            participant_id=normalized_id,
            meal_type=meal,
            previous_claimed_at=previous_claimed_at,
            history_removed=removed,
        )

    async def _storage_failure(self, operation: str, participant_id: str, exc: Exception) -> StorageError:
        await self.db.rollback()
        logger.error(f"Storage failure during {operation} for {participant_id}: {exc}")
        return StorageError(f"Error during {operation}")
