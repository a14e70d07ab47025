"""Meal claim request and response schemas."""
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from backend.schemas.base import BaseSchema
from backend.schemas.participant import MealMap, ParticipantSummary

if TYPE_CHECKING:  # pragma: no cover - for typing only
    from backend.services.claim_service import ClaimResult


class ClaimRequest(BaseModel):
    """Claim, manual claim and unclaim payload.

    Both snake_case and the camelCase keys used by the web form are accepted.
    Values are passed through as sent; missing or non-text values are
    reported by the service as a validation error.
    """
    model_config = ConfigDict(populate_by_name=True)

    participant_id: Optional[Any] = Field(
        default=None, validation_alias=AliasChoices("participant_id", "participantId")
    )
    meal_type: Optional[Any] = Field(
        default=None, validation_alias=AliasChoices("meal_type", "mealType")
    )


class ClaimResponse(BaseSchema):
    """Successful claim response."""
    success: bool = True
    message: str
    participant: ParticipantSummary
    meal_type: str
    claimed_at: datetime
    meals: MealMap

    @classmethod
    def from_result(cls, result: "ClaimResult", message: str) -> "ClaimResponse":
        """Build a response from a claim engine result."""
        participant = result.participant
        return cls(
            message=message,
            participant=ParticipantSummary(
                participant_id=participant.participant_id,
                member_name=participant.member_name,
                team_id=participant.team_id,
                team_name=participant.team_name,
                member_number=participant.member_number,
            ),
            meal_type=result.meal_type.value,
            claimed_at=result.claimed_at,
            meals=MealMap.from_participant(participant),
        )


class UnclaimResponse(BaseSchema):
    """Successful unclaim response."""
    success: bool = True
    message: str
    participant_id: str
    meal_type: str
    previous_claimed_at: Optional[datetime] = None
    history_removed: int


class RecentClaim(BaseSchema):
    """History entry in the recent activity feed."""
    participant_id: str
    team_id: str
    team_name: str
    member_name: str
    meal_type: str
    claimed_at: datetime


class RecentClaimsResponse(BaseSchema):
    """Most recent claims, newest first."""
    count: int
    claims: list[RecentClaim]


class ReconcileResponse(BaseSchema):
    """Result of rebuilding claim history from participant state."""
    success: bool = True
    created: int
    removed: int
