"""Participant and team Pydantic schemas."""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from backend.schemas.base import BaseSchema

if TYPE_CHECKING:  # pragma: no cover - for typing only
    from backend.models.participant import Participant


class MealState(BaseSchema):
    """Claim state of one meal slot."""
    claimed: bool
    claimed_at: Optional[datetime] = None


class MealMap(BaseSchema):
    """All three meal slots of a participant."""
    breakfast: MealState
    lunch: MealState
    dinner: MealState

    @classmethod
    def from_participant(cls, participant: "Participant") -> "MealMap":
        return cls(**{name: MealState(**state) for name, state in participant.meals.items()})


class ParticipantSummary(BaseSchema):
    """Identity fields of a participant."""
    participant_id: str
    member_name: str
    team_id: str
    team_name: str
    member_number: int


class ParticipantDetail(ParticipantSummary):
    """Participant with its meal map."""
    meals: MealMap

    @classmethod
    def from_participant(cls, participant: "Participant") -> "ParticipantDetail":
        return cls(
            participant_id=participant.participant_id,
            member_name=participant.member_name,
            team_id=participant.team_id,
            team_name=participant.team_name,
            member_number=participant.member_number,
            meals=MealMap.from_participant(participant),
        )


class ParticipantResponse(BaseSchema):
    """Single participant lookup response."""
    participant: ParticipantDetail


class TeamMember(BaseSchema):
    """Participant entry inside a team group."""
    participant_id: str
    member_name: str
    member_number: int
    meals: MealMap

    @classmethod
    def from_participant(cls, participant: "Participant") -> "TeamMember":
        return cls(
            participant_id=participant.participant_id,
            member_name=participant.member_name,
            member_number=participant.member_number,
            meals=MealMap.from_participant(participant),
        )


class TeamGroup(BaseSchema):
    """Participants sharing a team id, ordered by member number."""
    team_id: str
    team_name: str
    member_count: int
    members: list[TeamMember]


class AllTeamsResponse(BaseSchema):
    """Every participant grouped by team."""
    total_teams: int
    total_participants: int
    teams: list[TeamGroup]


class TeamResponse(BaseSchema):
    """Single team lookup response."""
    team: TeamGroup
