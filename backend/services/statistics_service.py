"""Read-only meal statistics, team views and the recent activity feed."""
from itertools import groupby
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, case
import logging

from backend.config import get_settings
from backend.models.base import MEAL_TYPES
from backend.models.participant import Participant
from backend.schemas.claim import RecentClaim
from backend.schemas.participant import TeamGroup, TeamMember
from backend.schemas.stats import MealStats, StatsResponse
from backend.services.claim_history_service import ClaimHistoryService
from backend.services.participant_service import ParticipantService
from backend.services.validation import normalize_team_id, parse_limit
from backend.utils.datetime_helpers import ensure_utc
from backend.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def claim_percentage(claimed: int, total: int) -> int:
    """Percentage of ``total`` that claimed, rounded half up; 0 for an empty roster."""
    if total <= 0:
        return 0
    return (claimed * 200 + total) // (2 * total)


def group_by_team(participants: list[Participant]) -> list[TeamGroup]:
    """Group participants already ordered by (team_id, member_number), keeping team order."""
    teams = []
    for team_id, members in groupby(participants, key=lambda participant: participant.team_id):
        members = list(members)
        teams.append(
            TeamGroup(
                team_id=team_id,
                team_name=members[0].team_name,
                member_count=len(members),
                members=[TeamMember.from_participant(member) for member in members],
            )
        )
    return teams


class StatisticsService:
    """Service computing aggregates fresh from the participant store on every call."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()
        self.participants = ParticipantService(db)
        self.history = ClaimHistoryService(db)

    async def get_stats(self) -> StatsResponse:
        """
        Count participants and claims per meal.

        Returns:
            StatsResponse where ``claimed + pending == total`` for every meal
        """
        claimed_counts = [
            func.coalesce(func.sum(case((getattr(Participant, meal.claimed_column).is_(True), 1), else_=0)), 0)
            for meal in MEAL_TYPES
        ]
        result = await self.db.execute(select(func.count(Participant.participant_id), *claimed_counts))
        total, *claimed = result.one()
        total = int(total)

        per_meal = {
            meal.value: MealStats(
                claimed=int(count),
                pending=total - int(count),
                percentage=claim_percentage(int(count), total),
            )
            for meal, count in zip(MEAL_TYPES, claimed)
        }
        return StatsResponse(total=total, **per_meal)

    async def get_all_teams(self) -> list[TeamGroup]:
        """Every participant grouped by team, teams in team id order."""
        participants = await self.participants.list_participants()
        return group_by_team(participants)

    async def get_team(self, team_id: str) -> TeamGroup:
        """One team group, or NotFoundError when no participant has the team id."""
        normalized_team_id = normalize_team_id(team_id)
        participants = await self.participants.list_team(normalized_team_id)
        if not participants:
            raise NotFoundError("Team not found", {"team_id": normalized_team_id})
        return group_by_team(participants)[0]

    async def get_recent_claims(self, limit=None) -> list[RecentClaim]:
        """Latest history entries, newest first.

        ``limit`` may be any raw query value; unusable values fall back to the
        configured default.
        """
        effective_limit = parse_limit(
            limit,
            default=self.settings.recent_claims_default_limit,
            maximum=self.settings.max_recent_claims,
        )
        entries = await self.history.get_recent_claims(effective_limit)
        return [
            RecentClaim(
                participant_id=entry.participant_id,
                team_id=entry.team_id,
                team_name=entry.team_name,
                member_name=entry.member_name,
                meal_type=entry.meal_type,
                claimed_at=ensure_utc(entry.claimed_at),
            )
            for entry in entries
        ]
