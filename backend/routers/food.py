"""Public meal claim routes used by the claim form and the live dashboard."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database import get_db
from backend.schemas.claim import ClaimRequest, ClaimResponse, RecentClaimsResponse
from backend.schemas.participant import ParticipantDetail, ParticipantResponse
from backend.schemas.stats import StatsResponse
from backend.services import ClaimService, StatisticsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/claim", response_model=ClaimResponse)
async def claim_meal(
    request: ClaimRequest,
    db: AsyncSession = Depends(get_db),
) -> ClaimResponse:
    """Claim one meal for a participant."""
    result = await ClaimService(db).claim(request.participant_id, request.meal_type)
    return ClaimResponse.from_result(result, f"{result.meal_type.label} claimed successfully!")


@router.get("/participant/{participant_id}", response_model=ParticipantResponse)
async def get_participant(
    participant_id: str,
    db: AsyncSession = Depends(get_db),
) -> ParticipantResponse:
    """Return a participant with its meal map."""
    participant = await ClaimService(db).get_participant(participant_id)
    return ParticipantResponse(participant=ParticipantDetail.from_participant(participant))


@router.get("/stats", response_model=StatsResponse)
async def get_stats(db: AsyncSession = Depends(get_db)) -> StatsResponse:
    """Aggregate claim counts per meal."""
    return await StatisticsService(db).get_stats()


@router.get("/recent", response_model=RecentClaimsResponse)
async def get_recent_claims(
    limit: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> RecentClaimsResponse:
    """Latest claims, newest first, truncated to ``limit``.

    Missing, non-numeric or non-positive limits use the default; values above
    ``max_recent_claims`` are capped to it.
    """
    claims = await StatisticsService(db).get_recent_claims(limit)
    return RecentClaimsResponse(count=len(claims), claims=claims)
