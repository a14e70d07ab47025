"""Admin routes for staff: team views, manual claims, reversals and export."""
import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database import get_db
from backend.schemas.claim import ClaimRequest, ClaimResponse, ReconcileResponse, UnclaimResponse
from backend.schemas.participant import AllTeamsResponse, TeamResponse
from backend.schemas.stats import StatsResponse
from backend.services import ClaimHistoryService, ClaimService, ExportService, StatisticsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


@router.get("/stats", response_model=StatsResponse)
async def get_admin_stats(db: AsyncSession = Depends(get_db)) -> StatsResponse:
    """Aggregate claim counts per meal."""
    return await StatisticsService(db).get_stats()


@router.get("/all-participants", response_model=AllTeamsResponse)
async def get_all_participants(db: AsyncSession = Depends(get_db)) -> AllTeamsResponse:
    """Every participant grouped by team."""
    teams = await StatisticsService(db).get_all_teams()
    return AllTeamsResponse(
        total_teams=len(teams),
        total_participants=sum(team.member_count for team in teams),
        teams=teams,
    )


@router.get("/team/{team_id}", response_model=TeamResponse)
async def get_team(team_id: str, db: AsyncSession = Depends(get_db)) -> TeamResponse:
    """Meal status for one team."""
    team = await StatisticsService(db).get_team(team_id)
    return TeamResponse(team=team)


@router.post("/manual-claim", response_model=ClaimResponse)
async def manual_claim(
    request: ClaimRequest,
    db: AsyncSession = Depends(get_db),
) -> ClaimResponse:
    """Claim a meal on behalf of a participant."""
    logger.info(f"Manual claim requested: participant={request.participant_id}, meal={request.meal_type}")
    result = await ClaimService(db).manual_claim(request.participant_id, request.meal_type)
    return ClaimResponse.from_result(result, "Meal claimed successfully")


@router.delete("/unclaim", response_model=UnclaimResponse)
async def unclaim(
    request: ClaimRequest,
    db: AsyncSession = Depends(get_db),
) -> UnclaimResponse:
    """Undo a meal claim and remove its history entry."""
    logger.info(f"Unclaim requested: participant={request.participant_id}, meal={request.meal_type}")
    result = await ClaimService(db).unclaim(request.participant_id, request.meal_type)
    return UnclaimResponse(
        message="Meal claim undone successfully",
        participant_id=result.participant_id,
        meal_type=result.meal_type.value,
        previous_claimed_at=result.previous_claimed_at,
        history_removed=result.history_removed,
    )


@router.get("/export")
async def export_participants(db: AsyncSession = Depends(get_db)) -> Response:
    """Download the roster with claim status as an xlsx workbook."""
    export_file = await ExportService(db).export()
    return Response(
        content=export_file.content,
        media_type=export_file.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export_file.filename}"'},
    )


@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile_history(db: AsyncSession = Depends(get_db)) -> ReconcileResponse:
    """Rebuild claim history rows from participant claim flags."""
    report = await ClaimHistoryService(db).reconcile()
    return ReconcileResponse(created=report.created, removed=report.removed)
