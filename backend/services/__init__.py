from backend.services.validation import (
    normalize_claim_request,
    normalize_meal_type,
    normalize_participant_id,
    normalize_team_id,
    parse_limit,
)
from backend.services.participant_service import ParticipantService, participant_summary
from backend.services.claim_history_service import ClaimHistoryService, ReconcileReport
from backend.services.claim_service import ClaimService, ClaimResult, UnclaimResult
from backend.services.statistics_service import StatisticsService, claim_percentage, group_by_team
from backend.services.export_service import ExportService, ExportFile

__all__ = [
    # Validation
    'normalize_claim_request',
    'normalize_meal_type',
    'normalize_participant_id',
    'normalize_team_id',
    'parse_limit',

    # Stores
    'ParticipantService',
    'participant_summary',
    'ClaimHistoryService',
    'ReconcileReport',

    # Claim engine
    'ClaimService',
    'ClaimResult',
    'UnclaimResult',

    # Reporting
    'StatisticsService',
    'claim_percentage',
    'group_by_team',
    'ExportService',
    'ExportFile',
]
