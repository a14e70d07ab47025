"""Input normalization shared by every claim and lookup entry point."""
from __future__ import annotations

from typing import Any

from backend.models.base import MealType
from backend.utils.exceptions import ValidationError

VALID_MEALS_MESSAGE = "Invalid meal type. Must be breakfast, lunch, or dinner"


def normalize_participant_id(participant_id: Any) -> str:
    """Trim and uppercase a participant id, rejecting blank or non-text input."""
    if participant_id is not None and not isinstance(participant_id, str):
        raise ValidationError("Participant ID must be text")
    if not participant_id or not participant_id.strip():
        raise ValidationError("Participant ID is required")
    return participant_id.strip().upper()


def normalize_team_id(team_id: Any) -> str:
    """Trim and uppercase a team id, rejecting blank input."""
    if not isinstance(team_id, str) or not team_id.strip():
        raise ValidationError("Team ID is required")
    return team_id.strip().upper()


def normalize_meal_type(meal_type: Any) -> MealType:
    """Match a meal name case-insensitively against the known meals."""
    if meal_type is not None and not isinstance(meal_type, str):
        raise ValidationError("Meal type must be text")
    if not meal_type or not meal_type.strip():
        raise ValidationError("Meal type is required")
    try:
        return MealType(meal_type.strip().lower())
    except ValueError:
        raise ValidationError(VALID_MEALS_MESSAGE, {"meal_type": meal_type}) from None


def normalize_claim_request(participant_id: Any, meal_type: Any) -> tuple[str, MealType]:
    """Validate a (participant, meal) pair for claim, manual claim and unclaim."""
    if not participant_id or not meal_type:
        raise ValidationError("Participant ID and meal type are required")
    return normalize_participant_id(participant_id), normalize_meal_type(meal_type)


def parse_limit(raw: Any, default: int, maximum: int) -> int:
    """Parse a ``limit`` query value, falling back to ``default`` when unusable."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    if value < 1:
        return default
    return min(value, maximum)
