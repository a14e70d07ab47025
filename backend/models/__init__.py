"""Database models."""
from backend.models.base import MealType, MEAL_TYPES
from backend.models.participant import Participant
from backend.models.meal_claim import MealClaim

__all__ = [
    "MealType",
    "MEAL_TYPES",
    "Participant",
    "MealClaim",
]
