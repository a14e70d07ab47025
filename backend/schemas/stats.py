"""Meal statistics schemas."""
from backend.schemas.base import BaseSchema


class MealStats(BaseSchema):
    """Counts for one meal."""
    claimed: int
    pending: int
    percentage: int


class StatsResponse(BaseSchema):
    """Aggregate meal statistics across all participants."""
    total: int
    breakfast: MealStats
    lunch: MealStats
    dinner: MealStats
