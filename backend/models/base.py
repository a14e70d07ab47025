"""Base utilities for SQLAlchemy models."""
from enum import Enum


class MealType(str, Enum):
    """Meal slot enumeration for type safety."""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"

    @property
    def label(self) -> str:
        """Display name, e.g. ``Breakfast``."""
        return self.value.capitalize()

    @property
    def claimed_column(self) -> str:
        return f"{self.value}_claimed"

    @property
    def claimed_at_column(self) -> str:
        return f"{self.value}_claimed_at"


MEAL_TYPES: tuple[MealType, ...] = tuple(MealType)
