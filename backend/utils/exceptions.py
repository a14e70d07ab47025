"""Typed errors raised by the meal tracker services.

Each error carries a stable ``code`` for API clients, the HTTP status the
boundary should answer with, and an optional ``context`` payload.
"""
from datetime import datetime
from typing import Any, Optional


class MealTrackerException(Exception):
    """Base exception for meal tracker errors."""

    code = "meal_tracker_error"
    status_code = 500

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(MealTrackerException):
    """Raised when a request is missing input or names an unknown meal."""

    code = "validation_error"
    status_code = 400


class NotFoundError(MealTrackerException):
    """Raised when no participant or team matches the normalized id."""

    code = "not_found"
    status_code = 404


class AlreadyClaimedError(MealTrackerException):
    """Raised when a meal slot has already been claimed."""

    code = "already_claimed"
    status_code = 409

    def __init__(self, message: str, claimed_at: datetime | None, participant: dict[str, Any]):
        super().__init__(message, {"claimed_at": claimed_at, "participant": participant})
        self.claimed_at = claimed_at
        self.participant = participant


class NotClaimedError(MealTrackerException):
    """Raised when reversing a meal slot that is not claimed."""

    code = "not_claimed"
    status_code = 409


class EmptyDatasetError(MealTrackerException):
    """Raised when exporting with no participants."""

    code = "empty_dataset"
    status_code = 404


class StorageError(MealTrackerException):
    """Raised when the database rejects or fails an operation."""

    code = "storage_error"
    status_code = 500
