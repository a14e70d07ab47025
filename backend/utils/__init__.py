"""Utilities module - datetime helpers and error types."""
from backend.utils.datetime_helpers import ensure_utc, format_claim_time

__all__ = ["ensure_utc", "format_claim_time"]
