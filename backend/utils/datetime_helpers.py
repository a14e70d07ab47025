"""Datetime utility functions for timezone handling."""
from datetime import datetime, UTC, tzinfo
from typing import Optional

CLAIM_TIME_FORMAT = "%d/%m/%Y, %I:%M:%S %p"


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure datetime is timezone-aware in UTC.

    This utility handles the common case where datetimes from the database
    may be timezone-naive but should be treated as UTC.

    Args:
        dt: Datetime to normalize (can be None)

    Returns:
        UTC-aware datetime or None if input was None

    Example:
        >>> naive_dt = datetime(2025, 1, 1, 12, 0, 0)
        >>> aware_dt = ensure_utc(naive_dt)
        >>> aware_dt.tzinfo == UTC
        True

        >>> ensure_utc(None) is None
        True
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_claim_time(dt: Optional[datetime], zone: tzinfo, placeholder: str = "-") -> str:
    """Render a claim timestamp for people reading the export.

    Naive values are treated as UTC before conversion to ``zone``.
    Returns ``placeholder`` when there is no timestamp.
    """
    if dt is None:
        return placeholder
    return ensure_utc(dt).astimezone(zone).strftime(CLAIM_TIME_FORMAT)
