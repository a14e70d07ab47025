"""Tests for datetime helper utilities."""
from datetime import UTC, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from backend.utils.datetime_helpers import ensure_utc, format_claim_time


def test_ensure_utc_none_returns_none():
    """The helper should gracefully handle ``None`` inputs."""

    assert ensure_utc(None) is None


def test_ensure_utc_attaches_timezone_to_naive_datetime():
    """Naive datetimes should be marked as UTC without adjusting the clock."""

    naive = datetime(2024, 5, 1, 12, 30, 0)

    result = ensure_utc(naive)

    assert result.tzinfo is UTC
    assert result.replace(tzinfo=None) == naive


def test_ensure_utc_converts_from_other_timezones_to_utc():
    """Timezone-aware datetimes not already UTC should be converted."""

    eastern = timezone(timedelta(hours=-4))
    aware = datetime(2024, 5, 1, 8, 0, tzinfo=eastern)

    result = ensure_utc(aware)

    assert result.tzinfo is UTC
    assert result.hour == 12
    assert result.replace(tzinfo=None) == datetime(2024, 5, 1, 12, 0)


def test_format_claim_time_converts_to_event_zone():
    """Claim times are shown in the event's local zone with a 12-hour clock."""

    claimed_at = datetime(2026, 3, 14, 6, 30, tzinfo=UTC)

    assert format_claim_time(claimed_at, ZoneInfo("Asia/Kolkata")) == "14/03/2026, 12:00:00 PM"


def test_format_claim_time_treats_naive_values_as_utc():
    """SQLite hands back naive datetimes; they are read as UTC."""

    stored = datetime(2026, 3, 14, 18, 5, 9)

    assert format_claim_time(stored, ZoneInfo("Asia/Kolkata")) == "14/03/2026, 11:35:09 PM"


def test_format_claim_time_placeholder():
    assert format_claim_time(None, ZoneInfo("Asia/Kolkata")) == "-"
    assert format_claim_time(None, ZoneInfo("UTC"), placeholder="n/a") == "n/a"
