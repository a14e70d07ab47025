"""Tests for request normalization helpers."""
import pytest

from backend.models.base import MealType
from backend.services.validation import (
    VALID_MEALS_MESSAGE,
    normalize_claim_request,
    normalize_meal_type,
    normalize_participant_id,
    normalize_team_id,
    parse_limit,
)
from backend.utils.exceptions import ValidationError


def test_normalize_participant_id_trims_and_uppercases():
    assert normalize_participant_id("  t01-m1\t") == "T01-M1"


@pytest.mark.parametrize("value", ["", "   ", None, 42])
def test_normalize_participant_id_rejects_blank(value):
    with pytest.raises(ValidationError):
        normalize_participant_id(value)


def test_normalize_team_id():
    assert normalize_team_id(" t07 ") == "T07"


@pytest.mark.parametrize("value, expected", [
    ("breakfast", MealType.BREAKFAST),
    ("Lunch", MealType.LUNCH),
    (" DINNER ", MealType.DINNER),
])
def test_normalize_meal_type(value, expected):
    assert normalize_meal_type(value) is expected


@pytest.mark.parametrize("value", ["brunch", "snack", "lunches"])
def test_normalize_meal_type_rejects_unknown(value):
    with pytest.raises(ValidationError) as exc_info:
        normalize_meal_type(value)

    assert exc_info.value.message == VALID_MEALS_MESSAGE
    assert exc_info.value.status_code == 400


def test_normalize_claim_request():
    assert normalize_claim_request("t01-m1", "Lunch") == ("T01-M1", MealType.LUNCH)


@pytest.mark.parametrize("participant_id, meal_type, message", [
    (123, "lunch", "Participant ID must be text"),
    ("T01-M1", 7, "Meal type must be text"),
    ("T01-M1", {"meal": "lunch"}, "Meal type must be text"),
])
def test_normalize_claim_request_rejects_non_text(participant_id, meal_type, message):
    with pytest.raises(ValidationError) as exc_info:
        normalize_claim_request(participant_id, meal_type)

    assert exc_info.value.message == message
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("raw, expected", [
    (None, 10),
    ("", 10),
    ("abc", 10),
    ("0", 10),
    ("-5", 10),
    ("7", 7),
    (" 12 ", 12),
    (500, 100),
])
def test_parse_limit(raw, expected):
    assert parse_limit(raw, default=10, maximum=100) == expected
