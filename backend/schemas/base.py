"""Base schema and JSON helpers shared by every API response."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, model_serializer

from backend.utils.datetime_helpers import ensure_utc


def serialize_datetime_utc(dt: datetime) -> str:
    """Render a datetime as ISO 8601 in UTC with a ``Z`` suffix.

    Naive values (SQLite returns these) are read as UTC.
    """
    return ensure_utc(dt).isoformat().replace('+00:00', 'Z')


def to_json_payload(value: Any) -> Any:
    """Recursively replace datetimes in dicts and lists with UTC ISO strings."""
    if isinstance(value, datetime):
        return serialize_datetime_utc(value)
    if isinstance(value, dict):
        return {key: to_json_payload(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_payload(item) for item in value]
    return value


class BaseSchema(BaseModel):
    """Response schema whose timestamps always serialize as UTC ``...Z`` strings."""

    model_config = ConfigDict(
        from_attributes=True,
    )

    @model_serializer(mode="wrap")
    def serialize_model(self, handler):
        return to_json_payload(handler(self))
