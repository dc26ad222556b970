"""Normalized value update events.

The stream decoder converts every delta value into a :class:`ValueUpdate`.
Only the value store applies them.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pysignalk.models.value import SignalKValue


class ValueUpdate(BaseModel):
    """A resolved path/value pair ready to be stored."""

    model_config = ConfigDict(frozen=True)

    absolute_path: str = Field(..., description="Context-qualified path")
    relative_path: str = Field(..., description="Context-stripped path")
    value: SignalKValue
    context: str | None = None
    timestamp: str | None = Field(default=None, description="Server timestamp of the update, if any")
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
