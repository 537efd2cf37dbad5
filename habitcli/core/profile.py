"""Single-user profile.

Only `name` and `joined_at` are stored. The counters are recomputed from
the habit collection after every tracker mutation and are never read
back from disk.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from habitcli.core.dates import WeekMode

if TYPE_CHECKING:
    from habitcli.core.habit import Habit

DEFAULT_USER_NAME = "User"
_SECONDS_PER_DAY = 24 * 60 * 60


class UserProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = DEFAULT_USER_NAME
    joined_at: datetime | None = Field(default=None, alias="joinedAt")

    total_habits: int = Field(default=0, exclude=True)
    total_completions: int = Field(default=0, exclude=True)
    completed_this_week: int = Field(default=0, exclude=True)

    @field_validator("name", mode="before")
    @classmethod
    def _name_or_default(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return DEFAULT_USER_NAME

    @field_validator("joined_at", mode="before")
    @classmethod
    def _timestamp_or_unset(cls, value: Any) -> datetime | None:
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
            except ValueError:
                return None
        return None

    def initialize(self, now: datetime | None = None) -> UserProfile:
        """First-run step: stamp `joined_at` once. Later calls leave it alone."""
        if self.joined_at is None:
            self.joined_at = now or datetime.now(timezone.utc)
        return self

    def update_stats(
        self,
        habits: Iterable[Habit],
        reference: datetime | date | None = None,
        mode: WeekMode | str = WeekMode.calendar,
    ) -> None:
        snapshot = list(habits)
        self.total_habits = len(snapshot)
        self.total_completions = sum(len(h.completions) for h in snapshot)
        self.completed_this_week = sum(h.completions_in_week(reference, mode) for h in snapshot)

    def days_joined(self, now: datetime | None = None) -> int:
        """Whole days since joining, rounded up, at least 1. 0 before initialize()."""
        if self.joined_at is None:
            return 0
        joined = self.joined_at
        if joined.tzinfo is None:
            joined = joined.astimezone()
        current = now or datetime.now(timezone.utc)
        if current.tzinfo is None:
            current = current.astimezone()
        elapsed = (current - joined).total_seconds()
        return max(1, math.ceil(elapsed / _SECONDS_PER_DAY))

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
