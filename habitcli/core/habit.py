"""Habit entity — one habit's state and its weekly progress metrics.

Construction never fails on bad field values: every field has a
validator that substitutes a default instead of rejecting, so a
hand-edited data file still yields a usable Habit.
"""

from __future__ import annotations

import logging
import math
import uuid
from datetime import date, datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from habitcli.core.dates import WeekMode, day_id, parse_day_id, window_bounds
from habitcli.core.errors import InvalidDateFormat
from habitcli.core.models import HabitStatus

logger = logging.getLogger(__name__)

DEFAULT_HABIT_NAME = "Untitled Habit"
DEFAULT_TARGET_FREQUENCY = 7


def new_habit_id() -> str:
    return str(uuid.uuid4())


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def sanitize_name(value: Any) -> str:
    """Trimmed display name, or the placeholder when blank or not text."""
    if not isinstance(value, str):
        return DEFAULT_HABIT_NAME
    return value.strip() or DEFAULT_HABIT_NAME


def coerce_frequency(value: Any) -> int:
    """Positive whole number of completions per week; 7 when unusable.

    Accepts ints, floats and numeric strings ("5", " 3 ", "4.0").
    Fractions are truncated; anything that ends up below 1 is replaced.
    """
    if isinstance(value, bool) or value is None:
        return DEFAULT_TARGET_FREQUENCY
    try:
        number = float(value.strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_TARGET_FREQUENCY
    if not math.isfinite(number):
        return DEFAULT_TARGET_FREQUENCY
    frequency = int(number)
    return frequency if frequency > 0 else DEFAULT_TARGET_FREQUENCY


class Habit(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(default_factory=new_habit_id, frozen=True)
    name: str = DEFAULT_HABIT_NAME
    target_frequency: int = Field(default=DEFAULT_TARGET_FREQUENCY, alias="targetFrequency")
    completions: list[str] = Field(default_factory=list)  # unique DayIds, insertion order
    created_at: datetime = Field(default_factory=_utc_now, alias="createdAt", frozen=True)

    # ------------------------------------------------------------------
    # Field coercion
    # ------------------------------------------------------------------

    @field_validator("id", mode="before")
    @classmethod
    def _id_or_fresh(cls, value: Any) -> str:
        if isinstance(value, bool) or value is None:
            return new_habit_id()
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str) and value.strip():
            return value.strip()
        return new_habit_id()

    @field_validator("name", mode="before")
    @classmethod
    def _name_or_default(cls, value: Any) -> str:
        return sanitize_name(value)

    @field_validator("target_frequency", mode="before")
    @classmethod
    def _frequency_or_default(cls, value: Any) -> int:
        return coerce_frequency(value)

    @field_validator("completions", mode="before")
    @classmethod
    def _unique_day_strings(cls, value: Any) -> list[str]:
        if not isinstance(value, (list, tuple)):
            if value is not None:
                logger.warning("Ignoring non-list completions: %r", value)
            return []
        seen: dict[str, None] = {}
        for item in value:
            if isinstance(item, str) and item.strip():
                seen.setdefault(item.strip(), None)
            else:
                logger.warning("Dropping empty or non-text completion entry: %r", item)
        return list(seen)

    @field_validator("created_at", mode="before")
    @classmethod
    def _timestamp_or_now(cls, value: Any) -> datetime:
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
            except ValueError:
                pass
        return _utc_now()

    # ------------------------------------------------------------------
    # Behaviour
    # ------------------------------------------------------------------

    def mark_complete(self, day: str | date | datetime | None = None) -> bool:
        """Record `day` (default today). False when it was already recorded.

        Raises InvalidDateFormat for a malformed explicit day string.
        """
        if isinstance(day, str):
            parse_day_id(day)
            key = day
        else:
            key = day_id(day)
        if key in self.completions:
            return False
        self.completions.append(key)
        return True

    def completions_in_week(
        self,
        reference: datetime | date | None = None,
        mode: WeekMode | str = WeekMode.calendar,
    ) -> int:
        """Completions falling inside the week window around `reference`.

        Malformed day strings are skipped, never counted.
        """
        start, end = window_bounds(reference, mode)
        count = 0
        for ymd in self.completions:
            try:
                moment = parse_day_id(ymd)
            except InvalidDateFormat:
                logger.debug("Habit %s: skipping unparsable completion %r", self.id, ymd)
                continue
            if start <= moment <= end:
                count += 1
        return count

    def is_completed_this_week(
        self,
        reference: datetime | date | None = None,
        mode: WeekMode | str = WeekMode.calendar,
    ) -> bool:
        return self.completions_in_week(reference, mode) >= self.target_frequency

    def progress_percentage(
        self,
        reference: datetime | date | None = None,
        mode: WeekMode | str = WeekMode.calendar,
    ) -> float:
        """Share of the weekly target reached, clamped to 0–100."""
        if self.target_frequency <= 0:
            return 0.0
        pct = 100.0 * self.completions_in_week(reference, mode) / self.target_frequency
        return min(100.0, max(0.0, pct))

    def status(
        self,
        reference: datetime | date | None = None,
        mode: WeekMode | str = WeekMode.calendar,
    ) -> HabitStatus:
        if self.is_completed_this_week(reference, mode):
            return HabitStatus.done
        return HabitStatus.active

    def to_record(self) -> dict[str, Any]:
        """JSON-ready dict in the on-disk field naming."""
        return self.model_dump(mode="json", by_alias=True)
