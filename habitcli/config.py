from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_REMINDER_INTERVAL_MS = 10000


class Settings(BaseSettings):
    data_file: str = "habits-data.json"

    # Reminder cadence. Non-numeric or non-positive values fall back to the default.
    reminder_interval_ms: int = DEFAULT_REMINDER_INTERVAL_MS
    reminder_scope: str = "first"  # "first" | "all"

    # Display name override; stored profile name is used when unset
    habit_user_name: str | None = None

    week_mode: str = "calendar"  # "calendar" (Mon–Sun) | "rolling" (trailing 7 days)
    seed_demo_habits: bool = True

    log_level: str = "WARNING"
    log_file: str | None = None

    model_config = {"env_file": ".env", "extra": "ignore"}

    @field_validator("reminder_interval_ms", mode="before")
    @classmethod
    def _interval_or_default(cls, value: Any) -> int:
        try:
            interval = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return DEFAULT_REMINDER_INTERVAL_MS
        return interval if interval > 0 else DEFAULT_REMINDER_INTERVAL_MS

    @field_validator("reminder_scope", mode="before")
    @classmethod
    def _scope_or_default(cls, value: Any) -> str:
        scope = str(value).strip().lower() if value is not None else ""
        return scope if scope in ("first", "all") else "first"

    @field_validator("week_mode", mode="before")
    @classmethod
    def _week_mode_or_default(cls, value: Any) -> str:
        mode = str(value).strip().lower() if value is not None else ""
        return mode if mode in ("calendar", "rolling") else "calendar"

    @field_validator("seed_demo_habits", mode="before")
    @classmethod
    def _seed_flag_or_default(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        flag = str(value).strip().lower() if value is not None else ""
        if flag in ("0", "false", "no", "off"):
            return False
        return True

    @field_validator("habit_user_name", mode="before")
    @classmethod
    def _blank_name_is_unset(cls, value: Any) -> str | None:
        if value is None:
            return None
        name = str(value).strip()
        return name or None


settings = Settings()
