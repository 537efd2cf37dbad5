"""Error taxonomy for the habit core.

None of these end the process: the tracker and the persistence wrappers
catch them, log, and fall back to defaults.
"""

from __future__ import annotations

from pathlib import Path


class HabitTrackerError(Exception):
    pass


class InvalidDateFormat(HabitTrackerError, ValueError):
    """A day identifier is not a valid YYYY-MM-DD calendar date."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid day identifier: {value!r} (expected YYYY-MM-DD)")


class PersistenceError(HabitTrackerError):
    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class PersistenceReadError(PersistenceError):
    pass


class PersistenceWriteError(PersistenceError):
    pass
