"""Persistence codec — tracker state to and from a single JSON file.

File shape:

    {
      "profile": {"name": str, "joinedAt": ISO-8601},
      "habits": [{"id", "name", "targetFrequency", "completions", "createdAt"}, ...]
    }

`read_state` / `write_state` raise the typed persistence errors.
`load` / `save` wrap them for the tracker: they log and recover, so a
broken or unwritable file never stops the program.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from habitcli.core.errors import PersistenceReadError, PersistenceWriteError
from habitcli.core.habit import Habit, new_habit_id
from habitcli.core.models import TrackerState
from habitcli.core.profile import UserProfile

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Encode / decode (pure)
# ---------------------------------------------------------------------------


def encode(profile: UserProfile, habits: Iterable[Habit]) -> dict[str, Any]:
    return {
        "profile": profile.to_record(),
        "habits": [h.to_record() for h in habits],
    }


def _decode_habits(raw_habits: list[Any]) -> list[Habit]:
    habits: list[Habit] = []
    seen_ids: set[str] = set()
    for position, raw in enumerate(raw_habits):
        if not isinstance(raw, dict):
            logger.warning("Skipping habit #%d: expected an object, got %r", position, raw)
            continue
        try:
            habit = Habit.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Skipping habit #%d: %s", position, exc)
            continue
        if habit.id in seen_ids:
            fresh = new_habit_id()
            logger.warning("Duplicate habit id %s replaced with %s", habit.id, fresh)
            habit = habit.model_copy(update={"id": fresh})
        seen_ids.add(habit.id)
        habits.append(habit)
    return habits


def decode(data: Any, path: Path | str = "<memory>") -> TrackerState:
    """Validate a parsed document into fresh model instances.

    Structural problems (not an object, `habits` not a list) raise
    PersistenceReadError. Field-level problems are defaulted per habit.
    """
    if not isinstance(data, dict):
        raise PersistenceReadError(path, f"expected a JSON object, got {type(data).__name__}")

    raw_profile = data.get("profile")
    if not isinstance(raw_profile, dict):
        if raw_profile is not None:
            logger.warning("Ignoring malformed profile: %r", raw_profile)
        raw_profile = {}
    profile = UserProfile.model_validate(raw_profile)

    raw_habits = data.get("habits")
    if raw_habits is None:
        raw_habits = []
    if not isinstance(raw_habits, list):
        raise PersistenceReadError(path, "'habits' must be a list")

    return TrackerState(profile=profile.initialize(), habits=_decode_habits(raw_habits))


# ---------------------------------------------------------------------------
# Strict file access
# ---------------------------------------------------------------------------


def read_state(path: Path | str) -> TrackerState | None:
    """Parse the file at `path`. None when it does not exist."""
    path = Path(path)
    if not path.exists():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise PersistenceReadError(path, str(exc)) from exc
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise PersistenceReadError(path, f"invalid JSON: {exc}") from exc
    return decode(data, path)


def write_state(path: Path | str, profile: UserProfile, habits: Iterable[Habit]) -> None:
    """Write atomically: temp file in the same directory, then replace."""
    path = Path(path)
    payload = json.dumps(encode(profile, habits), ensure_ascii=False, indent=2)
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)
            fh.write("\n")
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise PersistenceWriteError(path, str(exc)) from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug("Could not remove temp file %s", tmp_name)


def delete_state(path: Path | str) -> bool:
    """Remove the file. False when there was nothing to remove."""
    path = Path(path)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise PersistenceWriteError(path, str(exc)) from exc
    return True


# ---------------------------------------------------------------------------
# Lenient wrappers
# ---------------------------------------------------------------------------


def fresh_state() -> TrackerState:
    return TrackerState(profile=UserProfile().initialize())


def load(path: Path | str) -> TrackerState:
    """Never raises: missing file and read errors both give a fresh state."""
    try:
        state = read_state(path)
    except PersistenceReadError as exc:
        logger.error("Failed to load data, starting empty: %s", exc)
        return fresh_state()
    if state is None:
        logger.info("No data file at %s, starting empty", path)
        return fresh_state()
    logger.debug("Loaded %d habit(s) from %s", len(state.habits), path)
    return state


def save(path: Path | str, profile: UserProfile, habits: Iterable[Habit]) -> bool:
    """Never raises: a failed write is logged and the old file stays as it was."""
    try:
        write_state(path, profile, habits)
    except PersistenceWriteError as exc:
        logger.error("Failed to save data: %s", exc)
        return False
    return True
