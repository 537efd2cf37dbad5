"""Shared fixtures for the test suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from habitcli.core.tracker import HabitTracker


# ---------------------------------------------------------------------------
# Data file helpers
# ---------------------------------------------------------------------------

@pytest.fixture()
def data_file(tmp_path: Path) -> Path:
    """Path for a data file that does not exist yet."""
    return tmp_path / "habits-data.json"


@pytest.fixture()
def write_data(data_file: Path):
    """Write a raw document (dict or text) to the data file."""
    def _write(content: Any) -> Path:
        if isinstance(content, str):
            data_file.write_text(content, encoding="utf-8")
        else:
            data_file.write_text(json.dumps(content), encoding="utf-8")
        return data_file

    return _write


@pytest.fixture()
def read_data(data_file: Path):
    def _read() -> dict[str, Any]:
        return json.loads(data_file.read_text(encoding="utf-8"))

    return _read


# ---------------------------------------------------------------------------
# Tracker
# ---------------------------------------------------------------------------

@pytest.fixture()
def tracker(data_file: Path) -> HabitTracker:
    """Empty tracker backed by a temp file."""
    return HabitTracker(data_file)


@pytest.fixture()
def seeded_tracker(tracker: HabitTracker) -> HabitTracker:
    tracker.add_habit("Read", 5)
    tracker.add_habit("Walk", 3)
    tracker.add_habit("Meditate", 7)
    return tracker
