"""Tests for the persistence codec."""

from __future__ import annotations

import json
import os
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from habitcli.core import storage
from habitcli.core.errors import PersistenceReadError, PersistenceWriteError
from habitcli.core.habit import Habit
from habitcli.core.profile import UserProfile


def _profile() -> UserProfile:
    return UserProfile(name="Ana", joined_at=datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc))


def _habits() -> list[Habit]:
    return [
        Habit(name="Read", target_frequency=5, completions=["2024-01-01", "2024-01-03"]),
        Habit(name="Walk", target_frequency=3),
    ]


class TestRoundTrip:
    def test_save_then_load_reproduces_state(self, data_file):
        profile, habits = _profile(), _habits()
        assert storage.save(data_file, profile, habits) is True

        state = storage.load(data_file)
        assert state.profile.name == "Ana"
        assert state.profile.joined_at == profile.joined_at
        assert [h.id for h in state.habits] == [h.id for h in habits]
        assert [h.name for h in state.habits] == ["Read", "Walk"]
        assert [h.target_frequency for h in state.habits] == [5, 3]
        assert state.habits[0].completions == ["2024-01-01", "2024-01-03"]
        assert [h.created_at for h in state.habits] == [h.created_at for h in habits]

    def test_loaded_habits_are_fresh_instances(self, data_file):
        habits = _habits()
        storage.save(data_file, _profile(), habits)
        state = storage.load(data_file)
        assert state.habits[0] is not habits[0]

    def test_file_shape(self, data_file, read_data):
        storage.save(data_file, _profile(), _habits())
        data = read_data()
        assert set(data) == {"profile", "habits"}
        assert set(data["profile"]) == {"name", "joinedAt"}
        assert set(data["habits"][0]) == {"id", "name", "targetFrequency", "completions", "createdAt"}

    def test_creates_parent_directory(self, tmp_path):
        target = tmp_path / "nested" / "dir" / "data.json"
        assert storage.save(target, _profile(), []) is True
        assert target.exists()


class TestLoadDefaults:
    def test_missing_file_gives_fresh_profile(self, data_file):
        state = storage.load(data_file)
        assert state.habits == []
        assert state.profile.joined_at is not None
        assert datetime.now(timezone.utc) - state.profile.joined_at < timedelta(seconds=5)

    def test_read_state_missing_is_none(self, data_file):
        assert storage.read_state(data_file) is None

    def test_invalid_json_falls_back(self, write_data, caplog):
        path = write_data("{not json")
        with caplog.at_level("ERROR"):
            state = storage.load(path)
        assert state.habits == []
        assert "Failed to load" in caplog.text

    def test_invalid_json_strict_raises(self, write_data):
        with pytest.raises(PersistenceReadError):
            storage.read_state(write_data("[1, 2"))

    def test_invalid_utf8_falls_back(self, data_file):
        data_file.write_bytes(b'{"habits": [{"name": "Caf\xe9"}]}')
        state = storage.load(data_file)
        assert state.habits == []
        assert state.profile.joined_at is not None

    def test_invalid_utf8_strict_raises(self, data_file):
        data_file.write_bytes(b'{"habits": [{"name": "Caf\xe9"}]}')
        with pytest.raises(PersistenceReadError):
            storage.read_state(data_file)

    def test_huge_frequency_only_affects_that_habit(self, write_data):
        huge = "1" + "0" * 400
        path = write_data('{"habits": [{"name": "Read", "targetFrequency": ' + huge + '}, {"name": "Walk"}]}')
        state = storage.load(path)
        assert [h.name for h in state.habits] == ["Read", "Walk"]
        assert state.habits[0].target_frequency == 7

    def test_top_level_not_object(self, write_data):
        with pytest.raises(PersistenceReadError):
            storage.read_state(write_data([1, 2, 3]))
        assert storage.load(write_data([1, 2, 3])).habits == []

    def test_habits_not_list(self, write_data):
        with pytest.raises(PersistenceReadError):
            storage.read_state(write_data({"habits": {"a": 1}}))

    def test_missing_sections(self, write_data):
        state = storage.load(write_data({}))
        assert state.habits == []
        assert state.profile.joined_at is not None

    def test_non_array_completions_only_affects_that_habit(self, write_data):
        state = storage.load(
            write_data(
                {
                    "profile": {"name": "Ana"},
                    "habits": [
                        {"id": "1", "name": "Read", "completions": "2024-01-01"},
                        {"id": "2", "name": "Walk", "completions": ["2024-01-02"]},
                    ],
                }
            )
        )
        assert [h.name for h in state.habits] == ["Read", "Walk"]
        assert state.habits[0].completions == []
        assert state.habits[1].completions == ["2024-01-02"]

    def test_missing_fields_defaulted(self, write_data):
        state = storage.load(write_data({"habits": [{}]}))
        habit = state.habits[0]
        assert habit.id
        assert habit.target_frequency == 7
        assert habit.completions == []

    def test_non_object_habit_skipped(self, write_data):
        state = storage.load(write_data({"habits": ["junk", {"name": "Read"}]}))
        assert [h.name for h in state.habits] == ["Read"]

    def test_duplicate_ids_replaced(self, write_data):
        state = storage.load(write_data({"habits": [{"id": "x"}, {"id": "x"}]}))
        ids = [h.id for h in state.habits]
        assert ids[0] == "x"
        assert ids[1] != "x"

    def test_extra_fields_ignored(self, write_data):
        state = storage.load(
            write_data({"version": 3, "profile": {"name": "Ana", "mood": "ok"}, "habits": []})
        )
        assert state.profile.name == "Ana"


class TestWriteFailures:
    def test_failed_write_keeps_previous_file(self, data_file):
        storage.save(data_file, _profile(), _habits())
        before = data_file.read_text(encoding="utf-8")

        with patch("habitcli.core.storage.os.replace", side_effect=PermissionError("denied")):
            assert storage.save(data_file, _profile(), []) is False

        assert data_file.read_text(encoding="utf-8") == before
        leftovers = [p for p in os.listdir(data_file.parent) if p.endswith(".tmp")]
        assert leftovers == []

    def test_strict_write_raises(self, data_file):
        with patch("habitcli.core.storage.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceWriteError) as excinfo:
                storage.write_state(data_file, _profile(), [])
        assert excinfo.value.path == data_file

    def test_save_logs_error(self, data_file, caplog):
        with patch("habitcli.core.storage.os.replace", side_effect=OSError("disk full")):
            with caplog.at_level("ERROR"):
                storage.save(data_file, _profile(), [])
        assert "Failed to save" in caplog.text


class TestDelete:
    def test_delete_existing(self, data_file):
        storage.save(data_file, _profile(), [])
        assert storage.delete_state(data_file) is True
        assert not data_file.exists()

    def test_delete_missing_is_not_an_error(self, data_file):
        assert storage.delete_state(data_file) is False


class TestEncode:
    def test_encode_is_json_serializable(self):
        doc = storage.encode(_profile(), _habits())
        assert json.loads(json.dumps(doc))["habits"][0]["targetFrequency"] == 5
