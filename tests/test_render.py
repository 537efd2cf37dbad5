"""Tests for text views."""

from datetime import date, datetime, timezone

import pytest

from habitcli.core.habit import Habit
from habitcli.core.models import HabitFilter, TrackerStats
from habitcli.core.profile import UserProfile
from habitcli.core.render import (
    format_habits,
    format_loop_demo,
    format_profile,
    format_reminder,
    format_stats,
    progress_bar,
)

MONDAY = date(2024, 1, 1)


class TestProgressBar:
    @pytest.mark.parametrize(
        "percent, expected",
        [
            (0, "░░░░░░░░░░ 0%"),
            (20, "██░░░░░░░░ 20%"),
            (100, "██████████ 100%"),
            (150, "██████████ 100%"),
            (-5, "░░░░░░░░░░ 0%"),
        ],
    )
    def test_cells(self, percent, expected):
        assert progress_bar(percent) == expected

    def test_rounds(self):
        assert progress_bar(33.3333).endswith(" 33%")


class TestFormatHabits:
    def test_lists_progress(self):
        h = Habit(name="Read", target_frequency=5, completions=["2024-01-01"])
        text = format_habits([h], reference=MONDAY)
        assert "1. [Active] Read" in text
        assert "Target   : 5x/week" in text
        assert "Progress : 1/5 (20%)" in text
        assert "██░░░░░░░░ 20%" in text

    def test_empty(self):
        assert "No habits yet." in format_habits([])

    def test_filter_caption(self):
        assert "(Filter: Done)" in format_habits([], HabitFilter.done)
        assert "(Filter: Active)" in format_habits([], "active")


class TestFormatProfile:
    def test_fields(self):
        profile = UserProfile(name="Ana", joined_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
        profile.update_stats([Habit(completions=["2024-01-01"])], reference=MONDAY)
        text = format_profile(profile, now=datetime(2024, 1, 3, tzinfo=timezone.utc))
        assert "Name              : Ana" in text
        assert "Total habits      : 1" in text
        assert "Total completions : 1" in text
        assert "Days joined       : 2" in text


class TestFormatStats:
    def test_with_top(self):
        top = Habit(name="Walk")
        text = format_stats(
            TrackerStats(total=2, active=1, done=1, average_target=2.5,
                         most_active_habit=top, most_active_count=3)
        )
        assert "Average target/week   : 2.50" in text
        assert "Most active this week : Walk (3x)" in text

    def test_empty(self):
        assert "Most active this week : -" in format_stats(TrackerStats())


class TestFormatReminder:
    def test_none_when_empty(self):
        assert format_reminder([]) is None

    def test_single(self):
        assert 'REMINDER: Don\'t forget "Read"!' in format_reminder([Habit(name="Read")])

    def test_many(self):
        text = format_reminder([Habit(name="Read"), Habit(name="Walk")])
        assert "  - Read" in text
        assert "  - Walk" in text


class TestLoopDemo:
    def test_both_listings(self):
        text = format_loop_demo([Habit(name="Read", target_frequency=5)], reference=MONDAY)
        assert "1. Read - Status: Active" in text
        assert "1. Read - Target: 5/week" in text
