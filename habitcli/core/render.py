"""Plain-text views for the terminal. Pure functions, no I/O."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime

from habitcli.core.dates import WeekMode, window_label
from habitcli.core.habit import Habit
from habitcli.core.models import HabitFilter, TrackerStats
from habitcli.core.profile import UserProfile

RULE = "=" * 50
BAR_CELLS = 10
FILLED = "█"
EMPTY = "░"


def progress_bar(percent: float, cells: int = BAR_CELLS) -> str:
    pct = min(100.0, max(0.0, percent))
    filled = round(pct / 100 * cells)
    return f"{FILLED * filled}{EMPTY * (cells - filled)} {round(pct)}%"


def _boxed(title: str, lines: Sequence[str]) -> str:
    return "\n".join(["", RULE, title, RULE, *lines, RULE, ""])


def format_profile(
    profile: UserProfile,
    now: datetime | None = None,
    mode: WeekMode | str = WeekMode.calendar,
) -> str:
    return _boxed(
        "USER PROFILE",
        [
            f"Name              : {profile.name}",
            f"Days joined       : {profile.days_joined(now)}",
            f"Total habits      : {profile.total_habits}",
            f"Total completions : {profile.total_completions}",
            f"Done this week    : {profile.completed_this_week}",
            f"Week range        : {window_label(now, mode)}",
        ],
    )


def format_habit(
    position: int,
    habit: Habit,
    reference: datetime | date | None = None,
    mode: WeekMode | str = WeekMode.calendar,
) -> list[str]:
    progress = habit.progress_percentage(reference, mode)
    done = habit.completions_in_week(reference, mode)
    return [
        f"{position}. [{habit.status(reference, mode).value}] {habit.name}",
        f"   Target   : {habit.target_frequency}x/week",
        f"   Progress : {done}/{habit.target_frequency} ({round(progress)}%)",
        f"   Bar      : {progress_bar(progress)}",
        "",
    ]


def format_habits(
    habits: Sequence[Habit],
    filter: HabitFilter | str = HabitFilter.all,
    reference: datetime | date | None = None,
    mode: WeekMode | str = WeekMode.calendar,
) -> str:
    selected = HabitFilter(filter)
    lines: list[str] = []
    if selected is HabitFilter.active:
        lines.append("(Filter: Active)")
    elif selected is HabitFilter.done:
        lines.append("(Filter: Done)")

    if not habits:
        lines.append("No habits yet.")
    for i, habit in enumerate(habits, start=1):
        lines.extend(format_habit(i, habit, reference, mode))
    return _boxed("HABITS", lines)


def format_stats(stats: TrackerStats) -> str:
    if stats.most_active_habit is not None:
        top = f"{stats.most_active_habit.name} ({stats.most_active_count}x)"
    else:
        top = "-"
    return _boxed(
        "STATISTICS",
        [
            f"Total habits          : {stats.total}",
            f"Active (not yet done) : {stats.active}",
            f"Done (target reached) : {stats.done}",
            f"Average target/week   : {stats.average_target:.2f}",
            f"Most active this week : {top}",
        ],
    )


def format_reminder(habits: Sequence[Habit]) -> str | None:
    if not habits:
        return None
    if len(habits) == 1:
        body = [f'REMINDER: Don\'t forget "{habits[0].name}"!']
    else:
        body = ["REMINDER: Still to do this week:", *(f"  - {h.name}" for h in habits)]
    return "\n".join(["", RULE, *body, RULE, ""])


def format_loop_demo(
    habits: Sequence[Habit],
    reference: datetime | date | None = None,
    mode: WeekMode | str = WeekMode.calendar,
) -> str:
    """Two compact listings of the collection: by status, then by target."""
    lines = ["", "-- Status listing --"]
    i = 0
    while i < len(habits):
        lines.append(f"{i + 1}. {habits[i].name} - Status: {habits[i].status(reference, mode).value}")
        i += 1

    lines.append("")
    lines.append("-- Target listing --")
    for i in range(len(habits)):
        lines.append(f"{i + 1}. {habits[i].name} - Target: {habits[i].target_frequency}/week")
    lines.append("")
    return "\n".join(lines)
