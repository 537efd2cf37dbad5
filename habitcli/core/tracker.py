"""HabitTracker — owns the habit collection and is the only writer of the data file.

Every mutation is write-through: the file is saved and the profile
counters are recomputed before the method returns.

Read contract: the reminder task calls `pending_habits()` from the same
event loop as the menu. It works on a list copy taken at call time, so a
deletion between two awaits cannot disturb it. A multi-threaded caller
would need a read-write lock around `_habits` instead.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path
from typing import Any

from habitcli.core import storage
from habitcli.core.dates import WeekMode, day_id
from habitcli.core.errors import InvalidDateFormat, PersistenceWriteError
from habitcli.core.habit import Habit, coerce_frequency, new_habit_id, sanitize_name
from habitcli.core.models import (
    HabitFilter,
    OperationResult,
    ResultKind,
    TrackerStats,
)
from habitcli.core.profile import UserProfile

logger = logging.getLogger(__name__)

DEMO_HABITS: list[tuple[str, int]] = [
    ("Drink 8 Glasses of Water", 7),
    ("Read for 30 Minutes", 5),
    ("Light Exercise", 3),
]


class HabitTracker:
    def __init__(
        self,
        data_file: Path | str,
        user_name: str | None = None,
        week_mode: WeekMode | str = WeekMode.calendar,
    ):
        self.data_file = Path(data_file)
        self.week_mode = WeekMode(week_mode)

        state = storage.load(self.data_file)
        self.profile: UserProfile = state.profile.initialize()
        if user_name:
            self.profile.name = user_name
        self._habits: list[Habit] = state.habits
        self._refresh_stats()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _refresh_stats(self) -> None:
        self.profile.update_stats(self._habits, mode=self.week_mode)

    def _persist(self) -> bool:
        return storage.save(self.data_file, self.profile, list(self._habits))

    def _commit(self) -> None:
        self._persist()
        self._refresh_stats()

    def _resolve_index(self, one_based_index: Any) -> tuple[int | None, OperationResult | None]:
        """Map a 1-based index (int or numeric text) to a list position."""
        if isinstance(one_based_index, bool):
            number = None
        elif isinstance(one_based_index, int):
            number = one_based_index
        else:
            try:
                number = int(str(one_based_index).strip())
            except ValueError:
                number = None
        if number is None:
            return None, OperationResult(
                ok=False,
                message=f"Invalid habit number: {one_based_index!r}.",
                kind=ResultKind.invalid_input,
            )
        if not 1 <= number <= len(self._habits):
            return None, OperationResult(
                ok=False,
                message=f"Habit number {number} is out of range (1-{len(self._habits)}).",
                kind=ResultKind.index_out_of_range,
            )
        return number - 1, None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def habits(self) -> list[Habit]:
        """Snapshot of the collection in display order."""
        return list(self._habits)

    def __len__(self) -> int:
        return len(self._habits)

    def get_habit(self, habit_id: str) -> Habit | None:
        return next((h for h in self._habits if h.id == habit_id), None)

    def list_habits(
        self,
        filter: HabitFilter | str = HabitFilter.all,
        reference: datetime | date | None = None,
    ) -> list[Habit]:
        selected = HabitFilter(filter)
        snapshot = list(self._habits)
        if selected is HabitFilter.active:
            return [h for h in snapshot if not h.is_completed_this_week(reference, self.week_mode)]
        if selected is HabitFilter.done:
            return [h for h in snapshot if h.is_completed_this_week(reference, self.week_mode)]
        return snapshot

    def pending_habits(self, reference: datetime | date | None = None) -> list[Habit]:
        """Habits still short of their weekly target. Used by the reminder."""
        return self.list_habits(HabitFilter.active, reference)

    def stats(self, reference: datetime | date | None = None) -> TrackerStats:
        snapshot = list(self._habits)
        if not snapshot:
            return TrackerStats()

        counts = [h.completions_in_week(reference, self.week_mode) for h in snapshot]
        done = sum(
            1 for h, c in zip(snapshot, counts) if c >= h.target_frequency
        )
        # max() keeps the first of equal counts, so ties go to collection order.
        top_index = max(range(len(snapshot)), key=lambda i: counts[i])
        return TrackerStats(
            total=len(snapshot),
            active=len(snapshot) - done,
            done=done,
            average_target=sum(h.target_frequency for h in snapshot) / len(snapshot),
            most_active_habit=snapshot[top_index],
            most_active_count=counts[top_index],
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_habit(self, name: Any = None, frequency: Any = None) -> Habit:
        """Always succeeds; bad input is replaced with defaults."""
        habit = Habit(
            id=new_habit_id(),
            name=sanitize_name(name),
            target_frequency=coerce_frequency(frequency),
        )
        self._habits.append(habit)
        logger.info("Added habit %s (%r, %dx/week)", habit.id, habit.name, habit.target_frequency)
        self._commit()
        return habit

    def complete_habit(
        self,
        one_based_index: Any,
        day: str | date | datetime | None = None,
    ) -> OperationResult:
        position, failure = self._resolve_index(one_based_index)
        if failure is not None:
            return failure
        habit = self._habits[position]

        try:
            recorded = habit.mark_complete(day)
        except InvalidDateFormat as exc:
            return OperationResult(
                ok=False, message=str(exc), kind=ResultKind.invalid_input, habit=habit
            )

        if not recorded:
            when = "today" if day is None else f"on {day if isinstance(day, str) else day_id(day)}"
            return OperationResult(
                ok=False,
                message=f'"{habit.name}" is already completed {when}.',
                kind=ResultKind.already_completed,
                habit=habit,
            )

        logger.info("Marked habit %s complete (%s)", habit.id, habit.completions[-1])
        self._commit()
        return OperationResult(
            ok=True,
            message=f'Marked "{habit.name}" as done for {habit.completions[-1]}.',
            habit=habit,
        )

    def delete_habit(self, one_based_index: Any) -> OperationResult:
        position, failure = self._resolve_index(one_based_index)
        if failure is not None:
            return failure
        removed = self._habits.pop(position)
        logger.info("Deleted habit %s (%r)", removed.id, removed.name)
        self._commit()
        return OperationResult(ok=True, message=f'Deleted habit "{removed.name}".', habit=removed)

    def clear_all(self) -> None:
        """Drop every habit and remove the data file if there is one."""
        self._habits = []
        try:
            storage.delete_state(self.data_file)
        except PersistenceWriteError as exc:
            logger.error("Failed to remove data file: %s", exc)
        logger.info("Cleared all habits")
        self._refresh_stats()

    def seed(self, habits: Iterable[tuple[str, int]] = DEMO_HABITS) -> list[Habit]:
        return [self.add_habit(name, frequency) for name, frequency in habits]

    def flush(self) -> bool:
        """Persist the current state as-is (used on exit)."""
        return self._persist()
