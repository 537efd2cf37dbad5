"""Enums and result records shared by the tracker and the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from habitcli.core.habit import Habit
    from habitcli.core.profile import UserProfile


class HabitStatus(str, Enum):
    active = "Active"
    done = "Done"


class HabitFilter(str, Enum):
    all = "all"
    active = "active"
    done = "done"


class ResultKind(str, Enum):
    ok = "ok"
    index_out_of_range = "index_out_of_range"
    invalid_input = "invalid_input"
    already_completed = "already_completed"


class ReminderScope(str, Enum):
    first = "first"
    all = "all"


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Outcome of a tracker mutation. Negative outcomes are values, not exceptions."""

    ok: bool
    message: str
    kind: ResultKind = ResultKind.ok
    habit: Habit | None = None


@dataclass(frozen=True, slots=True)
class TrackerStats:
    total: int = 0
    active: int = 0
    done: int = 0
    average_target: float = 0.0
    most_active_habit: Habit | None = None
    most_active_count: int = 0


@dataclass(slots=True)
class TrackerState:
    """What the persistence codec hands back: a profile and fresh Habit instances."""

    profile: UserProfile
    habits: list[Habit] = field(default_factory=list)
