"""Interactive terminal menu.

The menu loop and the reminder run as two tasks on one asyncio loop:
input is read in a worker thread, so the reminder can fire while the
prompt is waiting.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Awaitable, Callable

from habitcli.config import Settings, settings
from habitcli.core import render
from habitcli.core.models import HabitFilter
from habitcli.core.reminder import ReminderService
from habitcli.core.tracker import HabitTracker
from habitcli.logger import setup_logger

logger = logging.getLogger(__name__)

Ask = Callable[[str], Awaitable[str]]
Say = Callable[[str], None]

MENU = "\n".join(
    [
        "1. View profile",
        "2. View all habits",
        "3. View active habits",
        "4. View done habits",
        "5. Add habit",
        "6. Mark habit complete",
        "7. Delete habit",
        "8. View statistics",
        "9. Loop demo",
        "0. Exit",
        render.RULE,
    ]
)

FILTERS = {"2": HabitFilter.all, "3": HabitFilter.active, "4": HabitFilter.done}


async def ask_stdin(prompt: str) -> str:
    return await asyncio.to_thread(input, prompt)


def banner() -> str:
    return "\n".join([render.RULE, "HABIT TRACKER CLI", render.RULE])


def _show_habits(tracker: HabitTracker, say: Say, filter: HabitFilter = HabitFilter.all) -> None:
    habits = tracker.list_habits(filter)
    say(render.format_habits(habits, filter, mode=tracker.week_mode))


async def handle_choice(choice: str, tracker: HabitTracker, ask: Ask, say: Say) -> bool:
    """Run one menu action. Returns False when the user chose to exit."""
    if choice == "0":
        return False

    if choice == "1":
        say(render.format_profile(tracker.profile, mode=tracker.week_mode))
    elif choice in FILTERS:
        _show_habits(tracker, say, FILTERS[choice])
    elif choice == "5":
        name = await ask("Habit name: ")
        frequency = await ask("Target per week (number, default 7): ")
        habit = tracker.add_habit(name, frequency)
        say(f'Added "{habit.name}" with a target of {habit.target_frequency}x/week\n')
    elif choice == "6":
        _show_habits(tracker, say)
        index = await ask("Number of the habit completed today: ")
        say(tracker.complete_habit(index).message + "\n")
    elif choice == "7":
        _show_habits(tracker, say)
        index = await ask("Number of the habit to delete: ")
        say(tracker.delete_habit(index).message + "\n")
    elif choice == "8":
        say(render.format_stats(tracker.stats()))
    elif choice == "9":
        say(render.format_loop_demo(tracker.habits, mode=tracker.week_mode))
    else:
        say("Unknown choice. Try again.\n")
    return True


async def run_menu(
    tracker: HabitTracker,
    reminder: ReminderService,
    ask: Ask = ask_stdin,
    say: Say = print,
) -> None:
    reminder.start()
    try:
        running = True
        while running:
            say(MENU)
            try:
                choice = (await ask("Choose an option (0-9): ")).strip()
            except EOFError:
                logger.debug("Input closed, leaving menu")
                break
            try:
                running = await handle_choice(choice, tracker, ask, say)
            except EOFError:
                break
    finally:
        await reminder.stop()
        tracker.flush()
    say("Goodbye!")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="habitcli", description="Terminal habit tracker.")
    parser.add_argument("--data-file", default=None, help="Path to the JSON data file.")
    parser.add_argument("--no-seed", action="store_true", help="Do not add example habits.")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, ...).")
    parser.add_argument("--clear", action="store_true", help="Delete stored data before starting.")
    return parser


def build_tracker(cfg: Settings, data_file: str | None = None) -> HabitTracker:
    return HabitTracker(
        data_file or cfg.data_file,
        user_name=cfg.habit_user_name,
        week_mode=cfg.week_mode,
    )


async def main(argv: list[str] | None = None, cfg: Settings = settings) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(args.log_level or cfg.log_level, cfg.log_file)

    print(banner())
    tracker = build_tracker(cfg, args.data_file)
    logger.debug("Using data file %s", tracker.data_file)
    if args.clear:
        tracker.clear_all()
        print("All stored data cleared.\n")

    if len(tracker) == 0 and cfg.seed_demo_habits and not args.no_seed:
        print("No data yet. Adding example habits...\n")
        tracker.seed()

    reminder = ReminderService(
        tracker,
        interval_ms=cfg.reminder_interval_ms,
        scope=cfg.reminder_scope,
    )
    await run_menu(tracker, reminder)
    return 0


def run() -> None:
    try:
        raise SystemExit(asyncio.run(main()))
    except KeyboardInterrupt:
        raise SystemExit(130)


if __name__ == "__main__":
    run()
