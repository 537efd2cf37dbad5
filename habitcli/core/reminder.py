"""Periodic reminder — an asyncio task that only reads from the tracker.

It shares the event loop with the interactive menu, so firings interleave
with user input at await points and never overlap a tracker mutation.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from habitcli.core.models import ReminderScope
from habitcli.core.render import format_reminder
from habitcli.core.tracker import HabitTracker

logger = logging.getLogger(__name__)


class ReminderService:
    def __init__(
        self,
        tracker: HabitTracker,
        interval_ms: int = 10000,
        scope: ReminderScope | str = ReminderScope.first,
        notify: Callable[[str], None] = print,
    ):
        self.tracker = tracker
        self.interval_ms = interval_ms
        self.scope = ReminderScope(scope)
        self.notify = notify
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def remind_once(self) -> str | None:
        """Render and deliver one reminder from a fresh snapshot. None when all done."""
        pending = self.tracker.pending_habits()
        if not pending:
            return None
        if self.scope is ReminderScope.first:
            pending = pending[:1]
        message = format_reminder(pending)
        if message is not None:
            self.notify(message)
        return message

    def start(self) -> bool:
        """Schedule the loop on the running event loop. False if already running."""
        if self.is_running:
            return False
        self._task = asyncio.create_task(self._worker(), name="habit-reminder")
        logger.debug("Reminder started (every %d ms)", self.interval_ms)
        return True

    async def stop(self) -> bool:
        if self._task is None:
            return False
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Reminder stopped")
        return True

    async def _worker(self) -> None:
        while True:
            await asyncio.sleep(self.interval_ms / 1000)
            try:
                self.remind_once()
            except Exception:
                logger.exception("Reminder firing failed")
