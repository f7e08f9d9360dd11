"""In-flight request bookkeeping shared by the catalog and the dispatcher."""

import asyncio
import itertools
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

FlagHandler = Callable[[bool], None]


class InFlightTracker:
    """Owns an in-flight flag and the set of tasks behind it.

    Each validated attempt calls begin() once and finish() once. The flag is
    True while at least one attempt is outstanding; on_change fires only when
    it flips. cancel_all() abandons every tracked task and forces the flag
    to False; finish() for an abandoned attempt is then a no-op, so the flag
    is never cleared twice for the same attempt.

    Not thread-safe: use from the event loop thread only.
    """

    def __init__(self, on_change: FlagHandler) -> None:
        """Initialize the tracker.

        Args:
            on_change: Called with the new flag value on every transition.
        """
        self._on_change = on_change
        self._attempts: set[int] = set()
        self._tasks: set[asyncio.Future[Any]] = set()
        self._ids = itertools.count(1)

    @property
    def active(self) -> bool:
        """Return True while any attempt is outstanding."""
        return bool(self._attempts)

    @property
    def pending_count(self) -> int:
        """Return the number of tracked tasks not yet finished."""
        return len(self._tasks)

    def begin(self) -> int:
        """Register a new attempt and return its token."""
        was_active = self.active
        token = next(self._ids)
        self._attempts.add(token)
        if not was_active:
            self._on_change(True)
        return token

    def finish(self, token: int) -> None:
        """Mark an attempt as finished.

        Args:
            token: Value returned by begin().
        """
        if token not in self._attempts:
            return
        self._attempts.discard(token)
        if not self._attempts:
            self._on_change(False)

    def track(self, task: asyncio.Future[Any]) -> None:
        """Add a task to the cancellable set until it completes."""
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def cancel_all(self) -> int:
        """Cancel every tracked task and clear the flag.

        Safe to call with nothing outstanding.

        Returns:
            Number of tasks that were cancelled.
        """
        cancelled = 0
        for task in list(self._tasks):
            if task.cancel():
                cancelled += 1
        self._tasks.clear()

        was_active = self.active
        self._attempts.clear()
        if was_active:
            self._on_change(False)
        if cancelled:
            logger.debug("Cancelled %d outstanding request(s)", cancelled)
        return cancelled
