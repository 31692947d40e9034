"""
Debounced, flushable scheduled task.

Each schedule() call resets the delay, so a burst of calls produces one
run of the action once things go quiet. flush() runs a pending action
immediately, which is what a teardown hook needs to avoid losing the
last edits.
"""

import logging
import threading
from typing import Callable, Optional

from application.ports.scheduler import ScheduledHandle, Scheduler

logger = logging.getLogger(__name__)


class DebouncedTask:
    """
    Run an action once, `delay` seconds after the last schedule() call.

    A run that has already started is not interrupted; only a pending
    (not yet started) run is reset or cancelled.

    Usage:
        >>> task = DebouncedTask(scheduler, 2.0, save_draft)
        >>> task.schedule()   # starts the timer
        >>> task.schedule()   # restarts it
        >>> task.flush()      # runs save_draft now, timer cancelled
    """

    def __init__(
        self,
        scheduler: Scheduler,
        delay: float,
        action: Callable[[], None],
    ) -> None:
        if delay < 0:
            raise ValueError(f"Delay must be >= 0, got {delay}")
        self._scheduler = scheduler
        self._delay = delay
        self._action = action
        self._lock = threading.Lock()
        self._handle: Optional[ScheduledHandle] = None
        # Bumped on every schedule/cancel so a timer that fires late can
        # tell it has been superseded.
        self._generation = 0
        self._closed = False

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """True while a run is scheduled but hasn't started."""
        with self._lock:
            return self._handle is not None

    def schedule(self) -> None:
        """(Re)start the delay. Any pending run is replaced."""
        with self._lock:
            if self._closed:
                logger.debug("Ignoring schedule() on closed task")
                return
            self._cancel_locked()
            self._generation += 1
            generation = self._generation
            self._handle = self._scheduler.call_later(
                self._delay, lambda: self._fire(generation)
            )

    def cancel(self) -> bool:
        """
        Drop the pending run, if any.

        Returns:
            True if a pending run was cancelled.
        """
        with self._lock:
            return self._cancel_locked()

    def flush(self) -> bool:
        """
        Run the pending action now instead of waiting for the delay.

        Returns:
            True if there was a pending run and it was executed.
        """
        with self._lock:
            if not self._cancel_locked():
                return False
        self._run()
        return True

    def close(self) -> None:
        """Flush, then refuse further scheduling."""
        self.flush()
        with self._lock:
            self._closed = True

    def _cancel_locked(self) -> bool:
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        self._generation += 1
        return True

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._handle is None:
                return
            self._handle = None
        self._run()

    def _run(self) -> None:
        try:
            self._action()
        except Exception:
            logger.exception("Debounced action failed")
