"""
Scheduler Interface (Port).

Runs a callback once after a delay. Used for debounced draft saves so
the session engine doesn't depend on a particular timer mechanism
(threads, an asyncio loop, or a manual clock in tests).
"""
from typing import Callable, Protocol


class ScheduledHandle(Protocol):
    """Handle to a scheduled callback."""

    def cancel(self) -> None:
        """Prevent the callback from running if it hasn't started yet."""
        ...


class Scheduler(Protocol):
    """Abstract interface for delayed execution."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledHandle:
        """
        Schedule `callback` to run once after `delay` seconds.

        Args:
            delay: Delay in seconds (0 means as soon as possible)
            callback: Zero-argument callable

        Returns:
            Handle that can cancel the pending call
        """
        ...
