"""
Scheduler adapters for debounced work.

- ThreadTimerScheduler: threading.Timer per call; for synchronous
  front ends such as the CLI, where the main thread blocks on input.
- AsyncioScheduler: loop.call_later on an event loop, with the callback
  handed to an executor; for async hosts, where a draft write must not
  block the loop.
"""

import asyncio
import logging
import threading
from concurrent.futures import Executor
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ThreadTimerScheduler:
    """Scheduler that runs each callback on a daemon timer thread."""

    def __init__(self, *, daemon: bool = True) -> None:
        self._daemon = daemon

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = self._daemon
        timer.start()
        return timer


class AsyncioScheduler:
    """
    Scheduler that times callbacks on an asyncio event loop.

    The timer lives on the loop, but the callback itself runs in an
    executor (the loop's default one unless given) so blocking work such
    as a file write never stalls the loop. call_later() may be called
    from any thread.
    """

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self._loop = loop
        self._executor = executor

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> "_LoopHandle":
        loop = self.loop
        handle = _LoopHandle(loop)
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            handle.attach(loop.call_later(delay, self._dispatch, callback))
        else:
            loop.call_soon_threadsafe(
                lambda: handle.attach(loop.call_later(delay, self._dispatch, callback))
            )
        return handle

    def _dispatch(self, callback: Callable[[], None]) -> None:
        future = self.loop.run_in_executor(self._executor, callback)
        future.add_done_callback(_log_failure)


def _log_failure(future: "asyncio.Future[None]") -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error(f"Scheduled callback failed: {error!r}")


class _LoopHandle:
    """Cancellable handle that tolerates cancel() before the timer exists."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._timer: Optional[asyncio.TimerHandle] = None
        self._cancelled = False
        self._lock = threading.Lock()

    def attach(self, timer: asyncio.TimerHandle) -> None:
        with self._lock:
            if self._cancelled:
                timer.cancel()
                return
            self._timer = timer

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            timer = self._timer
        if timer is not None:
            timer.cancel()
