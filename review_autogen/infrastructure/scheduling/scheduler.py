"""
Scheduler - Abstraction Layer for One-Shot Timers
==================================================

Provides a unified interface for "run this callback after N seconds".
Currently supports a wall-clock dispatcher thread and a virtual clock for tests.

USAGE:
    # Real wall-clock timers (production)
    scheduler = ThreadingScheduler()
    scheduler.schedule(90, lambda: print("fired"))

    # Virtual clock (tests, no waiting)
    scheduler = VirtualScheduler()
    scheduler.schedule(90, lambda: print("fired"))
    scheduler.advance(90)   # prints "fired"
"""

import heapq
import itertools
import logging
import threading
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """
    Abstract base class for timer backends.
    Implement this interface to add new scheduling backends.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Current time as seen by this scheduler (timezone-aware UTC)."""
        ...

    @abstractmethod
    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        """Run callback once, no earlier than `delay` seconds from now."""
        ...

    def close(self) -> None:
        """Release timer resources. Pending callbacks are dropped."""
        pass


class ThreadingScheduler(Scheduler):
    """
    Wall-clock scheduler: one dispatcher thread over a heap of due times.

    Due callbacks are handed to a small worker pool, so a slow callback
    never holds up the others and the thread count stays fixed no matter
    how many callbacks are pending. Nothing survives process exit.
    """

    def __init__(self, max_workers: int = 4):
        self._queue: List[Tuple[float, int, Callable[[], None]]] = []
        self._sequence = itertools.count()
        self._condition = threading.Condition()
        self._closed = False

        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="review-task")
        self._dispatcher = threading.Thread(target=self._dispatch, name="review-scheduler", daemon=True)
        self._dispatcher.start()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        due = time.monotonic() + max(0.0, delay)

        with self._condition:
            if self._closed:
                raise RuntimeError("Scheduler is closed")
            heapq.heappush(self._queue, (due, next(self._sequence), callback))
            self._condition.notify()

    def _dispatch(self) -> None:
        while True:
            with self._condition:
                while not self._closed:
                    if not self._queue:
                        self._condition.wait()
                        continue
                    remaining = self._queue[0][0] - time.monotonic()
                    if remaining <= 0:
                        break
                    self._condition.wait(remaining)

                if self._closed:
                    return
                _, _, callback = heapq.heappop(self._queue)

            try:
                self._executor.submit(self._run, callback)
            except RuntimeError as e:
                # Executor shut down underneath us (interpreter exit)
                logger.warning(f"Dropping scheduled callback: {e}")
                return

    def _run(self, callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception as e:
            logger.exception(f"Scheduled callback failed: {e}")

    @property
    def pending(self) -> int:
        with self._condition:
            return len(self._queue)

    def close(self) -> None:
        with self._condition:
            dropped = len(self._queue)
            self._queue.clear()
            self._closed = True
            self._condition.notify_all()

        self._executor.shutdown(wait=False, cancel_futures=True)

        if dropped:
            logger.info(f"ThreadingScheduler closed, dropped {dropped} pending callbacks")


class VirtualScheduler(Scheduler):
    """
    Scheduler with a manually advanced clock.

    Nothing fires until advance() or run_until_idle() is called.
    Callbacks fire in due-time order (ties in scheduling order) and the
    clock reads exactly the due time while each callback runs.
    """

    DEFAULT_START = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or self.DEFAULT_START
        self._queue: List[Tuple[datetime, int, Callable[[], None]]] = []
        self._sequence = itertools.count()

    def now(self) -> datetime:
        return self._now

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        due = self._now + timedelta(seconds=max(0.0, delay))
        heapq.heappush(self._queue, (due, next(self._sequence), callback))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and fire everything that came due.

        Returns:
            Number of callbacks fired.
        """
        target = self._now + timedelta(seconds=seconds)
        fired = 0

        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self._now = due
            callback()
            fired += 1

        self._now = target
        return fired

    def run_until_idle(self, max_callbacks: int = 100_000) -> int:
        """Fire every pending callback, advancing the clock as needed."""
        fired = 0
        while self._queue:
            if fired >= max_callbacks:
                raise RuntimeError(f"Still busy after {max_callbacks} callbacks")
            due, _, callback = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            callback()
            fired += 1
        return fired

    def close(self) -> None:
        self._queue.clear()
