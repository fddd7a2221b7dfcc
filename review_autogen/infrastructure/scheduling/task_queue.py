"""
Delayed Task Queue - One-Shot Review Tasks
===========================================

Holds in-memory, time-delayed invocations of a callback. Each task
fires once, never before its fire_at, and resolves a Future with the
callback's outcome.

LIMITATIONS:
- Not durable: pending tasks are lost when the process exits
- No ordering between tasks, no cancel or inspect API
"""

import logging
from concurrent.futures import Future
from datetime import datetime
from typing import Callable, TypeVar

from .scheduler import Scheduler

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DelayedTaskQueue:
    """
    One-shot delayed callbacks on top of a Scheduler.

    USAGE:
        queue = DelayedTaskQueue(ThreadingScheduler())
        future = queue.schedule(task, task.fire_at, handle_task)
        future.result()  # blocks until handle_task(task) has run
    """

    def __init__(self, scheduler: Scheduler):
        self._scheduler = scheduler

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    def now(self) -> datetime:
        return self._scheduler.now()

    def schedule(self, task: T, fire_at: datetime, callback: Callable[[T], object]) -> Future:
        """
        Register callback(task) to run once, no earlier than fire_at.

        Returns:
            Future resolved with the callback's return value, or with
            the exception it raised.
        """
        future = Future()
        self._arm(task, fire_at, callback, future)
        return future

    def _arm(self, task, fire_at: datetime, callback, future: Future) -> None:
        delay = (fire_at - self._scheduler.now()).total_seconds()
        self._scheduler.schedule(
            max(0.0, delay),
            lambda: self._fire(task, fire_at, callback, future),
        )

    def _fire(self, task, fire_at: datetime, callback, future: Future) -> None:
        # Timer woke up early (clock skew), wait out the remainder
        if self._scheduler.now() < fire_at:
            logger.debug(f"Timer fired early for {fire_at.isoformat()}, re-arming")
            self._arm(task, fire_at, callback, future)
            return

        if not future.set_running_or_notify_cancel():
            logger.info(f"Skipping cancelled task scheduled for {fire_at.isoformat()}")
            return

        try:
            result = callback(task)
        except Exception as e:
            logger.exception(f"Delayed task callback failed: {e}")
            future.set_exception(e)
        else:
            future.set_result(result)
