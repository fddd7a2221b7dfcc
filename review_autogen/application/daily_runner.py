"""
Daily Review Runner - Recurring Trigger
========================================

Runs the scheduling cycle once at startup and then every interval
(24 hours by default) on the same Scheduler the review tasks use.
Exactly one cycle runs per interval; the next one is armed only after
the current one has returned.
"""

import logging
import threading
from collections import deque
from typing import Deque, Optional

from ..domain.models import RunResult
from ..infrastructure.scheduling import Scheduler
from .orchestrator import ScheduleOrchestrator

logger = logging.getLogger(__name__)


class DailyReviewRunner:
    """
    Re-runs ScheduleOrchestrator.run_once() on a fixed interval.

    USAGE:
        runner = DailyReviewRunner(orchestrator, scheduler)
        runner.start()
        ...
        runner.stop()
    """

    def __init__(
        self,
        orchestrator: ScheduleOrchestrator,
        scheduler: Scheduler,
        interval_hours: float = 24,
        run_on_startup: bool = True,
        history_size: int = 7,
    ):
        if interval_hours <= 0:
            raise ValueError(f"interval_hours must be positive, got {interval_hours}")
        if history_size < 1:
            raise ValueError(f"history_size must be at least 1, got {history_size}")

        self._orchestrator = orchestrator
        self._scheduler = scheduler
        self._interval_seconds = interval_hours * 3600
        self._run_on_startup = run_on_startup

        self._lock = threading.Lock()
        self._running = False
        self._run_count = 0
        # Most recent results only; each one holds its tasks and reviews
        self.history: Deque[RunResult] = deque(maxlen=history_size)

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def run_count(self) -> int:
        return self._run_count

    @property
    def last_result(self) -> Optional[RunResult]:
        return self.history[-1] if self.history else None

    def start(self) -> None:
        """Run immediately (if configured) and arm the recurring cycle."""
        with self._lock:
            if self._running:
                logger.warning("DailyReviewRunner already started")
                return
            self._running = True

        if self._run_on_startup:
            result = self._run_cycle()
            if result is not None and result.success:
                logger.info(f"Review scheduler initialized: {result.message}")

        self._arm_next()

    def stop(self) -> None:
        """Stop arming further cycles. Already scheduled review tasks still fire."""
        with self._lock:
            self._running = False
        logger.info("DailyReviewRunner stopped")

    def _arm_next(self) -> None:
        if not self._running:
            return
        self._scheduler.schedule(self._interval_seconds, self._tick)

    def _tick(self) -> None:
        if not self._running:
            return
        self._run_cycle()
        self._arm_next()

    def _run_cycle(self) -> Optional[RunResult]:
        try:
            result = self._orchestrator.run_once()
        except Exception as e:
            logger.exception(f"Error in daily review scheduler: {e}")
            return None

        self._run_count += 1
        self.history.append(result)

        if result.success:
            logger.info(f"Daily review scheduler run: {result.message}")
        else:
            logger.error(f"Failed to run daily review scheduler: {result.error}")

        return result
