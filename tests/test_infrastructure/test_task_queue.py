"""
Unit tests for DelayedTaskQueue and the Scheduler backends.
"""

import threading
from datetime import timedelta

import pytest

from review_autogen.infrastructure.scheduling import (
    DelayedTaskQueue,
    ThreadingScheduler,
    VirtualScheduler,
)


class EarlyWakeScheduler(VirtualScheduler):
    """Fires the first timer at half its delay, like a skewed clock."""

    def __init__(self):
        super().__init__()
        self.delays = []

    def schedule(self, delay, callback):
        self.delays.append(delay)
        if len(self.delays) == 1:
            delay = delay / 2
        super().schedule(delay, callback)


def test_task_fires_at_fire_at_not_before(virtual_scheduler, virtual_queue):
    fired_at = []
    fire_at = virtual_scheduler.now() + timedelta(minutes=90)

    future = virtual_queue.schedule("task-1", fire_at, lambda task: fired_at.append(virtual_scheduler.now()) or task)

    virtual_scheduler.advance(90 * 60 - 1)
    assert fired_at == []
    assert not future.done()

    virtual_scheduler.advance(1)
    assert fired_at == [fire_at]
    assert future.result() == "task-1"


def test_tasks_fire_in_due_order(virtual_scheduler, virtual_queue):
    order = []
    now = virtual_scheduler.now()

    virtual_queue.schedule("late", now + timedelta(minutes=30), order.append)
    virtual_queue.schedule("early", now + timedelta(minutes=5), order.append)
    virtual_queue.schedule("middle", now + timedelta(minutes=10), order.append)

    assert virtual_scheduler.run_until_idle() == 3
    assert order == ["early", "middle", "late"]


def test_callback_exception_resolves_future(virtual_scheduler, virtual_queue):
    def explode(task):
        raise RuntimeError("boom")

    future = virtual_queue.schedule("t", virtual_scheduler.now() + timedelta(minutes=1), explode)
    other = virtual_queue.schedule("u", virtual_scheduler.now() + timedelta(minutes=2), lambda t: t)

    virtual_scheduler.run_until_idle()

    with pytest.raises(RuntimeError, match="boom"):
        future.result()
    assert other.result() == "u"


def test_early_wakeup_is_rearmed():
    scheduler = EarlyWakeScheduler()
    queue = DelayedTaskQueue(scheduler)
    fire_at = scheduler.now() + timedelta(minutes=60)
    fired_at = []

    future = queue.schedule("t", fire_at, lambda task: fired_at.append(scheduler.now()))

    scheduler.advance(30 * 60)
    assert fired_at == []
    assert len(scheduler.delays) == 2
    assert scheduler.delays[1] == pytest.approx(30 * 60)

    scheduler.advance(30 * 60)
    assert fired_at == [fire_at]
    assert future.done()


def test_past_fire_at_fires_immediately(virtual_scheduler, virtual_queue):
    future = virtual_queue.schedule("t", virtual_scheduler.now() - timedelta(minutes=5), lambda t: t)
    virtual_scheduler.advance(0)
    assert future.result() == "t"


def test_cancelled_future_skips_callback(virtual_scheduler, virtual_queue):
    calls = []
    future = virtual_queue.schedule("t", virtual_scheduler.now() + timedelta(minutes=1), calls.append)

    assert future.cancel()
    virtual_scheduler.run_until_idle()

    assert calls == []


def test_virtual_scheduler_advance_counts_fired(virtual_scheduler):
    hits = []
    virtual_scheduler.schedule(10, lambda: hits.append(1))
    virtual_scheduler.schedule(20, lambda: hits.append(2))

    assert virtual_scheduler.advance(15) == 1
    assert virtual_scheduler.pending == 1
    assert virtual_scheduler.advance(15) == 1
    assert hits == [1, 2]


def test_threading_scheduler_runs_callback():
    scheduler = ThreadingScheduler()
    done = threading.Event()

    scheduler.schedule(0.05, done.set)

    assert done.wait(timeout=5)
    scheduler.close()


def test_threading_queue_never_fires_early():
    scheduler = ThreadingScheduler()
    queue = DelayedTaskQueue(scheduler)
    fire_at = scheduler.now() + timedelta(milliseconds=150)

    future = queue.schedule("t", fire_at, lambda task: scheduler.now())

    fired_at = future.result(timeout=5)
    assert fired_at >= fire_at
    scheduler.close()


def test_threading_scheduler_close_drops_pending():
    scheduler = ThreadingScheduler()
    calls = []
    scheduler.schedule(60, lambda: calls.append(1))
    assert scheduler.pending == 1

    scheduler.close()

    assert scheduler.pending == 0
    with pytest.raises(RuntimeError):
        scheduler.schedule(1, lambda: None)


def test_slow_callback_does_not_block_others():
    scheduler = ThreadingScheduler()
    release = threading.Event()
    fast_done = threading.Event()

    scheduler.schedule(0.01, lambda: release.wait(timeout=5))
    scheduler.schedule(0.05, fast_done.set)

    assert fast_done.wait(timeout=5)
    release.set()
    scheduler.close()


def test_threading_scheduler_thread_count_does_not_grow_with_pending():
    before = threading.active_count()
    scheduler = ThreadingScheduler(max_workers=2)

    for _ in range(1000):
        scheduler.schedule(3600, lambda: None)

    assert scheduler.pending == 1000
    assert threading.active_count() - before <= 1
    scheduler.close()
    assert scheduler.pending == 0


def test_threading_scheduler_burst_runs_on_worker_pool():
    scheduler = ThreadingScheduler(max_workers=3)
    lock = threading.Lock()
    thread_names = set()
    hits = []
    done = threading.Event()

    def hit():
        with lock:
            thread_names.add(threading.current_thread().name)
            hits.append(1)
            if len(hits) == 200:
                done.set()

    for _ in range(200):
        scheduler.schedule(0, hit)

    assert done.wait(timeout=5)
    assert len(thread_names) <= 3
    scheduler.close()


def test_threading_scheduler_fires_in_due_order():
    scheduler = ThreadingScheduler(max_workers=1)
    order = []
    done = threading.Event()

    scheduler.schedule(0.2, lambda: (order.append("late"), done.set()))
    scheduler.schedule(0.05, lambda: order.append("early"))

    assert done.wait(timeout=5)
    assert order == ["early", "late"]
    scheduler.close()
