"""
Unit tests for the task state machine and run summary.
"""

from datetime import datetime, timezone

import pytest

from review_autogen.domain.models import (
    PersistedReview,
    Product,
    RunResult,
    ScheduledReviewTask,
    SynthesizedReview,
    TaskStatus,
)


@pytest.fixture
def task():
    return ScheduledReviewTask(
        product=Product(id=4, name="Twitch Followers"),
        fire_at=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
    )


def test_happy_path(task):
    review = SynthesizedReview(
        product_id=4, rating=5, title="t", content="c", pros=["p"], cons=["n"],
        verified_purchase=False, platform="other", device_type="mobile",
        country_code="US", username="u",
    )

    task.advance(TaskStatus.SYNTHESIZING)
    task.advance(TaskStatus.PERSISTING)
    task.complete(PersistedReview(id=1, created_at="now", review=review))

    assert task.status is TaskStatus.COMPLETED
    assert task.status.is_terminal
    assert task.persisted.product_id == 4


def test_fail_from_any_active_state(task):
    task.advance(TaskStatus.SYNTHESIZING)
    task.fail("StorageError: disk full")

    assert task.status is TaskStatus.FAILED
    assert task.error == "StorageError: disk full"


def test_terminal_states_are_final(task):
    task.fail("boom")

    with pytest.raises(ValueError):
        task.advance(TaskStatus.SYNTHESIZING)
    with pytest.raises(ValueError):
        task.fail("again")


def test_cannot_skip_states(task):
    with pytest.raises(ValueError):
        task.advance(TaskStatus.PERSISTING)


def test_task_ids_are_unique():
    product = Product(id=1, name="A")
    fire_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
    ids = {ScheduledReviewTask(product=product, fire_at=fire_at).task_id for _ in range(100)}
    assert len(ids) == 100


def test_run_result_wait_without_tasks():
    assert RunResult(success=True).wait(timeout=0)
