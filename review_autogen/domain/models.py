"""
Domain Records - Products, Tasks and Reviews
=============================================

Plain dataclasses shared by every layer. Nothing here talks to the
database or the clock.
"""

import uuid
from concurrent.futures import Future, wait
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class TaskStatus(Enum):
    """
    Lifecycle of a scheduled review task.

    SCHEDULED -> SYNTHESIZING -> PERSISTING -> COMPLETED | FAILED
    COMPLETED and FAILED are terminal.
    """
    SCHEDULED = "scheduled"
    SYNTHESIZING = "synthesizing"
    PERSISTING = "persisting"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)


@dataclass(frozen=True)
class Product:
    """Catalog product (read-only to the scheduler)."""
    id: int
    name: str
    category_name: Optional[str] = None
    platform_id: Optional[int] = None
    is_active: bool = True


@dataclass
class SynthesizedReview:
    """A generated review, ready to be inserted."""
    product_id: int
    rating: int
    title: str
    content: str
    pros: List[str]
    cons: List[str]
    verified_purchase: bool
    platform: str
    device_type: str
    country_code: str
    username: str
    status: str = "published"
    source: str = "auto"


@dataclass
class PersistedReview:
    """Review record as stored by the persistence gateway."""
    id: int
    created_at: str
    review: SynthesizedReview

    @property
    def product_id(self) -> int:
        return self.review.product_id


_ALLOWED_TRANSITIONS = {
    TaskStatus.SCHEDULED: {TaskStatus.SYNTHESIZING, TaskStatus.FAILED},
    TaskStatus.SYNTHESIZING: {TaskStatus.PERSISTING, TaskStatus.FAILED},
    TaskStatus.PERSISTING: {TaskStatus.COMPLETED, TaskStatus.FAILED},
    TaskStatus.COMPLETED: set(),
    TaskStatus.FAILED: set(),
}


@dataclass
class ScheduledReviewTask:
    """
    One pending review for one product.

    Held only in memory; lost if the process exits before fire_at.
    """
    product: Product
    fire_at: datetime
    task_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    status: TaskStatus = TaskStatus.SCHEDULED
    error: str = ""
    persisted: Optional[PersistedReview] = None

    @property
    def product_id(self) -> int:
        return self.product.id

    def advance(self, status: TaskStatus) -> None:
        """Move to the next state. Terminal states are never re-entered."""
        if status not in _ALLOWED_TRANSITIONS[self.status]:
            raise ValueError(
                f"Invalid task transition {self.status.value} -> {status.value} "
                f"for task {self.task_id}"
            )
        self.status = status

    def complete(self, persisted: PersistedReview) -> None:
        self.advance(TaskStatus.COMPLETED)
        self.persisted = persisted

    def fail(self, error: str) -> None:
        self.advance(TaskStatus.FAILED)
        self.error = error[:200]


@dataclass
class RunResult:
    """Summary of one scheduling cycle."""
    success: bool
    products_processed: int = 0
    products_skipped: int = 0
    tasks_scheduled: int = 0
    tasks: List[ScheduledReviewTask] = field(default_factory=list)
    completions: List[Future] = field(default_factory=list)
    message: str = ""
    error: str = ""

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every scheduled task has finished. Returns False on timeout."""
        _, not_done = wait(self.completions, timeout=timeout)
        return not not_done
