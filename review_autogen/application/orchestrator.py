"""
Schedule Orchestrator - One Scheduling Cycle
=============================================

Reads the active catalog once, decides how many reviews each product
gets today, and spreads them over random delays on the task queue.
When a task fires it is synthesized and stored, independently of every
other task.

FAILURE POLICY:
- Catalog fetch failure aborts the run (nothing scheduled)
- Failure to arm a task stops the run; tasks already armed are reported
- Any failure inside a task fails only that task; no retries
"""

import logging
from datetime import timedelta
from typing import Optional

from ..domain.errors import CatalogFetchError, ContentGenerationError, StorageError
from ..domain.models import Product, RunResult, ScheduledReviewTask, TaskStatus
from ..domain.ports import CatalogProvider, PersistenceGateway
from ..domain.randomness import RandomSource, SystemRandomSource
from ..domain.synthesizer import ContentSynthesizer
from ..infrastructure.config import SchedulerSettings
from ..infrastructure.scheduling import DelayedTaskQueue

logger = logging.getLogger(__name__)


class ScheduleOrchestrator:
    """
    Runs one review scheduling cycle.

    USAGE:
        orchestrator = ScheduleOrchestrator(
            catalog=db,
            gateway=db,
            queue=DelayedTaskQueue(ThreadingScheduler()),
            synthesizer=ContentSynthesizer(rng),
            rng=rng,
        )
        result = orchestrator.run_once()
        print(result.tasks_scheduled)
    """

    def __init__(
        self,
        catalog: CatalogProvider,
        gateway: PersistenceGateway,
        queue: DelayedTaskQueue,
        synthesizer: Optional[ContentSynthesizer] = None,
        rng: Optional[RandomSource] = None,
        settings: Optional[SchedulerSettings] = None,
    ):
        self._catalog = catalog
        self._gateway = gateway
        self._queue = queue
        self._rng = rng or SystemRandomSource()
        self._synthesizer = synthesizer or ContentSynthesizer(self._rng)

        settings = settings or SchedulerSettings()
        self._max_reviews = settings.max_reviews_per_product
        self._min_delay = settings.min_delay_minutes
        self._max_delay = settings.max_delay_minutes

        if self._min_delay < 1 or self._max_delay < self._min_delay:
            raise ValueError(
                f"Invalid delay window [{self._min_delay}, {self._max_delay}] minutes"
            )

    def run_once(self) -> RunResult:
        """
        Schedule today's reviews for every active product.

        Never raises for catalog or queue problems; a failed fetch comes
        back as RunResult(success=False) with nothing scheduled.
        """
        try:
            products = self._catalog.list_active_products()
        except CatalogFetchError as e:
            logger.error(f"Error scheduling reviews: {e}")
            return RunResult(success=False, error=str(e), message="Catalog fetch failed")
        except Exception as e:
            logger.exception(f"Unexpected error fetching catalog: {e}")
            error = CatalogFetchError(f"Unexpected catalog error: {e}")
            return RunResult(success=False, error=str(error), message="Catalog fetch failed")

        logger.info(f"Scheduling reviews for {len(products)} active products")

        result = RunResult(success=True)
        scheduled_at = self._queue.now()

        for product in products:
            if not product.is_active:
                logger.warning(f"Skipping inactive product {product.id}: {product.name}")
                continue

            result.products_processed += 1
            review_count = self._rng.randint(0, self._max_reviews)

            if review_count == 0:
                logger.info(f"Skipping product {product.id}: {product.name} - no reviews scheduled today")
                result.products_skipped += 1
                continue

            logger.info(f"Scheduling {review_count} reviews for product {product.id}: {product.name}")

            for i in range(review_count):
                delay_minutes = self._rng.randint(self._min_delay, self._max_delay)
                fire_at = scheduled_at + timedelta(minutes=delay_minutes)

                task = ScheduledReviewTask(product=product, fire_at=fire_at)
                try:
                    future = self._queue.schedule(task, fire_at, self._execute)
                except Exception as e:
                    # Tasks armed so far stay in the result and still fire
                    logger.exception(f"Error arming review task for product {product.id}: {e}")
                    result.success = False
                    result.error = f"{type(e).__name__}: {e}"
                    result.message = (
                        f"Scheduling aborted after {result.tasks_scheduled} reviews "
                        f"for {result.products_processed} products"
                    )
                    return result

                result.tasks.append(task)
                result.completions.append(future)
                result.tasks_scheduled += 1

                logger.info(f"  - Scheduled review #{i + 1} in {delay_minutes} minutes (task {task.task_id})")

        result.message = (
            f"Scheduled {result.tasks_scheduled} reviews for {result.products_processed} products"
        )
        logger.info(result.message)
        return result

    def _execute(self, task: ScheduledReviewTask) -> ScheduledReviewTask:
        """Synthesize and store one review. Failures stay inside this task."""
        product: Product = task.product

        try:
            task.advance(TaskStatus.SYNTHESIZING)
            review = self._synthesizer.synthesize(product)

            task.advance(TaskStatus.PERSISTING)
            persisted = self._gateway.insert_review(review)

            task.complete(persisted)
            logger.info(
                f"Added automated review for product {product.id}: "
                f"\"{review.title}\" ({review.rating} stars, task {task.task_id})"
            )

        except StorageError as e:
            task.fail(f"StorageError: {e}")
            logger.error(f"StorageError adding review for product {product.id} (task {task.task_id}): {e}")

        except ContentGenerationError as e:
            task.fail(f"ContentGenerationError: {e}")
            logger.error(
                f"ContentGenerationError for product {product.id} (task {task.task_id}): {e}"
            )

        except Exception as e:
            task.fail(f"{type(e).__name__}: {e}")
            logger.exception(f"Error adding random review for product {product.id} (task {task.task_id}): {e}")

        return task
