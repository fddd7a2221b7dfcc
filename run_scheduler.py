"""
Scheduler Runner - Daily Synthetic Review Generation
=====================================================

Runs the review scheduler against the SQLite catalog.

    python run_scheduler.py                         # run now, then every 24h
    python run_scheduler.py --once                  # single cycle, wait for its tasks
    python run_scheduler.py --import products.csv   # import catalog first

Pending reviews live in memory only: stopping the process drops them.
"""

import argparse
import logging
import sys
import threading

from review_autogen.application import DailyReviewRunner, ScheduleOrchestrator
from review_autogen.domain import ContentBanks, ContentSynthesizer, SystemRandomSource, TaskStatus
from review_autogen.infrastructure.config import get_settings
from review_autogen.infrastructure.importer import CatalogParser
from review_autogen.infrastructure.persistence import Database
from review_autogen.infrastructure.scheduling import DelayedTaskQueue, ThreadingScheduler


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Review Autogen - delayed synthetic review scheduler")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and wait for its tasks")
    parser.add_argument("--import", dest="import_file", help="Import products from a .csv/.xlsx file first")
    return parser.parse_args(argv)


def import_catalog(db: Database, file_path: str) -> None:
    parser = CatalogParser()
    try:
        products, _ = parser.parse(file_path)
    except (FileNotFoundError, ValueError) as e:
        print(f"Catalog import failed: {e}")
        return

    result = db.bulk_add_products(products)
    print(f"Imported catalog: {result['added']} added, {result['skipped']} skipped")
    for error in result['errors']:
        print(f"   {error}")


def run(argv=None):
    """Wire up components and run the scheduler."""
    args = parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    print("\n" + "=" * 60)
    print("   Review Autogen - Scheduler Runner")
    print("=" * 60 + "\n")

    for issue in settings.validate():
        print(issue)

    db = Database(settings.database_file)
    db.init()

    if args.import_file:
        import_catalog(db, args.import_file)
    elif settings.products_file.exists():
        import_catalog(db, str(settings.products_file))

    rng = SystemRandomSource(seed=settings.content.random_seed)
    banks = ContentBanks(
        verified_purchase_probability=settings.content.verified_purchase_probability,
        default_category=settings.content.default_category,
    )
    scheduler = ThreadingScheduler()
    orchestrator = ScheduleOrchestrator(
        catalog=db,
        gateway=db,
        queue=DelayedTaskQueue(scheduler),
        synthesizer=ContentSynthesizer(rng, banks),
        rng=rng,
        settings=settings.scheduler,
    )

    try:
        if args.once:
            result = orchestrator.run_once()
            if not result.success:
                print(f"Scheduling failed: {result.error}")
                return 1

            print(f"{result.message}. Waiting for tasks (Ctrl+C to abandon them)...")
            result.wait()

            failed = [t for t in result.tasks if t.status is TaskStatus.FAILED]
            print(f"Done: {len(result.tasks) - len(failed)} stored, {len(failed)} failed")
        else:
            runner = DailyReviewRunner(
                orchestrator,
                scheduler,
                interval_hours=settings.scheduler.run_interval_hours,
                run_on_startup=settings.scheduler.run_on_startup,
            )
            runner.start()
            print("Scheduler running. Press Ctrl+C to stop.\n")
            threading.Event().wait()

    except KeyboardInterrupt:
        print(f"\n\nInterrupted! {scheduler.pending} pending reviews dropped.")

    finally:
        scheduler.close()

    stats = db.get_stats()
    print("\n" + "=" * 60)
    print(f"   Total reviews: {stats['total']} | Auto: {stats['auto']} | Avg rating: {stats['average_rating']}")
    print("=" * 60 + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(run())
