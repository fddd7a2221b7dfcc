"""
Shared fixtures: scripted randomness, fake catalog/storage, virtual clock.
"""

import itertools
import threading

import pytest

from review_autogen.domain.errors import CatalogFetchError, StorageError
from review_autogen.domain.models import PersistedReview, Product
from review_autogen.domain.ports import CatalogProvider, PersistenceGateway
from review_autogen.domain.randomness import RandomSource
from review_autogen.infrastructure.persistence import Database
from review_autogen.infrastructure.scheduling import DelayedTaskQueue, VirtualScheduler


class ScriptedRandomSource(RandomSource):
    """
    Replays fixed draws.

    randint() pops from `ints` (falling back to `low` when exhausted),
    uniform() pops from `floats` (falling back to 0.0).
    """

    def __init__(self, ints=(), floats=()):
        self.ints = list(ints)
        self.floats = list(floats)
        self.calls = []

    def uniform(self) -> float:
        self.calls.append(("uniform",))
        return self.floats.pop(0) if self.floats else 0.0

    def randint(self, low: int, high: int) -> int:
        self.calls.append(("randint", low, high))
        if not self.ints:
            return low
        value = self.ints.pop(0)
        if not low <= value <= high:
            raise AssertionError(f"Scripted value {value} outside [{low}, {high}]")
        return value


class FakeCatalog(CatalogProvider):
    def __init__(self, products=(), error=None):
        self.products = list(products)
        self.error = error
        self.calls = 0

    def list_active_products(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.products)


class RecordingGateway(PersistenceGateway):
    """Stores reviews in memory; fails the calls whose 1-based index is in fail_on."""

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.stored = []
        self.attempts = 0
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def insert_review(self, review):
        with self._lock:
            self.attempts += 1
            if self.attempts in self.fail_on:
                raise StorageError(f"connection reset on insert #{self.attempts}")
            persisted = PersistedReview(id=next(self._ids), created_at="2024-01-01 00:00:00", review=review)
            self.stored.append(persisted)
            return persisted


@pytest.fixture
def scripted_rng():
    """Factory for ScriptedRandomSource."""
    return ScriptedRandomSource


@pytest.fixture
def product_x():
    return Product(id=1, name="Twitch Followers", category_name="followers", platform_id=2, is_active=True)


@pytest.fixture
def product_y():
    return Product(id=2, name="Legacy Views", category_name="views", platform_id=None, is_active=False)


@pytest.fixture
def fake_catalog():
    """Factory for FakeCatalog."""
    return FakeCatalog


@pytest.fixture
def failing_catalog():
    return FakeCatalog(error=CatalogFetchError("database unavailable"))


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def recording_gateway():
    """Factory for RecordingGateway."""
    return RecordingGateway


@pytest.fixture
def virtual_scheduler():
    return VirtualScheduler()


@pytest.fixture
def virtual_queue(virtual_scheduler):
    return DelayedTaskQueue(virtual_scheduler)


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "reviews.db")
    database.init()
    return database
