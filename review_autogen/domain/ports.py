"""
Ports - Catalog and Review Storage Interfaces
==============================================

The scheduler talks to storage only through these two interfaces.
Currently implemented by the SQLite Database. Swap in another backend
by implementing both.
"""

from abc import ABC, abstractmethod
from typing import List

from .models import PersistedReview, Product, SynthesizedReview


class CatalogProvider(ABC):
    """Supplies the active product list."""

    @abstractmethod
    def list_active_products(self) -> List[Product]:
        """
        Return every active product.

        Raises:
            CatalogFetchError: if the catalog cannot be read.
        """
        ...


class PersistenceGateway(ABC):
    """Durably stores finished reviews."""

    @abstractmethod
    def insert_review(self, review: SynthesizedReview) -> PersistedReview:
        """
        Insert one review. Called at most once per task.

        Raises:
            StorageError: if the insert fails.
        """
        ...
