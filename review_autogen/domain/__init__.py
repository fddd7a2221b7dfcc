from .content_banks import ContentBanks, DEFAULT_CONTENT_BANKS
from .errors import (
    CatalogFetchError,
    ContentGenerationError,
    ReviewAutogenError,
    StorageError,
)
from .models import (
    PersistedReview,
    Product,
    RunResult,
    ScheduledReviewTask,
    SynthesizedReview,
    TaskStatus,
)
from .ports import CatalogProvider, PersistenceGateway
from .randomness import RandomSource, SystemRandomSource
from .synthesizer import ContentSynthesizer

__all__ = [
    "CatalogFetchError",
    "CatalogProvider",
    "ContentBanks",
    "ContentGenerationError",
    "ContentSynthesizer",
    "DEFAULT_CONTENT_BANKS",
    "PersistedReview",
    "PersistenceGateway",
    "Product",
    "RandomSource",
    "ReviewAutogenError",
    "RunResult",
    "ScheduledReviewTask",
    "StorageError",
    "SynthesizedReview",
    "SystemRandomSource",
    "TaskStatus",
]
