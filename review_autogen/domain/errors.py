"""
Error Taxonomy - Run-Level and Task-Level Failures
===================================================

ARCHITECTURAL DECISION:
- CatalogFetchError is the only run-level failure (aborts scheduling)
- StorageError stays inside the task that raised it
- ContentGenerationError signals a configuration defect and fails fast
"""


class ReviewAutogenError(Exception):
    """Base exception for review autogen errors."""
    pass


class CatalogFetchError(ReviewAutogenError):
    """The active product list could not be fetched."""
    pass


class StorageError(ReviewAutogenError):
    """A synthesized review could not be persisted."""
    pass


class ContentGenerationError(ReviewAutogenError):
    """Content banks are misconfigured (empty or too small)."""
    pass
