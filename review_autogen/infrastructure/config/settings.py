"""
Settings Module - Centralized Configuration Management
=======================================================

ARCHITECTURAL DECISION:
- All configuration is loaded from environment variables (no hardcoded paths)
- Settings are immutable dataclass for safety and clarity
- Single source of truth for all configurable values

EXTENSIBILITY:
- To move to Postgres: add connection string settings
- To change review volume: tune SchedulerSettings
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present (development convenience)
load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    """Integer env var; blank or non-numeric gives None (reported by validate())."""
    value = os.getenv(name, "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class SchedulerSettings:
    """Daily scheduling cycle settings."""

    # Reviews per product per run are drawn from [0, max_reviews_per_product]
    max_reviews_per_product: int = 3

    # Fire delay window (minutes after the run); 1380 min = 23 hours
    min_delay_minutes: int = 1
    max_delay_minutes: int = 1380

    # Recurring trigger
    run_interval_hours: float = 24
    run_on_startup: bool = True


@dataclass(frozen=True)
class ContentSettings:
    """Synthetic content settings."""

    verified_purchase_probability: float = 0.7
    default_category: str = "digital service"

    # Fixed seed gives reproducible runs; None uses OS entropy
    random_seed: Optional[int] = field(
        default_factory=lambda: _optional_int("REVIEW_RANDOM_SEED")
    )


@dataclass(frozen=True)
class Settings:
    """
    Root settings container - Single source of truth for all configuration.

    Usage:
        from review_autogen.infrastructure.config import get_settings
        settings = get_settings()
        print(settings.scheduler.max_delay_minutes)
    """

    # Sub-settings groups
    scheduler: SchedulerSettings = field(default_factory=SchedulerSettings)
    content: ContentSettings = field(default_factory=ContentSettings)

    # File paths
    database_file: Path = field(
        default_factory=lambda: Path(os.getenv("REVIEW_DB_FILE", "reviews.db"))
    )
    products_file: Path = field(
        default_factory=lambda: Path(os.getenv("PRODUCTS_FILE", "products.csv"))
    )

    log_level: str = field(
        default_factory=lambda: os.getenv("REVIEW_LOG_LEVEL", "INFO").upper()
    )

    def validate(self) -> list[str]:
        """
        Validate settings and return list of warnings/errors.
        Returns empty list if all settings are valid.
        """
        issues = []
        scheduler = self.scheduler

        if scheduler.min_delay_minutes < 1:
            issues.append(
                f"ERROR: min_delay_minutes must be at least 1, got {scheduler.min_delay_minutes}."
            )

        if scheduler.max_delay_minutes < scheduler.min_delay_minutes:
            issues.append(
                f"ERROR: max_delay_minutes ({scheduler.max_delay_minutes}) is below "
                f"min_delay_minutes ({scheduler.min_delay_minutes})."
            )

        if scheduler.max_delay_minutes >= scheduler.run_interval_hours * 60:
            issues.append(
                "WARNING: Delay window is longer than the run interval. "
                "Reviews from consecutive runs will overlap."
            )

        if scheduler.max_reviews_per_product < 0:
            issues.append(
                f"ERROR: max_reviews_per_product must not be negative, "
                f"got {scheduler.max_reviews_per_product}."
            )

        if not 0.0 <= self.content.verified_purchase_probability <= 1.0:
            issues.append(
                f"ERROR: verified_purchase_probability must be in [0, 1], "
                f"got {self.content.verified_purchase_probability}."
            )

        raw_seed = os.getenv("REVIEW_RANDOM_SEED", "").strip()
        if raw_seed and self.content.random_seed is None:
            issues.append(
                f"WARNING: REVIEW_RANDOM_SEED must be an integer, got {raw_seed!r}. "
                "Runs will not be reproducible."
            )

        if not self.products_file.exists():
            issues.append(
                f"WARNING: Products file not found: {self.products_file}. "
                "The existing catalog will be used as is."
            )

        return issues


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get singleton Settings instance.
    Cached to ensure consistent settings throughout application lifecycle.
    """
    return Settings()
