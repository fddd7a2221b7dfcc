"""
Content Synthesizer - Synthetic Review Generation
==================================================

ARCHITECTURAL DECISION:
- Pure generator: reads only the RandomSource and ContentBanks
- Draw order is fixed so a scripted RandomSource gives a fully
  deterministic review (used for regression tests)
- No persistence and no logging of content; the caller decides

DRAW ORDER:
    rating, title, content, pros shuffle, cons shuffle,
    verified purchase, country code, device type, username
"""

import logging

from .content_banks import ContentBanks, DEFAULT_CONTENT_BANKS
from .errors import ContentGenerationError
from .models import Product, SynthesizedReview
from .randomness import RandomSource, SystemRandomSource

logger = logging.getLogger(__name__)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def pros_count(rating: int) -> int:
    """1-3 pros, more for better ratings."""
    return clamp(rating - 1, 1, 3)


def cons_count(rating: int) -> int:
    """1-2 cons, more for worse ratings."""
    return clamp(5 - rating, 1, 2)


class ContentSynthesizer:
    """
    Builds a complete SynthesizedReview for a product.

    USAGE:
        synthesizer = ContentSynthesizer(SystemRandomSource(seed=7))
        review = synthesizer.synthesize(product)
        print(review.rating, review.title)
    """

    def __init__(self, rng: RandomSource = None, banks: ContentBanks = DEFAULT_CONTENT_BANKS):
        self._rng = rng or SystemRandomSource()
        self._banks = banks

    @property
    def banks(self) -> ContentBanks:
        return self._banks

    def synthesize(self, product: Product) -> SynthesizedReview:
        """
        Generate one review for a product.

        Raises:
            ContentGenerationError: if a bank cannot supply enough entries.
        """
        banks = self._banks
        rng = self._rng

        rating = rng.weighted_choice(banks.rating_bag)
        title = rng.choice(banks.titles)
        content = self._render_content(rng.choice(banks.content_templates), product)

        pros = self._pick(banks.positive_points, pros_count(rating), "positive_points")
        cons = self._pick(banks.negative_points, cons_count(rating), "negative_points")

        verified_purchase = rng.uniform() < banks.verified_purchase_probability

        country_code = rng.choice(banks.country_codes)
        device_type = rng.choice(banks.device_types)
        username = rng.choice(banks.usernames)

        logger.debug(f"Synthesized {rating}-star review for product {product.id}: \"{title}\"")

        return SynthesizedReview(
            product_id=product.id,
            rating=rating,
            title=title,
            content=content,
            pros=pros,
            cons=cons,
            verified_purchase=verified_purchase,
            platform=self._platform_label(product),
            device_type=device_type,
            country_code=country_code,
            username=username,
        )

    def _render_content(self, template: str, product: Product) -> str:
        category = product.category_name or self._banks.default_category
        return template.format(category=category)

    def _pick(self, bank, count: int, bank_name: str):
        """Shuffle a copy of the bank and keep the first `count` entries."""
        if len(bank) < count:
            raise ContentGenerationError(
                f"Bank '{bank_name}' has {len(bank)} entries, need {count}"
            )
        return self._rng.shuffle(bank)[:count]

    def _platform_label(self, product: Product) -> str:
        # Any platform id maps to the same label
        if product.platform_id:
            return self._banks.platform_label
        return self._banks.fallback_platform_label
