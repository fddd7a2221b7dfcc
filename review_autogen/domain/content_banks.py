"""
Content Banks - Templates and Weights for Synthetic Reviews
============================================================

ARCHITECTURAL DECISION:
- All phrase banks and weights live in one immutable ContentBanks value
- ContentSynthesizer receives it at construction, so tests can swap in
  tiny banks and get predictable output
- Banks are validated up front; a misconfigured bank fails fast instead
  of producing a half-filled review
"""

from dataclasses import dataclass
from typing import Tuple

from .errors import ContentGenerationError

ALLOWED_RATINGS = (3, 4, 5)

# Minimum sizes so the pros/cons table can always be filled
MIN_POSITIVE_POINTS = 3
MIN_NEGATIVE_POINTS = 2

# ── Default Banks ──────────────────────────────────────────────

RATING_BAG = (3, 4, 4, 5, 5, 5)

TITLE_TEMPLATES = (
    "Great service, very satisfied",
    "Does exactly what it promises",
    "Worth the money",
    "Good quality service",
    "Fast delivery and good results",
    "Exactly what I needed",
    "Impressive service",
    "Smooth experience",
    "Reliable service",
    "Excellent value for money",
)

CONTENT_TEMPLATES = (
    "I tried this {category} service for my channel and was really impressed with the results. "
    "The delivery process was smooth and the quality exceeded my expectations.",
    "The {category} service was excellent. The quality was good and delivery was even faster "
    "than promised. Will definitely order again when needed.",
    "This service helped me break through the initial viewer threshold. Now I get much more "
    "organic traffic and everything looks authentic. Highly recommend!",
    "After struggling to grow my account for months, this service helped me push through to "
    "the next level. The growth looks natural and I've seen an increase in real engagement too!",
    "Just what my channel needed. Delivery was fast and support was responsive when I had questions.",
    "I was skeptical at first, but this service delivered exactly as promised. "
    "Impressed with the quality and speed.",
    "This is my second time using this service and the results are consistent. "
    "Good quality and natural-looking growth.",
    "The service was delivered promptly and the quality was exactly what I needed for my channel.",
    "Great value for the price. I've tried other services before, but this one stands out "
    "in terms of quality.",
    "Very professional service that helped boost my channel significantly. "
    "The effects were noticeable right away.",
)

POSITIVE_POINTS = (
    "Fast delivery",
    "Good quality",
    "Helpful support",
    "Natural looking results",
    "Improved organic traffic",
    "Good retention rate",
    "Responsive customer service",
    "Helped grow my channel",
    "Reasonable pricing",
    "Easy ordering process",
    "Authentic appearance",
    "No suspicious activity",
    "Secure transaction",
    "Clear instructions",
    "Visible results quickly",
)

NEGATIVE_POINTS = (
    "Could be slightly cheaper",
    "Delivery took a bit longer than expected",
    "Would prefer more customization options",
    "Small percentage dropped off after a week",
    "Website could be improved",
    "Ordering process could be simpler",
    "Basic analytics only",
    "Limited tracking options",
    "More detailed documentation would help",
    "Mobile ordering experience needs work",
)

COUNTRY_CODES = ("US", "GB", "CA", "DE", "FR", "ES", "IT", "AU", "JP", "BR")

DEVICE_TYPES = ("desktop", "mobile", "tablet")

USERNAMES = (
    "gamer123", "streamer_pro", "content_creator", "twitch_fan", "social_media_guru",
    "youtube_lover", "stream_viewer", "digital_nomad", "tech_enthusiast", "video_creator",
    "broadcast_fan", "live_stream_watcher", "channel_supporter", "media_buff", "online_presence",
)


@dataclass(frozen=True)
class ContentBanks:
    """
    Immutable phrase banks and weights used by ContentSynthesizer.

    Usage:
        banks = ContentBanks()                       # production defaults
        banks = ContentBanks(titles=("Only title",)) # smaller bank for tests
    """

    rating_bag: Tuple[int, ...] = RATING_BAG
    titles: Tuple[str, ...] = TITLE_TEMPLATES
    content_templates: Tuple[str, ...] = CONTENT_TEMPLATES
    positive_points: Tuple[str, ...] = POSITIVE_POINTS
    negative_points: Tuple[str, ...] = NEGATIVE_POINTS
    country_codes: Tuple[str, ...] = COUNTRY_CODES
    device_types: Tuple[str, ...] = DEVICE_TYPES
    usernames: Tuple[str, ...] = USERNAMES

    verified_purchase_probability: float = 0.7
    default_category: str = "digital service"

    # Every platform id maps to platform_label; no id maps to the fallback
    platform_label: str = "twitch"
    fallback_platform_label: str = "other"

    def __post_init__(self):
        for name in (
            "rating_bag", "titles", "content_templates", "positive_points",
            "negative_points", "country_codes", "device_types", "usernames",
        ):
            if not getattr(self, name):
                raise ContentGenerationError(f"Content bank '{name}' is empty")

        invalid = [r for r in self.rating_bag if r not in ALLOWED_RATINGS]
        if invalid:
            raise ContentGenerationError(
                f"Rating bag contains unsupported ratings {invalid}; allowed: {ALLOWED_RATINGS}"
            )

        if len(self.positive_points) < MIN_POSITIVE_POINTS:
            raise ContentGenerationError(
                f"Need at least {MIN_POSITIVE_POINTS} positive points, got {len(self.positive_points)}"
            )

        if len(self.negative_points) < MIN_NEGATIVE_POINTS:
            raise ContentGenerationError(
                f"Need at least {MIN_NEGATIVE_POINTS} negative points, got {len(self.negative_points)}"
            )

        if not 0.0 <= self.verified_purchase_probability <= 1.0:
            raise ContentGenerationError(
                f"verified_purchase_probability must be in [0, 1], "
                f"got {self.verified_purchase_probability}"
            )


DEFAULT_CONTENT_BANKS = ContentBanks()
