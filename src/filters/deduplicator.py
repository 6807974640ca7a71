# src/filters/deduplicator.py

"""Collapse colour/size variants of the same listing within a site."""

import logging
import re
from collections.abc import Callable, Sequence
from typing import TypeVar

from src.models.match_result import MatchResult
from src.models.product import Product

logger = logging.getLogger("dealmatch.filters")

T = TypeVar("T", Product, MatchResult)

# Words that distinguish variants of one product, not different products.
_MATCH_COLOR_WORDS: tuple[str, ...] = (
    "black", "white", "blue", "red", "green", "yellow", "pink", "purple",
    "grey", "gray", "silver", "gold", "rose", "midnight", "starlight",
    "coral", "velvet", "ocean", "space", "titanium", "natural",
)
_CANDIDATE_COLOR_WORDS: tuple[str, ...] = (
    "black", "white", "red", "blue", "green", "yellow", "pink", "purple",
    "orange", "grey", "gray", "brown", "beige", "navy", "maroon", "teal",
    "olive", "gold", "silver", "rose", "mint", "coral", "cream", "ivory",
    "khaki", "cyan", "magenta",
)
_VARIANT_WORDS: tuple[str, ...] = (
    "variant", "color", "colour", "size", "pack of", "combo",
)


def _word_pattern(words: Sequence[str]) -> re.Pattern[str]:
    alternation = "|".join(re.escape(w) for w in words)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


_MATCH_STRIP_RE = _word_pattern(_MATCH_COLOR_WORDS + _VARIANT_WORDS)
_CANDIDATE_STRIP_RE = _word_pattern(_CANDIDATE_COLOR_WORDS + _VARIANT_WORDS)
_SIZE_RE = re.compile(r"\b(?:xs|s|m|l|xl|xxl|xxxl)\b", re.IGNORECASE)
_QUANTITY_RE = re.compile(
    r"\b\d+(?:\.\d+)?\s*(?:gb|tb|mb|kg|g|ml|l|inch|cm|mm)\b",
    re.IGNORECASE,
)


def _collapse(text: str) -> str:
    return " ".join(text.split())


class ProductDeduplicator:
    """Keep only the cheapest listing of each variant group per site."""

    @staticmethod
    def _match_key(match: MatchResult) -> str:
        """Group key for matched results: site, brand, colourless title."""
        base_title = _collapse(_MATCH_STRIP_RE.sub("", match.title.lower()))
        return f"{match.site}|{match.brand}|{base_title}"

    @staticmethod
    def _candidate_key(product: Product) -> str:
        """Group key for raw candidates: also strips sizes and quantities."""
        key = _CANDIDATE_STRIP_RE.sub("", product.title.lower())
        key = _SIZE_RE.sub("", key)
        key = _QUANTITY_RE.sub("", key)
        return f"{product.site}|{(product.brand or '').lower()}:{_collapse(key)}"

    @staticmethod
    def _keep_cheapest(
        items: list[T],
        key_fn: Callable[[T], str],
        price_fn: Callable[[T], float],
    ) -> tuple[list[T], int]:
        """Keep the first-seen slot of each group, holding its cheapest item."""
        seen: dict[str, int] = {}
        kept: list[T] = []
        removed = 0

        for item in items:
            key = key_fn(item)
            if key in seen:
                idx = seen[key]
                price = price_fn(item)
                if 0 < price < price_fn(kept[idx]):
                    kept[idx] = item
                removed += 1
                continue
            seen[key] = len(kept)
            kept.append(item)

        return kept, removed

    @staticmethod
    def deduplicate(
        matches: list[MatchResult],
    ) -> tuple[list[MatchResult], int]:
        """Collapse colour variants among match results.

        Groups by ``(site, brand, title without colour/variant words)``
        and keeps the lowest-priced member.  Idempotent.

        Returns the deduplicated list and the count of removed variants.
        """
        if not matches:
            return [], 0

        kept, removed = ProductDeduplicator._keep_cheapest(
            matches,
            ProductDeduplicator._match_key,
            lambda m: m.numeric_price,
        )
        if removed:
            logger.info(
                "Deduplication removed %d colour variants from matches",
                removed,
            )
        return kept, removed

    @staticmethod
    def deduplicate_candidates(
        products: list[Product],
    ) -> tuple[list[Product], int]:
        """Collapse colour/size variants among raw candidates per site.

        Returns the deduplicated list and the count of removed variants.
        """
        if not products:
            return [], 0

        kept, removed = ProductDeduplicator._keep_cheapest(
            products,
            ProductDeduplicator._candidate_key,
            lambda p: p.numeric_price,
        )
        if removed:
            logger.info(
                "Pre-match deduplication removed %d variant listings",
                removed,
            )
        return kept, removed
