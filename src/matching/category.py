# src/matching/category.py

"""Coarse category detection and the strict cross-category gate."""

import logging
from collections.abc import Mapping
from types import MappingProxyType

from src.models.product import Product

logger = logging.getLogger("dealmatch.matching")

UNKNOWN = "unknown"
ACCESSORY = "accessory"

# Scanned in order against the lowercased title; first hit wins.
CATEGORY_KEYWORDS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "laptop": ("laptop", "notebook", "ultrabook", "chromebook", "macbook"),
        "phone": ("phone", "smartphone", "mobile", "iphone", "galaxy phone"),
        "tablet": ("tablet", "ipad", "tab s", "surface go"),
        "gpu": ("graphics card", "gpu", "geforce", "radeon", "rtx", "gtx"),
        ACCESSORY: (
            "case", "cover", "charger", "cable", "adapter",
            "protector", "tempered glass",
        ),
    }
)

# Fragments trusted when they appear in a scraped category field.
EXPLICIT_CATEGORY_FRAGMENTS: tuple[str, ...] = (
    "laptop", "phone", "tablet", "gpu",
)


class CategoryClassifier:
    """Classify products into coarse categories and gate candidates."""

    @staticmethod
    def detect_category(product: Product) -> str:
        """Return ``laptop|phone|tablet|gpu|accessory|unknown``.

        An explicit category field is trusted first, then title keywords.
        """
        explicit = (product.category or "").lower()
        if explicit:
            for fragment in EXPLICIT_CATEGORY_FRAGMENTS:
                if fragment in explicit:
                    return fragment

        title_lower = (product.title or "").lower()
        for category, keywords in CATEGORY_KEYWORDS.items():
            if any(keyword in title_lower for keyword in keywords):
                return category

        return UNKNOWN

    @staticmethod
    def filter_by_category(
        source: Product,
        source_category: str,
        candidates: list[Product],
    ) -> list[Product]:
        """Drop candidates from a different category than the source.

        Accessory sources keep only accessories.  Otherwise accessories
        are always dropped and a category mismatch drops the candidate
        unless either side is ``unknown``.
        """
        kept: list[Product] = []
        for candidate in candidates:
            candidate_category = CategoryClassifier.detect_category(candidate)
            if source_category == ACCESSORY:
                allowed = candidate_category == ACCESSORY
            elif candidate_category == ACCESSORY:
                allowed = False
            elif UNKNOWN in (source_category, candidate_category):
                allowed = True
            else:
                allowed = candidate_category == source_category

            if allowed:
                kept.append(candidate)
            else:
                logger.debug(
                    "Category gate dropped '%s' (%s vs source %s)",
                    candidate.title,
                    candidate_category,
                    source_category,
                )

        dropped = len(candidates) - len(kept)
        if dropped:
            logger.info(
                "Category filter removed %d of %d candidates for '%s'",
                dropped,
                len(candidates),
                source.title,
            )
        return kept
