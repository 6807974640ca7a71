# src/filters/product_filter.py

"""Keyword-based candidate filtering: user exclusions and accessories."""

import logging
import re

from src.models.product import Product

logger = logging.getLogger("dealmatch.filters")

ACCESSORY_KEYWORDS: tuple[str, ...] = (
    "case", "cover", "charger", "cable", "adapter", "holder", "stand",
    "protector", "screen guard", "tempered glass", "skin", "pouch",
    "sleeve", "bag", "strap", "band", "compatible", "accessory",
)

# Titles naming a device keep their place even with accessory words.
_DEVICE_RE = re.compile(
    r"(phone|mobile|smartphone|laptop|tablet|watch|speaker)",
    re.IGNORECASE,
)


class ProductFilter:
    """Filter candidate listings by keyword rules."""

    @staticmethod
    def filter_by_keywords(
        products: list[Product],
        negative_keywords: list[str],
    ) -> tuple[list[Product], int]:
        """Remove products whose title contains any negative keyword.

        Returns the filtered list and the count of excluded products.
        """
        if not negative_keywords:
            return products, 0

        lowered_keywords = [kw.lower() for kw in negative_keywords]

        kept: list[Product] = []
        excluded = 0
        for product in products:
            title_lower = product.title.lower()
            if any(kw in title_lower for kw in lowered_keywords):
                excluded += 1
            else:
                kept.append(product)

        if excluded:
            logger.info(
                "Filtered out %d products matching negative keywords",
                excluded,
            )

        return kept, excluded

    @staticmethod
    def is_accessory(title: str) -> bool:
        """True when the title contains an accessory keyword."""
        title_lower = (title or "").lower()
        return any(kw in title_lower for kw in ACCESSORY_KEYWORDS)

    @staticmethod
    def filter_accessories(
        source: Product,
        candidates: list[Product],
    ) -> tuple[list[Product], int]:
        """Drop likely accessories unless the source is one itself.

        Returns the kept candidates and the count of excluded ones.
        """
        if ProductFilter.is_accessory(source.title):
            return list(candidates), 0

        kept: list[Product] = []
        excluded = 0
        for candidate in candidates:
            if _DEVICE_RE.search(candidate.title or ""):
                kept.append(candidate)
            elif ProductFilter.is_accessory(candidate.title):
                excluded += 1
            else:
                kept.append(candidate)

        if excluded:
            logger.info(
                "Accessory filter removed %d candidates",
                excluded,
            )

        return kept, excluded
