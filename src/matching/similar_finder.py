# src/matching/similar_finder.py

"""Last-resort finder for loosely related listings of the same brand."""

import logging
import re

from src.config.settings import Settings
from src.filters.product_validator import ProductValidator
from src.models.match_result import MatchLevel, MatchResult
from src.models.product import Product

logger = logging.getLogger("dealmatch.matching")

_COLOR_RE = re.compile(
    r"\b(black|white|blue|red|green|yellow|pink|purple|grey|gray|silver"
    r"|gold|rose|midnight|starlight|coral|velvet|ocean)\b",
    re.IGNORECASE,
)
# A numeric shade code ("shade 01", "102") or a descriptive shade word.
_SHADE_RE = re.compile(
    r"\b(shade\s*)?(\d{1,3})\b"
    r"|\b(fair|light|medium|dark|deep|ivory|beige|nude|natural)\b",
    re.IGNORECASE,
)
_TYPE_KEYWORDS: tuple[str, ...] = (
    "pro", "max", "plus", "lite", "mini", "ultra", "air", "5g", "4g",
)

BASE_CONFIDENCE = 20
CATEGORY_BONUS = 15
COLOR_BONUS = 20
SHADE_BONUS = 25
TYPE_BONUS = 10


def _first_match(pattern: re.Pattern[str], text: str) -> str:
    found = pattern.search(text)
    return found.group(0).lower() if found else ""


def _first_type_keyword(title: str) -> str:
    return next((kw for kw in _TYPE_KEYWORDS if kw in title), "")


class SimilarProductFinder:
    """Suggest same-brand listings when no real match exists."""

    @staticmethod
    def find_similar(
        source: Product,
        candidates: list[Product],
    ) -> list[MatchResult]:
        """Score same-brand candidates by category and variant agreement.

        Brand agreement alone is worth 20, below the 30 floor, so every
        result also shares the source's category.
        """
        valid, _dropped = ProductValidator.validate(candidates)
        source_brand = (source.brand or "").lower()
        source_category = (source.category or "").lower()
        source_title = source.title.lower()
        source_color = _first_match(_COLOR_RE, source_title)
        source_shade = _first_match(_SHADE_RE, source_title)

        logger.info(
            "Similar finder: brand=%r category=%r color=%r shade=%r",
            source_brand,
            source_category,
            source_color,
            source_shade,
        )

        if not source_brand.split():
            logger.info("Source has no brand; nothing to compare")
            return []
        brand_word = source_brand.split()[0]

        matches: list[MatchResult] = []
        for candidate in valid:
            cand_brand = (candidate.brand or "").lower()
            if not cand_brand or brand_word not in cand_brand:
                continue

            cand_category = (candidate.category or "").lower()
            cand_title = candidate.title.lower()
            confidence = BASE_CONFIDENCE
            reason = "Same brand"

            if source_category and source_category == cand_category:
                confidence += CATEGORY_BONUS
                reason = f"Same brand & category ({source_category})"

                is_fashion = (
                    "fashion" in source_category
                    or "clothing" in source_category
                )
                if is_fashion and source_color:
                    if _first_match(_COLOR_RE, cand_title) == source_color:
                        confidence += COLOR_BONUS
                        reason = (
                            f"Same brand, category & color ({source_color})"
                        )

                if "beauty" in source_category and source_shade:
                    if _first_match(_SHADE_RE, cand_title) == source_shade:
                        confidence += SHADE_BONUS
                        reason = (
                            f"Same brand, category & shade ({source_shade})"
                        )

                if any(
                    word in source_category
                    for word in ("electronics", "smartphone", "laptop")
                ):
                    source_type = _first_type_keyword(source_title)
                    cand_type = _first_type_keyword(cand_title)
                    if source_type and source_type == cand_type:
                        confidence += TYPE_BONUS
                        reason += f" + similar type ({source_type})"

            if confidence < Settings.SIMILAR_MIN_CONFIDENCE:
                continue

            matches.append(
                MatchResult(
                    product=candidate,
                    confidence=confidence,
                    match_level=MatchLevel.SIMILAR,
                    match_badge="🔗 SIMILAR",
                    match_reason=reason,
                )
            )

        matches.sort(key=lambda m: m.confidence, reverse=True)
        results = matches[:Settings.SIMILAR_MAX_RESULTS]
        logger.info("Similar finder kept %d products", len(results))
        return results
