# src/matching/level_matcher.py

"""Fallback matcher: four rule-ordered confidence levels with early exit.

Used when the weighted matcher finds nothing.  Levels run strongest
first and each candidate is claimed by at most one level:

1. Exact product id (100).  Any hit returns immediately.
2. Model match, graded by storage agreement (80-95).
3. Brand or model match, scaled by title similarity (70-95).
4. Loose title/brand/keyword overlap (25-80), only while results are
   still scarce.
"""

import logging
import re

from src.config.settings import Settings
from src.filters.product_filter import ProductFilter
from src.filters.product_validator import ProductValidator
from src.matching.brand import BrandCanonicalizer
from src.matching.features import extract_features
from src.matching.similarity import round_half_up, token_overlap
from src.matching.text import tokenize
from src.models.features import ProductFeatures
from src.models.match_result import MatchLevel, MatchResult
from src.models.product import Product

logger = logging.getLogger("dealmatch.matching")

_LEGACY_STOP_WORDS: frozenset[str] = frozenset(
    {"the", "a", "an", "and", "or", "for", "with", "from", "to", "in", "on", "at"}
)

# Product-line words that imply the same maker when found in both models.
_MODEL_BRAND_WORDS: tuple[str, ...] = (
    "iphone", "samsung", "galaxy", "oneplus", "xiaomi", "redmi", "mi",
    "oppo", "vivo", "realme", "pixel", "poco", "motorola", "moto",
    "nokia", "asus", "lenovo", "dell", "hp", "acer", "apple", "macbook",
)

_MODEL_CLEAN_RE = re.compile(r"[^a-z0-9]")
_DIGITS_RE = re.compile(r"\d+")

_Pair = tuple[Product, ProductFeatures]


def _shares_significant_number(text1: str, text2: str) -> bool:
    """True when both strings contain the same digit run of length >= 2."""
    nums2 = set(_DIGITS_RE.findall(text2))
    return any(
        len(num) >= 2 and num in nums2
        for num in _DIGITS_RE.findall(text1)
    )


def _legacy_tokens(text: str) -> list[str]:
    return tokenize(text, min_length=3, stop_words=_LEGACY_STOP_WORDS)


class LevelMatcher:
    """Rule-ordered fallback matcher."""

    def __init__(
        self,
        canonicalizer: BrandCanonicalizer | None = None,
    ) -> None:
        self._brands = canonicalizer or BrandCanonicalizer()

    def find_matches(
        self,
        source: Product,
        candidates: list[Product],
    ) -> list[MatchResult]:
        """Run the levels in order and return the ranked matches."""
        logger.info(
            "Level matcher: source='%s', %d candidates",
            source.title,
            len(candidates),
        )

        valid, _dropped = ProductValidator.validate(candidates)
        filtered, _excluded = ProductFilter.filter_accessories(source, valid)
        if not filtered:
            logger.warning("No candidates left after accessory filtering")
            return []

        source_features = extract_features(source, self._brands)
        pairs: list[_Pair] = [
            (c, extract_features(c, self._brands)) for c in filtered
        ]

        if source.product_id:
            exact = self.find_exact_id_matches(source, filtered)
            if exact:
                logger.info(
                    "Level 1: %d exact id matches, skipping later levels",
                    len(exact),
                )
                return self.sort_and_limit(exact)

        matches: list[MatchResult] = []
        claimed: set[int] = set()

        def unclaimed() -> list[_Pair]:
            return [p for p in pairs if id(p[0]) not in claimed]

        def claim(found: list[MatchResult]) -> None:
            matches.extend(found)
            claimed.update(id(m.product) for m in found)

        level2 = self.find_model_storage_matches(source_features, unclaimed())
        claim(level2)
        logger.info("Level 2: %d model+storage matches", len(level2))

        if len(matches) >= Settings.FALLBACK_EARLY_EXIT:
            logger.info(
                "Early exit with %d high-confidence matches", len(matches)
            )
            return self.sort_and_limit(matches)

        level3 = self.find_brand_model_matches(
            source, source_features, unclaimed()
        )
        claim(level3)
        logger.info("Level 3: %d brand/model matches", len(level3))

        if len(matches) < Settings.FUZZY_LEVEL_CUTOFF:
            level4 = self.find_fuzzy_matches(
                source, source_features, unclaimed()
            )
            claim(level4)
            logger.info("Level 4: %d fuzzy matches", len(level4))
        else:
            logger.info(
                "Skipping fuzzy level (already have %d matches)",
                len(matches),
            )

        final = self.sort_and_limit(matches)
        logger.info("Level matcher kept %d matches", len(final))
        return final

    # ── Levels ───────────────────────────────────────────

    @staticmethod
    def find_exact_id_matches(
        source: Product,
        candidates: list[Product],
    ) -> list[MatchResult]:
        """Level 1: candidates carrying the source's product id."""
        if not source.product_id:
            return []
        return [
            MatchResult(
                product=c,
                confidence=100,
                match_level=MatchLevel.EXACT_ID,
                match_badge="🎯 EXACT",
                match_reason="Exact Product ID",
            )
            for c in candidates
            if c.product_id == source.product_id
        ]

    @staticmethod
    def find_model_storage_matches(
        source_features: ProductFeatures,
        pairs: list[_Pair],
    ) -> list[MatchResult]:
        """Level 2: lenient model match graded by storage agreement."""
        if not source_features.model:
            return []

        matches: list[MatchResult] = []
        for candidate, features in pairs:
            if not LevelMatcher.compare_models(
                source_features.model, features.model
            ):
                continue

            if source_features.storage and features.storage:
                if source_features.storage == features.storage:
                    confidence, level, badge = 95, MatchLevel.EXACT, "🎯 EXACT"
                    reason = f"{features.model} {features.storage}"
                else:
                    confidence, level, badge = 80, MatchLevel.HIGH, "✓ HIGH"
                    reason = f"{features.model} (different storage)"
            else:
                confidence, level, badge = 85, MatchLevel.HIGH, "✓ HIGH"
                reason = features.model

            matches.append(
                MatchResult(
                    product=candidate,
                    confidence=confidence,
                    match_level=level,
                    match_badge=badge,
                    match_reason=reason,
                )
            )
        return matches

    def find_brand_model_matches(
        self,
        source: Product,
        source_features: ProductFeatures,
        pairs: list[_Pair],
    ) -> list[MatchResult]:
        """Level 3: brand or model agreement, scaled by title similarity."""
        if not source_features.model:
            return []

        matches: list[MatchResult] = []
        for candidate, features in pairs:
            brand_ok = self.compare_brands(source_features, features)
            model_ok = bool(features.model) and self.compare_models(
                source_features.model, features.model
            )
            if not (brand_ok or model_ok):
                continue

            similarity = self.text_similarity(source.title, candidate.title)
            confidence = min(84, max(70, round_half_up(70 + similarity * 14)))
            if _price_in_boost_range(source, candidate):
                confidence = min(95, confidence + 10)
                logger.debug(
                    "Price boost: %s (ratio %.2f)",
                    candidate.title[:30],
                    candidate.numeric_price / source.numeric_price,
                )

            matches.append(
                MatchResult(
                    product=candidate,
                    confidence=confidence,
                    match_level=MatchLevel.MEDIUM,
                    match_badge="≈ MEDIUM",
                    match_reason=features.model or "Similar model",
                    similarity=similarity,
                )
            )
        return matches

    def find_fuzzy_matches(
        self,
        source: Product,
        source_features: ProductFeatures,
        pairs: list[_Pair],
    ) -> list[MatchResult]:
        """Level 4: ultra-lenient overlap, floored at the global minimum."""
        matches: list[MatchResult] = []
        for candidate, features in pairs:
            brand_ok = self.compare_brands(source_features, features)
            similarity = self.text_similarity(source.title, candidate.title)
            common = self.has_common_keywords(source.title, candidate.title)
            if not (similarity >= 0.15 or brand_ok or common):
                continue

            confidence = min(69, max(5, round_half_up(5 + similarity * 64)))
            if _price_in_boost_range(source, candidate):
                confidence = min(80, confidence + 15)
                logger.debug(
                    "Fuzzy price boost: %s (ratio %.2f)",
                    candidate.title[:30],
                    candidate.numeric_price / source.numeric_price,
                )

            if confidence < Settings.FALLBACK_MIN_CONFIDENCE:
                continue

            matches.append(
                MatchResult(
                    product=candidate,
                    confidence=confidence,
                    match_level=MatchLevel.LOW,
                    match_badge="~ RELATED",
                    match_reason=(
                        f"Similar product ({round_half_up(similarity * 100)}% match)"
                    ),
                    similarity=similarity,
                )
            )
        return matches

    # ── Comparisons ──────────────────────────────────────

    @staticmethod
    def compare_models(model1: str, model2: str) -> bool:
        """Case/punctuation-insensitive equality, containment or shared number."""
        if not model1 or not model2:
            return False
        clean1 = _MODEL_CLEAN_RE.sub("", model1.lower())
        clean2 = _MODEL_CLEAN_RE.sub("", model2.lower())
        if clean1 == clean2:
            return True
        if clean1 in clean2 or clean2 in clean1:
            return True
        return _shares_significant_number(clean1, clean2)

    def compare_brands(
        self,
        features1: ProductFeatures,
        features2: ProductFeatures,
    ) -> bool:
        """Brand agreement, falling back to clues inside the model strings.

        A missing brand field is read off the title instead.
        """
        brand1 = features1.brand or self._brands.extract_from_title(
            features1.title_lower
        )
        brand2 = features2.brand or self._brands.extract_from_title(
            features2.title_lower
        )
        if brand1 and brand2:
            if self._brands.brands_match(brand1, brand2):
                logger.debug("Brand match: %s == %s", brand1, brand2)
                return True

        model1 = features1.model.lower()
        model2 = features2.model.lower()
        if model1 and model2 and (
            model1 == model2 or model1 in model2 or model2 in model1
        ):
            return True

        if any(w in model1 and w in model2 for w in _MODEL_BRAND_WORDS):
            return True

        return _shares_significant_number(model1, model2)

    @staticmethod
    def text_similarity(text1: str, text2: str) -> float:
        """Jaccard overlap of the two titles' significant words."""
        return token_overlap(_legacy_tokens(text1), _legacy_tokens(text2))

    @staticmethod
    def has_common_keywords(title1: str, title2: str) -> bool:
        """True when the titles share at least two significant words."""
        keywords2 = set(_legacy_tokens(title2))
        common = [k for k in _legacy_tokens(title1) if k in keywords2]
        return len(common) >= 2

    @staticmethod
    def sort_and_limit(
        matches: list[MatchResult],
        limit: int = Settings.FALLBACK_MAX_RESULTS,
    ) -> list[MatchResult]:
        """Drop sub-floor matches, rank by confidence (stable), cap at *limit*."""
        kept = [
            m for m in matches
            if m.confidence >= Settings.FALLBACK_MIN_CONFIDENCE
        ]
        kept.sort(key=lambda m: m.confidence, reverse=True)
        return kept[:limit]


def _price_in_boost_range(source: Product, candidate: Product) -> bool:
    """True when candidate/source price ratio sits inside the boost window."""
    if source.numeric_price <= 0:
        return False
    low, high = Settings.PRICE_BOOST_RANGE
    ratio = candidate.numeric_price / source.numeric_price
    return low <= ratio <= high
