# src/matching/smart_matcher.py

"""Primary matcher: multi-factor weighted scoring.

Every surviving candidate is scored on six independent dimensions and
the clamped sum decides whether it is a match::

    brand     0..25   canonical brand equality / containment / shared word
    model     0..30   extracted model equality / containment / edit ratio
    specs     0..20   storage (8), RAM (8), colour (4)
    title     0..15   token + bigram Jaccard overlap
    category  0..10   scraped category field agreement (5 when unknown)
    price    -2..+5   proximity of the two prices

Candidates below ``Settings.MIN_CONFIDENCE`` are dropped, the rest are
ranked by total (stable on input order) and cut to ``MAX_RESULTS``.
Category filtering runs *before* scoring so cross-category pairs are
never scored at all.
"""

import logging
import re

from src.config.settings import Settings
from src.filters.product_validator import ProductValidator
from src.matching.attributes import leading_number
from src.matching.brand import BrandCanonicalizer
from src.matching.category import CategoryClassifier
from src.matching.features import extract_features
from src.matching.similarity import (
    round_half_up,
    string_similarity,
    token_overlap,
)
from src.models.features import ProductFeatures
from src.models.match_result import MatchLevel, MatchResult, ScoringBreakdown
from src.models.product import Product

logger = logging.getLogger("dealmatch.matching")

_MODEL_CLEAN_RE = re.compile(r"[^a-z0-9]")


def classify_score(total: float) -> tuple[MatchLevel, str]:
    """Map a weighted total onto its match level and display badge."""
    if total >= Settings.EXACT_THRESHOLD:
        return MatchLevel.EXACT, "🎯 EXACT"
    if total >= Settings.HIGH_THRESHOLD:
        return MatchLevel.HIGH, "⭐ HIGH"
    if total >= Settings.MIN_CONFIDENCE:
        return MatchLevel.MEDIUM, "✓ MEDIUM"
    return MatchLevel.LOW, "~ LOW"


class SmartMatcher:
    """Weighted multi-factor scorer used as the first matching strategy."""

    def __init__(
        self,
        canonicalizer: BrandCanonicalizer | None = None,
    ) -> None:
        self._brands = canonicalizer or BrandCanonicalizer()

    # ── Public API ───────────────────────────────────────

    def find_matches(
        self,
        source: Product,
        candidates: list[Product],
    ) -> list[MatchResult]:
        """Score *candidates* against *source* and return the ranked matches."""
        logger.info(
            "Smart matcher: source='%s', %d candidates",
            source.title,
            len(candidates),
        )

        valid, _dropped = ProductValidator.validate(candidates)

        source_category = CategoryClassifier.detect_category(source)
        filtered = CategoryClassifier.filter_by_category(
            source, source_category, valid
        )
        logger.info(
            "Source category %s: %d of %d valid candidates pass",
            source_category,
            len(filtered),
            len(valid),
        )
        if not filtered:
            logger.warning(
                "No candidates left after category filtering for '%s'",
                source.title,
            )
            return []

        scored = self.score_candidates(source, filtered)

        accepted = [
            (candidate, features, scoring)
            for candidate, features, scoring in scored
            if scoring.total >= Settings.MIN_CONFIDENCE
        ]
        accepted.sort(key=lambda item: item[2].total, reverse=True)
        accepted = accepted[:Settings.MAX_RESULTS]

        results: list[MatchResult] = []
        for candidate, features, scoring in accepted:
            level, badge = classify_score(scoring.total)
            results.append(
                MatchResult(
                    product=candidate,
                    confidence=round_half_up(scoring.total),
                    match_level=level,
                    match_badge=badge,
                    match_reason=self.build_match_reason(scoring, features),
                    scoring=scoring,
                )
            )

        logger.info("Smart matcher kept %d matches", len(results))
        for match in results[:3]:
            logger.debug(
                "  %3d  %s  [%s]  brand=%.1f model=%.1f specs=%.1f",
                match.confidence,
                match.title[:50],
                match.site,
                match.scoring.brand if match.scoring else 0.0,
                match.scoring.model if match.scoring else 0.0,
                match.scoring.specs if match.scoring else 0.0,
            )
        return results

    def score_candidates(
        self,
        source: Product,
        candidates: list[Product],
    ) -> list[tuple[Product, ProductFeatures, ScoringBreakdown]]:
        """Score every candidate; no threshold, input order preserved."""
        source_features = extract_features(source, self._brands)
        scored: list[tuple[Product, ProductFeatures, ScoringBreakdown]] = []
        for candidate in candidates:
            features = extract_features(candidate, self._brands)
            scoring = self.score_pair(
                source, candidate, source_features, features
            )
            scored.append((candidate, features, scoring))
        return scored

    def score_pair(
        self,
        source: Product,
        candidate: Product,
        source_features: ProductFeatures,
        candidate_features: ProductFeatures,
    ) -> ScoringBreakdown:
        """Compute the full weighted breakdown for one pair."""
        return ScoringBreakdown.from_scores(
            brand=self.score_brand(
                source_features.brand, candidate_features.brand
            ),
            model=self.score_model(
                source_features.model,
                candidate_features.model,
                source_features.title_tokens,
                candidate_features.title_tokens,
            ),
            specs=self.score_specs(source_features, candidate_features),
            title=self.score_title(
                source_features.title_tokens,
                candidate_features.title_tokens,
                source_features.bigrams,
                candidate_features.bigrams,
            ),
            category=self.score_category(source.category, candidate.category),
            price=self.score_price(
                source.numeric_price, candidate.numeric_price
            ),
        )

    # ── Sub-scores ───────────────────────────────────────

    def score_brand(self, brand1: str, brand2: str) -> float:
        """0..25: equal, containing, or sharing a significant word."""
        weight = Settings.WEIGHTS["brand"]
        if not brand1 or not brand2:
            return 0.0

        if self._brands.brands_match(brand1, brand2):
            return float(weight)

        lower1, lower2 = brand1.lower(), brand2.lower()
        if lower1 in lower2 or lower2 in lower1:
            return weight * 0.7

        words2 = set(lower2.split())
        if any(len(w) > 2 and w in words2 for w in lower1.split()):
            return weight * 0.5

        return 0.0

    @staticmethod
    def score_model(
        model1: str,
        model2: str,
        tokens1: tuple[str, ...] | list[str],
        tokens2: tuple[str, ...] | list[str],
    ) -> float:
        """0..30: model string agreement, or title overlap without models."""
        weight = Settings.WEIGHTS["model"]
        if not model1 or not model2:
            return token_overlap(tokens1, tokens2) * weight

        clean1 = _MODEL_CLEAN_RE.sub("", model1.lower())
        clean2 = _MODEL_CLEAN_RE.sub("", model2.lower())

        if clean1 == clean2:
            return float(weight)
        if clean1 in clean2 or clean2 in clean1:
            return weight * 0.8

        similarity = string_similarity(clean1, clean2)
        if similarity > 0.6:
            return weight * similarity
        return 0.0

    @staticmethod
    def score_specs(
        source: ProductFeatures,
        candidate: ProductFeatures,
    ) -> float:
        """0..20: storage and RAM (8 exact / 4 close) plus colour (4).

        "Close" compares the bare numbers, so 512GB vs 1TB counts as a
        gap of 511.
        """
        score = 0.0

        if source.storage and candidate.storage:
            if source.storage == candidate.storage:
                score += 8
            elif _numeric_gap(source.storage, candidate.storage) <= 128:
                score += 4

        if source.ram and candidate.ram:
            if source.ram == candidate.ram:
                score += 8
            elif _numeric_gap(source.ram, candidate.ram) <= 4:
                score += 4

        if source.color and candidate.color:
            if source.color.lower() == candidate.color.lower():
                score += 4

        return score

    @staticmethod
    def score_title(
        tokens1: tuple[str, ...] | list[str],
        tokens2: tuple[str, ...] | list[str],
        bigrams1: tuple[str, ...] | list[str],
        bigrams2: tuple[str, ...] | list[str],
    ) -> float:
        """0..15: weighted token and bigram Jaccard overlap."""
        token_score = token_overlap(tokens1, tokens2)
        bigram_score = token_overlap(bigrams1, bigrams2)
        return (
            (token_score * 0.4 + bigram_score * 0.6)
            * Settings.WEIGHTS["title"]
        )

    @staticmethod
    def score_category(cat1: str, cat2: str) -> float:
        """0..10: scraped category agreement; neutral 5 when either is absent."""
        weight = Settings.WEIGHTS["category"]
        if not cat1 or not cat2:
            return 5.0
        if cat1 == cat2:
            return float(weight)
        if cat1 in cat2 or cat2 in cat1:
            return weight * 0.7
        return 0.0

    @staticmethod
    def score_price(price1: float, price2: float) -> float:
        """-2..+5: bonus for nearby prices, penalty beyond a 2x gap."""
        if price1 <= 0 or price2 <= 0:
            return 0.0
        ratio = max(price1, price2) / min(price1, price2)
        if ratio <= 1.2:
            return 5.0
        if ratio <= 1.5:
            return 3.0
        if ratio > 2.0:
            return -2.0
        return 0.0

    # ── Presentation ─────────────────────────────────────

    @staticmethod
    def build_match_reason(
        scoring: ScoringBreakdown,
        features: ProductFeatures,
    ) -> str:
        """Summarise the sub-scores that cleared their reporting thresholds."""
        reasons: list[str] = []

        if scoring.brand >= 20:
            reasons.append(f"Brand: {features.brand}")
        if scoring.model >= 20:
            reasons.append(f"Model: {features.model or 'matched'}")
        if scoring.specs >= 10:
            specs = [s for s in (features.storage, features.ram) if s]
            if specs:
                reasons.append(f"Specs: {', '.join(specs)}")
        if scoring.title >= 10:
            reasons.append("Similar title")

        return " • ".join(reasons) or "Matched"


def _numeric_gap(value1: str, value2: str) -> float:
    """Absolute difference of the leading numbers; inf when unparseable."""
    n1 = leading_number(value1)
    n2 = leading_number(value2)
    if n1 is None or n2 is None:
        return float("inf")
    return abs(n1 - n2)
