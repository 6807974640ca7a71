# src/services/match_orchestrator.py

"""Sequences the matching strategies and builds comparison summaries."""

import asyncio
import logging
from collections.abc import Callable

from src.filters.deduplicator import ProductDeduplicator
from src.filters.price_validation import calculate_price_diff
from src.filters.product_filter import ProductFilter
from src.matching.brand import BrandCanonicalizer
from src.matching.level_matcher import LevelMatcher
from src.matching.similar_finder import SimilarProductFinder
from src.matching.smart_matcher import SmartMatcher
from src.models.match_result import ComparisonResult, MatchLevel, MatchResult
from src.models.product import Availability, Product

logger = logging.getLogger("dealmatch.orchestrator")

Strategy = Callable[[Product, list[Product]], list[MatchResult]]


class MatchOrchestrator:
    """Runs weighted, fallback and similar-product matching in order.

    The first strategy that yields anything wins; its results are
    deduplicated per site and re-ranked.  A strategy that raises is
    logged and treated as having found nothing.  Instances hold no
    per-call state, so one orchestrator may serve concurrent calls.
    """

    def __init__(
        self,
        canonicalizer: BrandCanonicalizer | None = None,
    ) -> None:
        brands = canonicalizer or BrandCanonicalizer()
        self._smart = SmartMatcher(brands)
        self._fallback = LevelMatcher(brands)
        self.strategies: tuple[tuple[str, Strategy], ...] = (
            ("smart", self._smart.find_matches),
            ("fallback", self._fallback.find_matches),
            ("similar", SimilarProductFinder.find_similar),
        )

    # ── Private helpers ──────────────────────────────────

    def _run_strategies(
        self,
        source: Product,
        candidates: list[Product],
    ) -> tuple[str, list[MatchResult], list[str]]:
        """Try each strategy in order until one returns matches.

        Returns the winning strategy name (``"none"`` if nothing
        matched), its raw matches and any stage error messages.
        """
        errors: list[str] = []
        for name, strategy in self.strategies:
            try:
                matches = strategy(source, candidates)
            except Exception as exc:
                logger.error(
                    "Strategy '%s' failed for '%s': %s",
                    name,
                    source.title,
                    exc,
                    exc_info=True,
                )
                errors.append(f"{name}: {exc}")
                continue

            if matches:
                logger.info(
                    "Strategy '%s' produced %d matches", name, len(matches)
                )
                return name, matches, errors
            logger.info("Strategy '%s' found nothing, falling through", name)

        return "none", [], errors

    @staticmethod
    def _finalise(matches: list[MatchResult]) -> list[MatchResult]:
        """Collapse per-site variants and re-rank by confidence (stable)."""
        deduped, _removed = ProductDeduplicator.deduplicate(matches)
        deduped.sort(key=lambda m: m.confidence, reverse=True)
        return deduped

    @staticmethod
    def _best_price(matches: list[MatchResult]) -> MatchResult | None:
        """Cheapest priced match that is not reported out of stock."""
        buyable = [
            m for m in matches
            if m.numeric_price > 0
            and m.product.availability is not Availability.OUT_OF_STOCK
        ]
        if not buyable:
            return None
        return min(buyable, key=lambda m: m.numeric_price)

    # ── Public API ───────────────────────────────────────

    def match(
        self,
        source: Product,
        candidates: list[Product],
    ) -> list[MatchResult]:
        """Return the final ranked matches for *source*."""
        _name, matches, _errors = self._run_strategies(source, candidates)
        return self._finalise(matches) if matches else []

    def compare(
        self,
        source: Product,
        candidates: list[Product],
        negative_keywords: list[str] | None = None,
    ) -> ComparisonResult:
        """Match *source* against listings from other sites and summarise.

        Listings from the source's own site are ignored, negative
        keywords are applied, and colour/size variants are collapsed
        before matching.
        """
        result = ComparisonResult(source=source)

        others = [
            c for c in candidates
            if not source.site or c.site != source.site
        ]
        result.candidates_total = len(others)
        result.sites_searched = len({c.site for c in others if c.site})

        kept, result.excluded_count = ProductFilter.filter_by_keywords(
            others, negative_keywords or []
        )
        kept, _removed = ProductDeduplicator.deduplicate_candidates(kept)
        result.candidates_after_dedup = len(kept)

        result.strategy, matches, result.errors = self._run_strategies(
            source, kept
        )
        result.matches = self._finalise(matches) if matches else []

        best = self._best_price(result.matches)
        result.best_price = best
        # Similar suggestions are other products; no saving to report.
        all_similar = all(
            m.match_level is MatchLevel.SIMILAR for m in result.matches
        )
        if best is not None and source.numeric_price > 0 and not all_similar:
            diff = calculate_price_diff(
                source.numeric_price, best.numeric_price
            )
            if diff.is_cheaper:
                result.savings = diff.diff
                result.savings_percent = diff.percent

        logger.info(
            "Compared '%s': %d candidates -> %d matches via %s",
            source.title,
            result.candidates_total,
            len(result.matches),
            result.strategy,
        )
        return result

    async def compare_many(
        self,
        requests: list[tuple[Product, list[Product]]],
        negative_keywords: list[str] | None = None,
    ) -> list[ComparisonResult]:
        """Run independent comparisons concurrently, in input order.

        A comparison that raises yields an empty result carrying the
        error message instead of aborting the batch.
        """
        tasks = [
            asyncio.to_thread(
                self.compare, source, candidates, negative_keywords
            )
            for source, candidates in requests
        ]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results: list[ComparisonResult] = []
        for (source, _candidates), outcome in zip(requests, outcomes):
            if isinstance(outcome, ComparisonResult):
                results.append(outcome)
            elif isinstance(outcome, Exception):
                logger.error(
                    "Comparison failed for '%s': %s",
                    source.title,
                    outcome,
                    exc_info=outcome,
                )
                results.append(
                    ComparisonResult(source=source, errors=[str(outcome)])
                )
        return results
