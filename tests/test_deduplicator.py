# tests/test_deduplicator.py

"""Tests for ProductDeduplicator per-site variant collapsing."""

import unittest

from src.filters.deduplicator import ProductDeduplicator
from src.models.match_result import MatchLevel, MatchResult
from src.models.product import Product


def _make(
    title: str,
    price: float = 1000.0,
    site: str = "flipkart",
    brand: str = "Apple",
) -> Product:
    """Create a minimal Product."""
    return Product(title=title, numeric_price=price, site=site, brand=brand)


def _match(title: str, price: float, site: str = "flipkart") -> MatchResult:
    """Wrap a product in a MatchResult."""
    return MatchResult(
        product=_make(title, price, site),
        confidence=90,
        match_level=MatchLevel.HIGH,
        match_badge="⭐ HIGH",
        match_reason="",
    )


class TestDeduplicateMatches(unittest.TestCase):
    """ProductDeduplicator.deduplicate behaviour."""

    def test_empty_list(self) -> None:
        """Empty input returns empty output."""
        kept, removed = ProductDeduplicator.deduplicate([])
        self.assertEqual(len(kept), 0)
        self.assertEqual(removed, 0)

    def test_colour_variants_collapse(self) -> None:
        """Titanium colour variants on one site keep the cheapest."""
        matches = [
            _match("Apple iPhone 15 Pro 256GB Blue Titanium", 134900),
            _match("Apple iPhone 15 Pro 256GB Natural Titanium", 132900),
            _match("Apple iPhone 15 Pro 256GB White Titanium", 133900),
        ]
        kept, removed = ProductDeduplicator.deduplicate(matches)
        self.assertEqual(len(kept), 1)
        self.assertEqual(removed, 2)
        self.assertEqual(kept[0].numeric_price, 132900)

    def test_cheapest_takes_first_slot(self) -> None:
        """The surviving item occupies the group's first-seen position."""
        matches = [
            _match("Apple iPhone 15 128GB Blue", 79900),
            _match("Apple iPhone 15 Plus 128GB", 89900),
            _match("Apple iPhone 15 128GB Pink", 78900),
        ]
        kept, _removed = ProductDeduplicator.deduplicate(matches)
        self.assertEqual(
            [m.numeric_price for m in kept], [78900, 89900]
        )

    def test_different_sites_kept(self) -> None:
        """The same listing on two sites is not a duplicate."""
        matches = [
            _match("Apple iPhone 15 128GB Blue", 79900, site="flipkart"),
            _match("Apple iPhone 15 128GB Black", 78900, site="croma"),
        ]
        kept, removed = ProductDeduplicator.deduplicate(matches)
        self.assertEqual(len(kept), 2)
        self.assertEqual(removed, 0)

    def test_model_words_not_stripped(self) -> None:
        """Pro and non-Pro stay apart."""
        matches = [
            _match("Apple iPhone 15 Pro 128GB", 119900),
            _match("Apple iPhone 15 128GB", 79900),
        ]
        kept, _removed = ProductDeduplicator.deduplicate(matches)
        self.assertEqual(len(kept), 2)

    def test_zero_price_not_preferred(self) -> None:
        """A zero-price duplicate does not replace a priced one."""
        matches = [
            _match("Apple iPhone 15 128GB Blue", 79900),
            _match("Apple iPhone 15 128GB Black", 0),
        ]
        kept, _removed = ProductDeduplicator.deduplicate(matches)
        self.assertEqual(kept[0].numeric_price, 79900)

    def test_idempotent(self) -> None:
        """A second pass removes nothing."""
        matches = [
            _match("Apple iPhone 15 128GB Blue", 79900),
            _match("Apple iPhone 15 128GB Black", 78900),
            _match("Apple iPhone 15 Plus 128GB", 89900),
        ]
        once, _removed = ProductDeduplicator.deduplicate(matches)
        twice, removed = ProductDeduplicator.deduplicate(once)
        self.assertEqual(once, twice)
        self.assertEqual(removed, 0)


class TestDeduplicateCandidates(unittest.TestCase):
    """ProductDeduplicator.deduplicate_candidates behaviour."""

    def test_empty_list(self) -> None:
        """Empty input returns empty output."""
        self.assertEqual(
            ProductDeduplicator.deduplicate_candidates([]), ([], 0)
        )

    def test_sizes_and_quantities_stripped(self) -> None:
        """Size and pack variants of one garment collapse."""
        products = [
            _make("Nike Dri-FIT Tee Black M", 1995, site="myntra", brand="Nike"),
            _make("Nike Dri-FIT Tee Navy XL", 1795, site="myntra", brand="Nike"),
        ]
        kept, removed = ProductDeduplicator.deduplicate_candidates(products)
        self.assertEqual(removed, 1)
        self.assertEqual(kept[0].numeric_price, 1795)

    def test_storage_variants_collapse(self) -> None:
        """Capacities are stripped for raw candidates."""
        products = [
            _make("Apple iPhone 15 128 GB", 79900),
            _make("Apple iPhone 15 256 GB", 89900),
        ]
        kept, removed = ProductDeduplicator.deduplicate_candidates(products)
        self.assertEqual(len(kept), 1)
        self.assertEqual(removed, 1)

    def test_brand_case_ignored(self) -> None:
        """Brand casing does not split a group."""
        products = [
            _make("Galaxy Buds FE Graphite", 4999, brand="Samsung"),
            _make("Galaxy Buds FE Graphite", 4499, brand="SAMSUNG"),
        ]
        kept, _removed = ProductDeduplicator.deduplicate_candidates(products)
        self.assertEqual(len(kept), 1)
        self.assertEqual(kept[0].numeric_price, 4499)

    def test_different_sites_kept(self) -> None:
        """Identical titles on two sites survive."""
        products = [
            _make("Apple iPhone 15 128 GB", 79900, site="flipkart"),
            _make("Apple iPhone 15 128 GB", 79900, site="amazon"),
        ]
        kept, removed = ProductDeduplicator.deduplicate_candidates(products)
        self.assertEqual(len(kept), 2)
        self.assertEqual(removed, 0)
