# tests/test_similar_finder.py

"""Tests for the last-resort SimilarProductFinder."""

import unittest

from src.matching.similar_finder import SimilarProductFinder
from src.models.match_result import MatchLevel
from src.models.product import Product


def _make(title: str, brand: str, category: str, site: str = "nykaa") -> Product:
    """Create a Product with a fixed price."""
    return Product(
        title=title,
        numeric_price=799.0,
        brand=brand,
        category=category,
        site=site,
    )


class TestBeauty(unittest.TestCase):
    """Shade bonus for beauty products."""

    def setUp(self) -> None:
        """A foundation in shade 128."""
        self.source = _make(
            "Maybelline Fit Me Foundation 128 Warm Nude",
            brand="Maybelline New York",
            category="beauty",
        )

    def test_same_shade(self) -> None:
        """Brand + category + shade scores 60."""
        candidate = _make(
            "Maybelline Fit Me Matte Foundation 128 Warm Nude 30ml",
            brand="Maybelline",
            category="Beauty",
        )
        matches = SimilarProductFinder.find_similar(self.source, [candidate])
        self.assertEqual(len(matches), 1)
        self.assertEqual(matches[0].confidence, 60)
        self.assertEqual(
            matches[0].match_reason,
            "Same brand, category & shade (128)",
        )
        self.assertEqual(matches[0].match_level, MatchLevel.SIMILAR)
        self.assertEqual(matches[0].match_badge, "🔗 SIMILAR")

    def test_other_shade(self) -> None:
        """A different shade keeps only the category bonus."""
        candidate = _make(
            "Maybelline Fit Me Foundation 220 Natural Beige",
            brand="Maybelline",
            category="beauty",
        )
        matches = SimilarProductFinder.find_similar(self.source, [candidate])
        self.assertEqual(matches[0].confidence, 35)

    def test_brand_required(self) -> None:
        """Other brands are never suggested."""
        candidate = _make(
            "Lakme 9to5 Foundation 128 Warm Nude", brand="Lakme", category="beauty"
        )
        self.assertEqual(
            SimilarProductFinder.find_similar(self.source, [candidate]), []
        )

    def test_brand_alone_below_floor(self) -> None:
        """Same brand in another category scores 20 and is dropped."""
        candidate = _make(
            "Maybelline Colossal Kajal", brand="Maybelline", category="eyes"
        )
        self.assertEqual(
            SimilarProductFinder.find_similar(self.source, [candidate]), []
        )


class TestFashion(unittest.TestCase):
    """Colour bonus for fashion products."""

    def test_colour_bonus(self) -> None:
        """Same colour adds 20; a different colour does not."""
        source = _make(
            "Levis 511 Slim Fit Jeans Blue", brand="Levis", category="fashion"
        )
        blue = _make("Levis 512 Tapered Jeans Blue", brand="Levis", category="fashion")
        black = _make("Levis 511 Slim Jeans Black", brand="Levis", category="fashion")

        matches = SimilarProductFinder.find_similar(source, [black, blue])

        self.assertEqual([m.confidence for m in matches], [55, 35])
        self.assertIs(matches[0].product, blue)


class TestElectronics(unittest.TestCase):
    """Type keyword bonus for electronics."""

    def test_type_keyword(self) -> None:
        """Sharing the first type keyword adds 10."""
        source = _make(
            "Apple iPhone 15 Pro 128GB", brand="Apple", category="electronics"
        )
        ipad = _make("Apple iPad Pro 11", brand="Apple", category="electronics")
        watch = _make("Apple Watch Ultra 2", brand="Apple", category="electronics")

        matches = SimilarProductFinder.find_similar(source, [watch, ipad])

        self.assertEqual([m.confidence for m in matches], [45, 35])
        self.assertTrue(matches[0].match_reason.endswith("+ similar type (pro)"))


class TestLimits(unittest.TestCase):
    """Result cap and degenerate input."""

    def test_capped_at_fifteen(self) -> None:
        """No more than 15 suggestions are returned."""
        source = _make("Nike Revolution 6", brand="Nike", category="shoes")
        candidates = [
            _make(f"Nike Model {i}", brand="Nike", category="shoes")
            for i in range(20)
        ]
        self.assertEqual(
            len(SimilarProductFinder.find_similar(source, candidates)), 15
        )

    def test_source_without_brand(self) -> None:
        """A source with no brand yields nothing."""
        source = _make("Unbranded cotton towel", brand="", category="home")
        candidate = _make("Cotton towel", brand="Spaces", category="home")
        self.assertEqual(
            SimilarProductFinder.find_similar(source, [candidate]), []
        )

    def test_invalid_candidates_skipped(self) -> None:
        """Unpriced or short-titled listings are never suggested."""
        source = _make("Nike Revolution 6", brand="Nike", category="shoes")
        unpriced = Product(
            title="Nike Revolution 7",
            numeric_price=0,
            brand="Nike",
            category="shoes",
            site="myntra",
        )
        short = _make("Nike", brand="Nike", category="shoes")
        self.assertEqual(
            SimilarProductFinder.find_similar(source, [unpriced, short]), []
        )
