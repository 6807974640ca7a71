# tests/test_level_matcher.py

"""Tests for the four-level fallback LevelMatcher."""

import unittest

from src.matching.brand import BrandCanonicalizer
from src.matching.features import extract_features
from src.matching.level_matcher import LevelMatcher
from src.models.features import ProductFeatures
from src.models.match_result import MatchLevel, MatchResult
from src.models.product import Product


def _make(
    title: str,
    price: float = 79900.0,
    brand: str = "Apple",
    product_id: str = "",
    site: str = "flipkart",
) -> Product:
    """Create a Product with phone defaults."""
    return Product(
        title=title,
        numeric_price=price,
        brand=brand,
        product_id=product_id,
        site=site,
    )


def _result(confidence: int, title: str = "Some product") -> MatchResult:
    """A bare MatchResult for sort/limit tests."""
    return MatchResult(
        product=_make(title),
        confidence=confidence,
        match_level=MatchLevel.LOW,
        match_badge="~ RELATED",
        match_reason="",
    )


class TestLevelOne(unittest.TestCase):
    """Exact product id matching."""

    def test_exact_id_short_circuits(self) -> None:
        """An id hit returns immediately with confidence 100."""
        source = _make("Apple iPhone 15 128GB", product_id="B0CHX1W1XY")
        same_id = _make(
            "Totally different title", brand="Other", product_id="B0CHX1W1XY"
        )
        model_match = _make("Apple iPhone 15 128GB Black")

        matches = LevelMatcher().find_matches(source, [model_match, same_id])

        self.assertEqual(len(matches), 1)
        self.assertIs(matches[0].product, same_id)
        self.assertEqual(matches[0].confidence, 100)
        self.assertEqual(matches[0].match_level, MatchLevel.EXACT_ID)
        self.assertEqual(matches[0].match_reason, "Exact Product ID")

    def test_no_id_on_source(self) -> None:
        """Empty ids never match each other."""
        source = _make("Apple iPhone 15 128GB")
        candidate = _make("Random other listing", brand="Zed")
        self.assertEqual(
            LevelMatcher.find_exact_id_matches(source, [candidate]), []
        )


class TestLevelTwo(unittest.TestCase):
    """Model + storage grading."""

    def test_storage_grading(self) -> None:
        """Equal storage 95, unknown storage 85, different storage 80."""
        source = _make("Apple iPhone 15 128GB")
        equal = _make("iPhone 15 128GB Black")
        different = _make("Apple iPhone 15 256GB")
        unknown = _make("Apple iPhone 15 (Pink)")

        matches = LevelMatcher().find_matches(
            source, [different, unknown, equal]
        )

        self.assertEqual([m.confidence for m in matches], [95, 85, 80])
        self.assertEqual(
            [m.match_level for m in matches],
            [MatchLevel.EXACT, MatchLevel.HIGH, MatchLevel.HIGH],
        )
        self.assertEqual(matches[0].match_reason, "iPhone 15 128GB")
        self.assertEqual(
            matches[2].match_reason, "iPhone 15 (different storage)"
        )

    def test_early_exit_skips_later_levels(self) -> None:
        """Five model matches stop the search before levels 3 and 4."""
        source = _make("Apple iPhone 15 128GB")
        colours = ["Black", "Blue", "Green", "Yellow", "Pink"]
        candidates = [_make(f"Apple iPhone 15 128GB {c}") for c in colours]
        watch = _make("Apple Watch Series 9 GPS 45mm")

        matches = LevelMatcher().find_matches(source, [watch, *candidates])

        self.assertEqual(len(matches), 5)
        self.assertTrue(all(m.confidence == 95 for m in matches))
        self.assertNotIn(watch, [m.product for m in matches])


class TestLevelThree(unittest.TestCase):
    """Brand/model matches scaled by title similarity."""

    def setUp(self) -> None:
        """Galaxy source with a same-brand tablet candidate."""
        self.source = _make(
            "Samsung Galaxy S24 Ultra 256GB", price=120000, brand="Samsung"
        )

    def test_brand_match_without_price_boost(self) -> None:
        """Similarity 1/3 gives 70 + 14/3, rounded to 75."""
        tablet = _make("Samsung Galaxy Tab S9 FE", price=40000, brand="Samsung")
        matches = LevelMatcher().find_matches(self.source, [tablet])

        self.assertEqual(len(matches), 1)
        self.assertEqual(matches[0].confidence, 75)
        self.assertEqual(matches[0].match_level, MatchLevel.MEDIUM)
        self.assertEqual(matches[0].match_badge, "≈ MEDIUM")
        self.assertEqual(matches[0].match_reason, "Similar model")
        self.assertAlmostEqual(matches[0].similarity or 0.0, 1 / 3)

    def test_price_boost(self) -> None:
        """A price within the boost window adds 10."""
        tablet = _make(
            "Samsung Galaxy Tab S9 FE", price=100000, brand="Samsung"
        )
        matches = LevelMatcher().find_matches(self.source, [tablet])
        self.assertEqual(matches[0].confidence, 85)


class TestLevelFour(unittest.TestCase):
    """Ultra-lenient fuzzy matching."""

    def test_fuzzy_match_with_boost_and_floor(self) -> None:
        """Related titles score; weak brand-only matches fall below 25."""
        source = _make(
            "Nike Air Zoom Pegasus Running Shoes", price=9000, brand="Nike"
        )
        related = _make(
            "Nike Pegasus Trail Running Shoes", price=8500, brand="Nike"
        )
        cap = _make("Nike Dri-FIT Sports Cap Black", price=1500, brand="Nike")

        matches = LevelMatcher().find_matches(source, [cap, related])

        self.assertEqual(len(matches), 1)
        self.assertIs(matches[0].product, related)
        # similarity 4/7 -> 5 + 36.57 = 42, +15 price boost
        self.assertEqual(matches[0].confidence, 57)
        self.assertEqual(matches[0].match_level, MatchLevel.LOW)
        self.assertEqual(matches[0].match_badge, "~ RELATED")
        self.assertEqual(
            matches[0].match_reason, "Similar product (57% match)"
        )


class TestAccessoryGate(unittest.TestCase):
    """Accessory filtering ahead of the levels."""

    def test_accessories_removed_for_device_source(self) -> None:
        """A charger never matches a phone source."""
        source = _make("Apple iPhone 15 128GB")
        charger = _make("USB-C Charger 20W for Apple", price=1900)
        self.assertEqual(LevelMatcher().find_matches(source, [charger]), [])

    def test_accessory_source_keeps_accessories(self) -> None:
        """Accessory sources match other accessories."""
        source = _make("Apple MagSafe Charger Wireless", price=4500)
        other = _make("Apple MagSafe Charger Duo Wireless", price=4500)
        matches = LevelMatcher().find_matches(source, [other])
        self.assertEqual(len(matches), 1)


class TestComparisons(unittest.TestCase):
    """Model, brand and keyword helpers."""

    def test_compare_models(self) -> None:
        """Equality, containment and shared numbers."""
        self.assertTrue(LevelMatcher.compare_models("iPhone 15 Pro", "iphone-15-pro"))
        self.assertTrue(LevelMatcher.compare_models("Galaxy S24", "Galaxy S24 Ultra"))
        self.assertTrue(LevelMatcher.compare_models("G15", "Victus 15"))
        self.assertFalse(LevelMatcher.compare_models("X200", "Y300"))
        self.assertFalse(LevelMatcher.compare_models("", "X200"))

    def test_compare_brands_from_models(self) -> None:
        """Without brand fields, model strings supply the evidence."""
        brands = BrandCanonicalizer()
        matcher = LevelMatcher(brands)

        def features(title: str) -> ProductFeatures:
            return extract_features(_make(title, brand=""), brands)

        self.assertTrue(
            matcher.compare_brands(features("iPhone 15"), features("iPhone 15 Pro"))
        )
        self.assertTrue(
            matcher.compare_brands(features("Galaxy S23"), features("Galaxy A54"))
        )
        self.assertFalse(
            matcher.compare_brands(features("X200 radio"), features("Y300 radio"))
        )

    def test_compare_brands_from_title(self) -> None:
        """An empty brand field falls back to the brand named in the title."""
        brands = BrandCanonicalizer()
        matcher = LevelMatcher(brands)
        unbranded = extract_features(_make("Redmi Smart Band Pro", brand=""), brands)
        xiaomi = extract_features(_make("Smart Watch Active", brand="Xiaomi"), brands)
        samsung = extract_features(_make("Smart Watch Active", brand="Samsung"), brands)

        self.assertTrue(matcher.compare_brands(unbranded, xiaomi))
        self.assertFalse(matcher.compare_brands(unbranded, samsung))

    def test_common_keywords(self) -> None:
        """Two shared significant words are required."""
        self.assertTrue(
            LevelMatcher.has_common_keywords(
                "Wireless Bluetooth Speaker", "Portable Bluetooth Speaker"
            )
        )
        self.assertFalse(
            LevelMatcher.has_common_keywords(
                "Wireless Bluetooth Speaker", "Wired Bluetooth Earphones"
            )
        )

    def test_text_similarity_ignores_short_and_stop_words(self) -> None:
        """Words under three letters and stop words do not count."""
        self.assertEqual(
            LevelMatcher.text_similarity("the pro 5g", "pro for an 4g"), 1.0
        )


class TestSortAndLimit(unittest.TestCase):
    """Final ranking."""

    def test_floor_limit_and_stability(self) -> None:
        """Below-25 dropped, ties keep order, capped at 20."""
        results = [_result(30, f"Product {i:02d}") for i in range(25)]
        results.insert(0, _result(10, "Weak product"))
        results.append(_result(90, "Strong product"))

        ranked = LevelMatcher.sort_and_limit(results)

        self.assertEqual(len(ranked), 20)
        self.assertEqual(ranked[0].title, "Strong product")
        self.assertEqual(
            [m.title for m in ranked[1:4]],
            ["Product 00", "Product 01", "Product 02"],
        )
        self.assertNotIn("Weak product", [m.title for m in ranked])
