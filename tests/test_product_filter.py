# tests/test_product_filter.py

"""Tests for ProductFilter keyword and accessory filtering."""

import unittest

from src.filters.product_filter import ProductFilter
from src.models.product import Product


def _make_product(title: str) -> Product:
    """Create a minimal Product with the given title."""
    return Product(title=title, numeric_price=1000.0, site="test")


class TestFilterByKeywords(unittest.TestCase):
    """ProductFilter.filter_by_keywords behaviour."""

    def test_empty_keywords_returns_all(self) -> None:
        """No keywords means no filtering."""
        products = [_make_product("Alpha"), _make_product("Beta")]
        kept, excluded = ProductFilter.filter_by_keywords(products, [])
        self.assertEqual(len(kept), 2)
        self.assertEqual(excluded, 0)

    def test_single_keyword_excludes_match(self) -> None:
        """A product whose title contains the keyword is excluded."""
        products = [
            _make_product("Apple iPhone 15 Refurbished"),
            _make_product("Apple iPhone 15"),
        ]
        kept, excluded = ProductFilter.filter_by_keywords(
            products, ["refurbished"]
        )
        self.assertEqual(len(kept), 1)
        self.assertEqual(kept[0].title, "Apple iPhone 15")
        self.assertEqual(excluded, 1)

    def test_case_insensitive(self) -> None:
        """Keyword matching is case-insensitive on both sides."""
        products = [_make_product("renewed galaxy s23")]
        kept, excluded = ProductFilter.filter_by_keywords(
            products, ["RENEWED"]
        )
        self.assertEqual(len(kept), 0)
        self.assertEqual(excluded, 1)

    def test_multiple_keywords(self) -> None:
        """All keywords are checked (OR logic)."""
        products = [
            _make_product("Pixel 8 Renewed"),
            _make_product("Pixel 8 Open Box"),
            _make_product("Pixel 8"),
        ]
        kept, excluded = ProductFilter.filter_by_keywords(
            products, ["renewed", "open box"]
        )
        self.assertEqual([p.title for p in kept], ["Pixel 8"])
        self.assertEqual(excluded, 2)


class TestAccessoryFilter(unittest.TestCase):
    """ProductFilter accessory detection and filtering."""

    def test_is_accessory(self) -> None:
        """Accessory keywords are found anywhere in the title."""
        self.assertTrue(ProductFilter.is_accessory("Tempered Glass for iPhone"))
        self.assertTrue(ProductFilter.is_accessory("Leather Watch Strap"))
        self.assertFalse(ProductFilter.is_accessory("Apple iPhone 15 128GB"))
        self.assertFalse(ProductFilter.is_accessory(""))

    def test_device_source_drops_accessories(self) -> None:
        """Cables and chargers are removed for a device source."""
        source = _make_product("Samsung Galaxy S24 256GB")
        candidates = [
            _make_product("Samsung Galaxy S24 256GB Onyx Black"),
            _make_product("Samsung 25W Charger Adapter"),
            _make_product("USB-C Cable 1m"),
        ]
        kept, excluded = ProductFilter.filter_accessories(source, candidates)
        self.assertEqual(len(kept), 1)
        self.assertEqual(excluded, 2)

    def test_device_words_exempt(self) -> None:
        """A device bundled with an accessory word is kept."""
        source = _make_product("Apple Watch Series 9")
        candidates = [_make_product("Apple Watch Series 9 with Sport Band")]
        kept, excluded = ProductFilter.filter_accessories(source, candidates)
        self.assertEqual(len(kept), 1)
        self.assertEqual(excluded, 0)

    def test_iphone_counts_as_device_word(self) -> None:
        """The device check is a substring test, so 'iPhone' is exempt."""
        source = _make_product("Apple iPhone 15 128GB")
        candidates = [_make_product("iPhone 15 Silicone Case")]
        kept, _excluded = ProductFilter.filter_accessories(source, candidates)
        self.assertEqual(len(kept), 1)

    def test_accessory_source_keeps_everything(self) -> None:
        """Looking for a case keeps case candidates."""
        source = _make_product("Spigen Rugged Armor Case")
        candidates = [
            _make_product("Ringke Fusion Case"),
            _make_product("Anker Charger 20W"),
        ]
        kept, excluded = ProductFilter.filter_accessories(source, candidates)
        self.assertEqual(len(kept), 2)
        self.assertEqual(excluded, 0)
