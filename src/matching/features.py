# src/matching/features.py

"""Feature extraction: one ``ProductFeatures`` per product."""

import re

from src.matching.attributes import (
    extract_color,
    extract_model,
    extract_ram,
    extract_storage,
)
from src.matching.brand import BrandCanonicalizer
from src.matching.text import generate_ngrams, tokenize
from src.models.features import ProductFeatures
from src.models.product import Product

_BRAND_KEYWORD_RE = re.compile(
    r"\b(apple|samsung|oneplus|xiaomi|redmi|oppo|vivo|realme|pixel|poco"
    r"|iphone|galaxy|macbook|dell|hp|lenovo|asus|acer|msi)\b",
    re.IGNORECASE,
)
_MODEL_KEYWORD_RE = re.compile(
    r"\b([a-z0-9]+ (?:pro|plus|ultra|max|mini|lite|ti|super))\b",
    re.IGNORECASE,
)
_SPEC_KEYWORD_RE = re.compile(
    r"\b(\d+(?:gb|tb|ghz|mp|inch|hz))\b",
    re.IGNORECASE,
)
_DIGITS_RE = re.compile(r"\d+")


def extract_keywords(text: str) -> list[str]:
    """Brand names, ``"<x> pro"``-style model phrases and spec tokens."""
    keywords: list[str] = []
    keywords.extend(_BRAND_KEYWORD_RE.findall(text))
    keywords.extend(_MODEL_KEYWORD_RE.findall(text))
    keywords.extend(_SPEC_KEYWORD_RE.findall(text))
    return [k.lower() for k in keywords]


def extract_features(
    product: Product,
    canonicalizer: BrandCanonicalizer,
) -> ProductFeatures:
    """Derive the scoring features of *product*.

    A pure function of ``title`` and ``brand``.
    """
    title = product.title or ""
    title_lower = title.lower()
    tokens = tokenize(title)

    return ProductFeatures(
        brand=canonicalizer.normalize(product.brand or ""),
        model=extract_model(title),
        storage=extract_storage(title),
        ram=extract_ram(title),
        color=extract_color(title),
        title_tokens=tuple(tokens),
        bigrams=tuple(generate_ngrams(tokens, 2)),
        trigrams=tuple(generate_ngrams(tokens, 3)),
        keywords=tuple(extract_keywords(title_lower)),
        numbers=tuple(int(n) for n in _DIGITS_RE.findall(title_lower)),
        title_lower=title_lower,
    )
