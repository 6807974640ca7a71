# src/filters/query_builder.py

"""Search query generation for looking a product up on other sites.

Queries are ordered most specific first: explicit identifiers, then
brand/model/spec combinations, then loose keyword fallbacks.
"""

import logging
import re

from src.matching.attributes import (
    extract_brand,
    extract_model,
    extract_ram,
    extract_storage,
)

logger = logging.getLogger("dealmatch.filters")

MIN_QUERY_LENGTH = 3
MAX_QUERY_LENGTH = 60

# Case-sensitive on purpose: part numbers are printed in capitals.
_PRODUCT_NUMBER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b([A-Z]{2}\d{2,3}[A-Z0-9]{2}/[A-Z])\b"),  # Apple MQ173HN/A
    re.compile(r"\bSM-([A-Z]\d{3,4}[A-Z]?)\b"),              # Samsung SM-G991B
    re.compile(r"\bSKU[-:\s]?([A-Z0-9]{5,10})\b", re.IGNORECASE),
    re.compile(r"\b([A-Z]{2,4}-?\d{4,6}[A-Z0-9]?)\b"),
)
_ASIN_RE = re.compile(r"/dp/([A-Z0-9]{10})|asin=([A-Z0-9]{10})", re.IGNORECASE)
_SKU_ID_RE = re.compile(r"^[A-Z0-9]{6,15}$", re.IGNORECASE)

_FILLER_WORDS: frozenset[str] = frozenset(
    {"with", "from", "for", "the", "and", "that", "this"}
)


def clean_title(title: str) -> str:
    """Drop bracketed notes, trailing ``: ...`` and ``| ...`` and dashes."""
    cleaned = re.sub(r"\([^)]*\)", "", title)
    cleaned = re.sub(r":[^:]*$", "", cleaned)
    cleaned = re.sub(r"\|.*", "", cleaned)
    cleaned = re.sub(r"[-–—]", " ", cleaned)
    return cleaned.strip()


def extract_product_number(title: str) -> str:
    """First part/model/SKU number printed in the title, or ``""``."""
    for pattern in _PRODUCT_NUMBER_PATTERNS:
        match = pattern.search(title or "")
        if match:
            return match.group(1) or match.group(0)
    return ""


def extract_asin(url: str) -> str:
    """Amazon ASIN embedded in a product URL, or ``""``."""
    match = _ASIN_RE.search(url or "")
    if not match:
        return ""
    return match.group(1) or match.group(2)


def _identifier_queries(
    title: str,
    brand: str,
    product_number: str,
    product_id: str,
    url: str,
) -> list[str]:
    if product_number:
        queries = [product_number]
        if brand:
            queries.append(f"{brand} {product_number}".strip())
        return queries

    queries: list[str] = []
    extracted = extract_product_number(title)
    if extracted:
        queries.append(extracted)
        if brand:
            queries.append(f"{brand} {extracted}".strip())

    asin = extract_asin(url)
    if asin:
        queries.append(asin)

    if product_id and _SKU_ID_RE.match(product_id):
        queries.append(product_id)
        if brand:
            queries.append(f"{brand} {product_id}".strip())

    return queries


def generate_search_queries(
    title: str,
    brand: str = "",
    product_number: str = "",
    product_id: str = "",
    url: str = "",
) -> list[str]:
    """Build ordered, de-duplicated search queries for a product.

    Only queries between ``MIN_QUERY_LENGTH`` and ``MAX_QUERY_LENGTH``
    characters are returned.
    """
    queries = _identifier_queries(title, brand, product_number, product_id, url)

    cleaned = clean_title(title)
    model = extract_model(title)
    storage = extract_storage(title)
    ram = extract_ram(title)
    detected_brand = brand or extract_brand(title)

    if detected_brand and model and storage:
        queries.append(f"{detected_brand} {model} {storage}")
    if detected_brand and model and ram:
        queries.append(f"{detected_brand} {model} {ram}")
    if detected_brand and model:
        queries.append(f"{detected_brand} {model}")
    if model and storage:
        queries.append(f"{model} {storage}")
    if model:
        queries.append(model)

    if detected_brand:
        key_words = [
            w for w in cleaned.split()
            if len(w) > 3 and w.lower() not in _FILLER_WORDS
        ][:3]
        if key_words:
            queries.append(f"{detected_brand} {' '.join(key_words)}")

    short_title = " ".join([w for w in cleaned.split() if len(w) > 2][:5])
    if short_title:
        queries.append(short_title)

    unique = list(dict.fromkeys(q.strip() for q in queries))
    result = [
        q for q in unique
        if MIN_QUERY_LENGTH <= len(q) <= MAX_QUERY_LENGTH
    ]
    logger.debug("Generated %d queries for '%s'", len(result), title)
    return result


def generate_search_query(title: str, brand: str = "") -> str:
    """Best single query for *title*; the first 50 characters as last resort."""
    queries = generate_search_queries(title, brand)
    return queries[0] if queries else title[:50]
