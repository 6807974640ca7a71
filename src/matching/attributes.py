# src/matching/attributes.py

"""Regex-driven attribute extraction from free-text product titles.

Every extractor is total: a title that yields nothing for a field
returns ``""`` (or ``0`` for prices), never raises.
"""

import re

from src.matching.similarity import round_half_up

# ── Model patterns ───────────────────────────────────────
#
# Evaluated top to bottom, first match wins.  Brand families sit above
# the generic alphanumeric code so a loose pattern can never shadow a
# specific one.  The second element is the category the family implies.

MODEL_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    # Phones
    (
        re.compile(
            r"(iphone\s*\d+[a-z]*(?:\s+pro)?(?:\s+max)?(?:\s+plus)?(?:\s+mini)?)",
            re.IGNORECASE,
        ),
        "phone",
    ),
    (
        re.compile(r"(galaxy\s+[a-z]\d+\s*(?:pro|plus|ultra)?)", re.IGNORECASE),
        "phone",
    ),
    (
        re.compile(
            r"(oneplus\s+\d+[a-z]*(?:\s+pro)?(?:\s+r)?(?:\s+t)?)", re.IGNORECASE
        ),
        "phone",
    ),
    (
        re.compile(r"(pixel\s+\d+[a-z]*(?:\s+pro)?(?:\s+xl)?)", re.IGNORECASE),
        "phone",
    ),
    (
        re.compile(r"((?:redmi|mi)\s+\d+[a-z]*(?:\s+pro)?)", re.IGNORECASE),
        "phone",
    ),
    # Laptops
    (
        re.compile(
            r"(nitro\s+(?:v\s+)?\d+|aspire\s+\d+|predator\s+\w+\s+\d+|swift\s+\d+)",
            re.IGNORECASE,
        ),
        "laptop",
    ),
    (
        re.compile(
            r"(tuf\s+[a-z]\d+|rog\s+\w+\s+[a-z]?\d+|vivobook\s+\d+|zenbook\s+\d+)",
            re.IGNORECASE,
        ),
        "laptop",
    ),
    (
        re.compile(
            r"(pavilion\s+\d+|omen\s+\d+|victus\s+\d+|envy\s+\d+)", re.IGNORECASE
        ),
        "laptop",
    ),
    (
        re.compile(
            r"(xps\s+\d+|g\d+|inspiron\s+\d+|vostro\s+\d+|latitude\s+\d+)",
            re.IGNORECASE,
        ),
        "laptop",
    ),
    (
        re.compile(
            r"(loq\s+\d+|ideapad\s+(?:gaming\s+)?\d+|thinkpad\s+[a-z]\d+|legion\s+\d+)",
            re.IGNORECASE,
        ),
        "laptop",
    ),
    (
        re.compile(
            r"(gf\d+|katana\s+\d+|bravo\s+\d+|pulse\s+\d+)", re.IGNORECASE
        ),
        "laptop",
    ),
    # Generic alphanumeric model code (fallback)
    (
        re.compile(r"\b([a-z]{1,3}\d{2,4}[a-z]?)\b", re.IGNORECASE),
        "unknown",
    ),
)

_STORAGE_RE = re.compile(r"\b(\d+)\s*(gb|tb)\b", re.IGNORECASE)
_RAM_RE = re.compile(r"\b(\d+)\s*gb\s+ram\b", re.IGNORECASE)

COLOR_VOCABULARY: tuple[str, ...] = (
    "black", "white", "blue", "red", "green", "yellow", "pink", "purple",
    "gray", "grey", "silver", "gold", "rose", "titanium", "midnight",
    "starlight", "navy", "maroon", "beige", "brown", "orange",
)

# Brands recognised by substring when no brand field was scraped.
COMMON_BRANDS: tuple[str, ...] = (
    "Apple", "Samsung", "Xiaomi", "OnePlus", "Realme", "Vivo", "Oppo", "Nokia",
    "iPhone", "iPad", "MacBook", "Galaxy", "Pixel", "Mi", "Redmi",
    "Nike", "Adidas", "Puma", "Reebok", "Levi", "Zara", "H&M", "Mango",
    "Lakme", "Maybelline", "L'Oreal", "MAC", "Revlon", "Nykaa",
    "Sony", "LG", "Philips", "Panasonic", "Whirlpool", "Bosch", "IFB",
    "Dell", "HP", "Lenovo", "Asus", "Acer", "MSI",
    "Boat", "JBL", "Bose", "Sennheiser", "Canon", "Nikon",
)

_APPLE_LINE_RE = re.compile(r"(iphone|ipad|macbook|airpods|apple)", re.IGNORECASE)


def match_model(title: str) -> tuple[str, str]:
    """Return ``(model, category_hint)`` for the first matching pattern."""
    for pattern, hint in MODEL_PATTERNS:
        match = pattern.search(title or "")
        if match:
            return match.group(1).strip(), hint
    return "", "unknown"


def extract_model(title: str) -> str:
    """Extract the model designation, e.g. ``"iPhone 15 Pro Max"``."""
    model, _hint = match_model(title)
    return model


def extract_storage(title: str) -> str:
    """Extract the first ``<n> GB|TB`` capacity, normalised to ``"256GB"``."""
    match = _STORAGE_RE.search(title or "")
    if not match:
        return ""
    return f"{match.group(1)}{match.group(2).upper()}"


def extract_ram(title: str) -> str:
    """Extract an ``<n> GB RAM`` capacity, normalised to ``"8GB"``."""
    match = _RAM_RE.search(title or "")
    return f"{match.group(1)}GB" if match else ""


def extract_color(title: str) -> str:
    """Return the first vocabulary colour found in the title, capitalised."""
    title_lower = (title or "").lower()
    for color in COLOR_VOCABULARY:
        if color in title_lower:
            return color[0].upper() + color[1:]
    return ""


def extract_brand(title: str) -> str:
    """Guess a brand from the title alone.

    Apple product lines map to ``"Apple"``; otherwise the first known
    brand contained in the title; otherwise the first word.
    """
    if not title:
        return ""
    if _APPLE_LINE_RE.search(title):
        return "Apple"

    title_lower = title.lower()
    for brand in COMMON_BRANDS:
        if brand.lower() in title_lower:
            return brand

    words = title.split()
    return words[0] if words else ""


def leading_number(value: str) -> int | None:
    """Parse the leading digit run of a capacity string like ``"256GB"``."""
    match = re.match(r"\d+", value or "")
    return int(match.group(0)) if match else None


def parse_price(price_text: str) -> int:
    """Turn a display price such as ``"₹1,39,900"`` into an integer."""
    if not price_text:
        return 0
    cleaned = re.sub(r"[^\d.]", "", price_text).strip(".")
    try:
        return round_half_up(float(cleaned))
    except ValueError:
        return 0
