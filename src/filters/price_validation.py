# src/filters/price_validation.py

"""Price sanity checks and savings arithmetic for compared listings."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from src.config.settings import Settings
from src.matching.similarity import round_half_up

PLACEHOLDER_PRICES: frozenset[float] = frozenset(
    {1, 99, 100, 999, 1000, 9999, 10000, 99999}
)

MAX_CATEGORY_PRICES: Mapping[str, float] = MappingProxyType(
    {
        "fashion": 50_000,
        "electronics": 500_000,
        "beauty": 20_000,
        "home": 200_000,
        "default": 1_000_000,
    }
)


@dataclass(frozen=True)
class PriceValidation:
    """Outcome of comparing one price against a reference price."""

    is_valid: bool
    is_suspicious: bool
    confidence: float
    reason: str = ""


@dataclass(frozen=True)
class PriceDiff:
    """Absolute and relative difference between two prices."""

    diff: float
    percent: int
    is_cheaper: bool


def validate_price(
    original: float,
    compared: float,
    low: float = 0.3,
    high: float = 2.0,
) -> PriceValidation:
    """Flag *compared* when it sits outside ``[low, high]`` x *original*.

    Confidence drops towards 0.5 as the ratio moves away from 1.
    """
    if compared <= 0:
        return PriceValidation(
            is_valid=False,
            is_suspicious=True,
            confidence=0.0,
            reason="Invalid price (zero or negative)",
        )

    if original <= 0:
        return PriceValidation(
            is_valid=True, is_suspicious=False, confidence=0.5
        )

    ratio = compared / original
    if ratio < low:
        return PriceValidation(
            is_valid=True,
            is_suspicious=True,
            confidence=0.3,
            reason=(
                f"Suspiciously cheap ({round_half_up(ratio * 100)}% "
                "of original price)"
            ),
        )
    if ratio > high:
        return PriceValidation(
            is_valid=True,
            is_suspicious=True,
            confidence=0.4,
            reason=(
                f"Suspiciously expensive ({round_half_up(ratio * 100)}% "
                "of original price)"
            ),
        )

    return PriceValidation(
        is_valid=True,
        is_suspicious=False,
        confidence=max(0.5, 1 - abs(ratio - 1)),
    )


def is_price_placeholder(price: float) -> bool:
    """True for round filler values such as 99 or 9999."""
    return price in PLACEHOLDER_PRICES


def is_reasonable_price(price: float, category: str = "") -> bool:
    """Price is above the validation floor and below the category ceiling."""
    if price < Settings.MIN_VALID_PRICE:
        return False
    ceiling = MAX_CATEGORY_PRICES.get(
        category or "default", MAX_CATEGORY_PRICES["default"]
    )
    return price <= ceiling


def calculate_price_diff(original: float, compare: float) -> PriceDiff:
    """Difference of *compare* relative to *original*.

    ``percent`` is 0 when *original* is not positive.
    """
    diff = original - compare
    percent = (
        abs(round_half_up(diff / original * 100)) if original > 0 else 0
    )
    return PriceDiff(diff=abs(diff), percent=percent, is_cheaper=diff > 0)


def calculate_price_confidence(original: float, compared: float) -> float:
    """0..1 confidence that *compared* is a genuine price for the product."""
    validation = validate_price(original, compared)
    if not validation.is_valid:
        return 0.0
    if validation.is_suspicious or original <= 0:
        return validation.confidence

    ratio = compared / original
    if 0.9 <= ratio <= 1.1:
        return min(1.0, validation.confidence + 0.2)
    return validation.confidence
