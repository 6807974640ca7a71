# src/models/features.py

"""Derived matching features for a single product."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProductFeatures:
    """Everything the scorers need from one product, computed once.

    String attributes are ``""`` when the title did not yield them;
    callers treat that as unknown, not zero.
    """

    brand: str
    model: str
    storage: str
    ram: str
    color: str
    title_tokens: tuple[str, ...]
    bigrams: tuple[str, ...]
    trigrams: tuple[str, ...]
    keywords: tuple[str, ...]
    numbers: tuple[int, ...]
    title_lower: str = ""
