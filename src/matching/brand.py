# src/matching/brand.py

"""Brand canonicalisation against the static alias table."""

import re
from collections.abc import Mapping
from types import MappingProxyType

from src.config.settings import Settings


def _capitalise(value: str) -> str:
    """First letter upper, the rest lower.

    A first letter whose upper case spans several characters (German
    sharp s) is kept as is so the result stays stable.
    """
    first = value[:1].upper()
    if len(first) != 1:
        first = value[:1]
    return first + value[1:].lower()


class BrandCanonicalizer:
    """Map raw brand strings onto one canonical spelling.

    The alias table (canonical name -> aliases) is injected at
    construction and only ever read afterwards.
    """

    def __init__(
        self,
        aliases: Mapping[str, tuple[str, ...]] | None = None,
    ) -> None:
        table = Settings.BRAND_ALIASES if aliases is None else aliases
        self._aliases: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {
                canonical: tuple(a.lower() for a in names)
                for canonical, names in table.items()
            }
        )

        # Canonical spellings take precedence over any alias.
        lookup: dict[str, str] = {
            canonical.lower(): canonical for canonical in self._aliases
        }
        for canonical, names in self._aliases.items():
            for alias in names:
                lookup.setdefault(alias, canonical)
        self._lookup: Mapping[str, str] = MappingProxyType(lookup)

        self._title_patterns: tuple[tuple[re.Pattern[str], str], ...] = tuple(
            (re.compile(rf"\b{re.escape(alias)}\b", re.IGNORECASE), canonical)
            for canonical, names in self._aliases.items()
            for alias in names
        )

    @property
    def aliases(self) -> Mapping[str, tuple[str, ...]]:
        """The read-only alias table this canonicalizer was built with."""
        return self._aliases

    def normalize(self, raw: str) -> str:
        """Return the canonical brand for *raw*.

        Unknown brands come back with only their first letter
        capitalised.  Idempotent and case-insensitive.
        """
        if not raw:
            return ""
        cleaned = raw.strip()
        canonical = self._lookup.get(cleaned.lower())
        if canonical is not None:
            return canonical
        return _capitalise(cleaned)

    def brands_match(self, brand1: str, brand2: str) -> bool:
        """True when both brands normalise to the same name."""
        if not brand1 or not brand2:
            return False
        return (
            self.normalize(brand1).lower()
            == self.normalize(brand2).lower()
        )

    def extract_from_title(self, title: str) -> str:
        """Find a known brand alias in *title* on word boundaries.

        Falls back to the normalised first word when it has at least
        two letters.
        """
        if not title:
            return ""
        for pattern, canonical in self._title_patterns:
            if pattern.search(title):
                return canonical

        words = title.split()
        if words:
            first = re.sub(r"[^a-zA-Z]", "", words[0])
            if len(first) >= 2:
                return self.normalize(first)
        return ""


_default = BrandCanonicalizer()


def normalize_brand(raw: str) -> str:
    """Normalise *raw* with the process-wide alias table."""
    return _default.normalize(raw)


def brands_match(brand1: str, brand2: str) -> bool:
    """Compare two brands with the process-wide alias table."""
    return _default.brands_match(brand1, brand2)
