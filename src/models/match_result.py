# src/models/match_result.py

"""Match result models shared by the matchers and the orchestrator."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from src.models.product import Product


class MatchLevel(Enum):
    """How a candidate was matched, strongest first."""

    EXACT_ID = "EXACT_ID"
    EXACT = "EXACT"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    SIMILAR = "SIMILAR"


@dataclass(frozen=True)
class ScoringBreakdown:
    """Per-pair sub-scores of the weighted matcher.

    ``total`` is the sum of the six sub-scores clamped to ``[0, 100]``.
    """

    brand: float
    model: float
    specs: float
    title: float
    category: float
    price: float
    total: float

    @classmethod
    def from_scores(
        cls,
        brand: float,
        model: float,
        specs: float,
        title: float,
        category: float,
        price: float,
    ) -> "ScoringBreakdown":
        """Build a breakdown, computing the clamped total."""
        raw = brand + model + specs + title + category + price
        return cls(
            brand=brand,
            model=model,
            specs=specs,
            title=title,
            category=category,
            price=price,
            total=max(0.0, min(100.0, raw)),
        )


@dataclass(frozen=True)
class MatchResult:
    """A candidate product annotated with match confidence and reasoning."""

    product: Product
    confidence: int
    match_level: MatchLevel
    match_badge: str
    match_reason: str
    similarity: float | None = None
    scoring: ScoringBreakdown | None = None

    @property
    def site(self) -> str:
        return self.product.site

    @property
    def title(self) -> str:
        return self.product.title

    @property
    def brand(self) -> str:
        return self.product.brand

    @property
    def numeric_price(self) -> float:
        return self.product.numeric_price

    @property
    def url(self) -> str:
        return self.product.url

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase shape the display layer consumes."""
        p = self.product
        data: dict[str, Any] = {
            "site": p.site,
            "title": p.title,
            "price": p.price,
            "numericPrice": p.numeric_price,
            "url": p.url,
            "image": p.image,
            "productId": p.product_id,
            "brand": p.brand,
            "category": p.category,
            "availability": p.availability.value,
            "confidence": self.confidence,
            "matchLevel": self.match_level.value,
            "matchBadge": self.match_badge,
            "matchReason": self.match_reason,
        }
        if self.similarity is not None:
            data["similarity"] = round(self.similarity, 4)
        if self.scoring is not None:
            data["scoring"] = asdict(self.scoring)
        return data


@dataclass
class ComparisonResult:
    """Container for one source product compared against all candidates."""

    source: Product
    matches: list[MatchResult] = field(
        default_factory=lambda: list[MatchResult]()
    )
    strategy: str = "none"
    candidates_total: int = 0
    excluded_count: int = 0
    candidates_after_dedup: int = 0
    sites_searched: int = 0
    best_price: MatchResult | None = None
    savings: float = 0.0
    savings_percent: int = 0
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )
