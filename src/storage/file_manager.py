# src/storage/file_manager.py

"""Loads product listings from JSON and saves match results to disk."""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.matching.attributes import parse_price
from src.models.match_result import MatchResult
from src.models.product import Availability, Product, ProductAttributes

logger = logging.getLogger("dealmatch.storage")

# camelCase keys accepted alongside the snake_case field names.
_KEY_ALIASES: dict[str, str] = {
    "numericPrice": "numeric_price",
    "productId": "product_id",
}
_ATTRIBUTE_FIELDS: tuple[str, ...] = (
    "model", "storage", "ram", "color", "size", "variant",
)


def _get(record: dict[str, Any], key: str) -> Any:
    if key in record:
        return record[key]
    for camel, snake in _KEY_ALIASES.items():
        if snake == key and camel in record:
            return record[camel]
    return None


def product_from_dict(record: dict[str, Any]) -> Product:
    """Build a ``Product`` from a scraped JSON record.

    Raises ValueError when the record has no title or an unreadable price.
    """
    if not isinstance(record, dict):
        raise ValueError(f"Product record must be an object, got {type(record).__name__}")

    title = str(record.get("title") or "").strip()
    if not title:
        raise ValueError(f"Product record has no title: {record!r}")

    price_text = str(record.get("price") or "")
    raw_numeric = _get(record, "numeric_price")
    if raw_numeric is None:
        numeric_price: float = parse_price(price_text)
    else:
        try:
            numeric_price = float(raw_numeric)
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"Invalid numeric price {raw_numeric!r} for '{title}'"
            ) from exc

    attributes = None
    raw_attrs = record.get("attributes")
    if isinstance(raw_attrs, dict):
        attributes = ProductAttributes(
            **{k: str(raw_attrs.get(k) or "") for k in _ATTRIBUTE_FIELDS}
        )

    try:
        availability = Availability(record.get("availability") or "unknown")
    except ValueError:
        logger.debug(
            "Unknown availability %r for '%s'",
            record.get("availability"),
            title,
        )
        availability = Availability.UNKNOWN

    return Product(
        title=title,
        numeric_price=max(0.0, numeric_price),
        site=str(record.get("site") or ""),
        price=price_text,
        url=str(record.get("url") or ""),
        image=str(record.get("image") or ""),
        product_id=str(_get(record, "product_id") or ""),
        brand=str(record.get("brand") or ""),
        category=str(record.get("category") or ""),
        attributes=attributes,
        availability=availability,
    )


class FileManager:
    """Reads comparison input and writes match results."""

    def __init__(self, results_dir: Path | None = None) -> None:
        self.results_dir: Path = results_dir or Settings.RESULTS_DIR
        self.results_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("FileManager initialised, results_dir=%s", self.results_dir)

    # ── Loading ──────────────────────────────────────────

    @staticmethod
    def _read_json(path: Path) -> Any:
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path} is not valid JSON: {exc}") from exc

    @staticmethod
    def load_products(path: Path) -> list[Product]:
        """Load a JSON array of product records."""
        data = FileManager._read_json(path)
        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a JSON array of products")
        products = [product_from_dict(record) for record in data]
        logger.info("Loaded %d products from %s", len(products), path)
        return products

    @staticmethod
    def _comparison_from_dict(
        data: Any, path: Path
    ) -> tuple[Product, list[Product]]:
        if not isinstance(data, dict) or "source" not in data:
            raise ValueError(
                f"{path} must hold objects with 'source' and 'candidates'"
            )
        candidates_raw = data.get("candidates") or []
        if not isinstance(candidates_raw, list):
            raise ValueError(f"'candidates' in {path} must be an array")

        source = product_from_dict(data["source"])
        candidates = [product_from_dict(record) for record in candidates_raw]
        return source, candidates

    @staticmethod
    def load_comparison_input(path: Path) -> tuple[Product, list[Product]]:
        """Load a ``{"source": {...}, "candidates": [...]}`` document."""
        source, candidates = FileManager._comparison_from_dict(
            FileManager._read_json(path), path
        )
        logger.info(
            "Loaded source '%s' and %d candidates from %s",
            source.title,
            len(candidates),
            path,
        )
        return source, candidates

    @staticmethod
    def load_comparisons(path: Path) -> list[tuple[Product, list[Product]]]:
        """Load one comparison document or a JSON array of them."""
        data = FileManager._read_json(path)
        documents = data if isinstance(data, list) else [data]
        comparisons = [
            FileManager._comparison_from_dict(doc, path) for doc in documents
        ]
        logger.info("Loaded %d comparisons from %s", len(comparisons), path)
        return comparisons

    # ── Saving ───────────────────────────────────────────

    def _timestamped_path(self, prefix: str, source: Product, suffix: str) -> Path:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        slug = "_".join(source.title.lower().split()[:5]) or "product"
        slug = "".join(ch for ch in slug if ch.isalnum() or ch == "_")
        return self.results_dir / f"{prefix}_{slug}_{timestamp}.{suffix}"

    def save_matches(
        self, source: Product, matches: list[MatchResult]
    ) -> Path:
        """Save the source and its matches to a timestamped JSON file."""
        filepath = self._timestamped_path("matches", source, "json")

        data = {
            "source": {
                "site": source.site,
                "title": source.title,
                "price": source.price,
                "numericPrice": source.numeric_price,
                "url": source.url,
                "brand": source.brand,
                "category": source.category,
            },
            "matches": [m.to_dict() for m in matches],
        }

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        logger.info(
            "Saved %d matches for '%s' to %s",
            len(matches),
            source.title,
            filepath,
        )
        return filepath

    def export_csv(
        self, source: Product, matches: list[MatchResult]
    ) -> Path:
        """Export matches to a CSV file sorted by price."""
        filepath = self._timestamped_path("export", source, "csv")

        sorted_matches = sorted(
            matches,
            key=lambda m: m.numeric_price if m.numeric_price > 0 else float("inf"),
        )

        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(
                ["Site", "Title", "Price", "Confidence", "Level", "Reason", "URL"]
            )
            for m in sorted_matches:
                writer.writerow(
                    [
                        m.site,
                        m.title,
                        m.numeric_price,
                        m.confidence,
                        m.match_level.value,
                        m.match_reason,
                        m.url,
                    ]
                )

        logger.info(
            "Exported %d matches for '%s' to %s",
            len(matches),
            source.title,
            filepath,
        )
        return filepath
