# src/models/product.py

"""Product data model for inter-module data flow."""

from dataclasses import dataclass
from enum import Enum

from src.config.settings import Settings


class Availability(Enum):
    """Stock status reported by the listing site."""

    IN_STOCK = "in-stock"
    OUT_OF_STOCK = "out-of-stock"
    LIMITED_STOCK = "limited-stock"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ProductAttributes:
    """Structured attributes a scraper may have captured alongside the title."""

    model: str = ""
    storage: str = ""
    ram: str = ""
    color: str = ""
    size: str = ""
    variant: str = ""


@dataclass(frozen=True)
class Product:
    """Represents a single product listing on one site."""

    title: str
    numeric_price: float
    site: str = ""
    price: str = ""
    url: str = ""
    image: str = ""
    product_id: str = ""
    brand: str = ""
    category: str = ""
    attributes: ProductAttributes | None = None
    availability: Availability = Availability.UNKNOWN

    def is_valid_for_matching(self) -> bool:
        """Return True when the listing clears the price and title floors."""
        return (
            self.numeric_price >= Settings.MIN_VALID_PRICE
            and len(self.title or "") >= Settings.MIN_TITLE_LENGTH
        )
