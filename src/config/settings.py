# src/config/settings.py

"""Central configuration for the dealmatch engine."""

import os
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from dotenv import load_dotenv

from src.config.brand_aliases import BRAND_ALIASES

load_dotenv()


class Settings:
    """Central configuration for the dealmatch engine."""

    # --- Validation ---
    MIN_VALID_PRICE: float = 10.0       # Cheaper listings are noise
    MIN_TITLE_LENGTH: int = 5           # Shorter titles are unusable

    # --- Primary (weighted) matcher ---
    MIN_CONFIDENCE: int = 70            # Score floor for a match
    MAX_RESULTS: int = 8                # Top-N returned
    EXACT_THRESHOLD: int = 90
    HIGH_THRESHOLD: int = 80
    WEIGHTS: Mapping[str, int] = MappingProxyType(
        {
            "brand": 25,
            "model": 30,
            "specs": 20,
            "title": 15,
            "category": 10,
        }
    )

    # --- Fallback (level) matcher ---
    FALLBACK_MIN_CONFIDENCE: int = 25
    FALLBACK_MAX_RESULTS: int = 20
    FALLBACK_EARLY_EXIT: int = 5        # Skip levels 3/4 at this many
    FUZZY_LEVEL_CUTOFF: int = 3         # Level 4 only below this many
    PRICE_BOOST_RANGE: tuple[float, float] = (0.7, 1.3)

    # --- Similar-product finder ---
    SIMILAR_MIN_CONFIDENCE: int = 30
    SIMILAR_MAX_RESULTS: int = 15

    # --- Brands ---
    BRAND_ALIASES: Mapping[str, tuple[str, ...]] = BRAND_ALIASES

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    RESULTS_DIR: Path = Path(
        os.getenv("DEALMATCH_RESULTS_DIR", str(BASE_DIR / "results"))
    )
    LOGS_DIR: Path = Path(
        os.getenv("DEALMATCH_LOGS_DIR", str(BASE_DIR / "logs"))
    )
    CONSOLE_LOG_LEVEL: str = os.getenv(
        "DEALMATCH_CONSOLE_LOG_LEVEL", "WARNING"
    ).upper()

    # --- Sites (registry of known listing sources) ---
    AVAILABLE_SITES: list[dict[str, str]] = [
        {"id": "amazon", "label": "Amazon"},
        {"id": "flipkart", "label": "Flipkart"},
        {"id": "myntra", "label": "Myntra"},
        {"id": "snapdeal", "label": "Snapdeal"},
        {"id": "tatacliq", "label": "Tata CLiQ"},
        {"id": "ajio", "label": "Ajio"},
        {"id": "nykaa", "label": "Nykaa"},
        {"id": "croma", "label": "Croma"},
        {"id": "vijaysales", "label": "Vijay Sales"},
    ]
