# src/filters/product_validator.py

"""Product validation: drop unusable listings before matching."""

import logging

from src.config.settings import Settings
from src.models.product import Product

logger = logging.getLogger("dealmatch.filters")


class ProductValidator:
    """Validate products and drop those unfit for matching."""

    @staticmethod
    def validate(
        products: list[Product],
    ) -> tuple[list[Product], int]:
        """Drop products with too-short titles or sub-floor prices.

        Returns the valid products and the count of dropped items.
        """
        valid: list[Product] = []
        dropped = 0

        for product in products:
            if product.is_valid_for_matching():
                valid.append(product)
                continue
            if len(product.title or "") < Settings.MIN_TITLE_LENGTH:
                logger.debug(
                    "Dropped product with short title "
                    "(site=%s, url=%s)",
                    product.site,
                    product.url,
                )
            else:
                logger.debug(
                    "Dropped product below price floor "
                    "(title=%s, site=%s, price=%s)",
                    product.title,
                    product.site,
                    product.numeric_price,
                )
            dropped += 1

        if dropped:
            logger.info(
                "Validation dropped %d invalid products",
                dropped,
            )

        return valid, dropped
