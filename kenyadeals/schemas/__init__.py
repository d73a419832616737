"""Pydantic schemas for the scrape configuration."""

from kenyadeals.schemas.scrape import (
    DEFAULT_MAX_PRICE,
    DEFAULT_PRICE_FLOOR,
    DEFAULT_SHOPS,
    CategoryKeywords,
    ProductCategory,
    ScrapeConfig,
    ShopConfig,
    ShopKind,
)

__all__ = [
    # Enums
    "ProductCategory",
    "ShopKind",
    # Config models
    "ShopConfig",
    "CategoryKeywords",
    "ScrapeConfig",
    # Defaults
    "DEFAULT_MAX_PRICE",
    "DEFAULT_PRICE_FLOOR",
    "DEFAULT_SHOPS",
]
