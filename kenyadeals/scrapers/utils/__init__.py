"""Scraper utilities for fetching pages and normalizing product data."""

from .normalizer import (
    PriceNormalizer,
    CategoryClassifier,
    calculate_discount,
    normalize_discount_badge,
    absolute_url,
)
from .retry import fetch_retrying, RETRYABLE_ERRORS
from .fetcher import PageFetcher


__all__ = [
    # Normalization
    "PriceNormalizer",
    "CategoryClassifier",
    "calculate_discount",
    "normalize_discount_badge",
    "absolute_url",
    # Retry
    "fetch_retrying",
    "RETRYABLE_ERRORS",
    # Fetching
    "PageFetcher",
]
