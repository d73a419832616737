"""Scraper pipeline for Kenyan e-commerce listing pages.

This package provides:
- The Product record and the selector-driven extractor base class
- Shop-specific extractors and a registry keyed by ShopKind
- Page extraction with a per-candidate acceptance gate
- Shop crawling and aggregation (orchestration lives in scraper_service)
"""

from .base import (
    BaseExtractor,
    CandidateOutcome,
    Product,
    UNKNOWN_PRODUCT,
)
from .factory import ExtractorRegistry, create_registry
from .page import PageExtractor, PageResult, acceptance_check
from .crawler import ShopCrawler, ShopResult
from .aggregator import DealsReport, build_report, remove_duplicates, sort_by_price

__all__ = [
    # Records
    "Product",
    "CandidateOutcome",
    "UNKNOWN_PRODUCT",
    # Extraction
    "BaseExtractor",
    "ExtractorRegistry",
    "create_registry",
    "PageExtractor",
    "PageResult",
    "acceptance_check",
    # Crawling
    "ShopCrawler",
    "ShopResult",
    # Aggregation
    "DealsReport",
    "build_report",
    "remove_duplicates",
    "sort_by_price",
]
