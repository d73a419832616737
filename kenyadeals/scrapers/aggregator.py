"""Merge per-shop results into the output artifact."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import structlog

from kenyadeals.schemas.scrape import ProductCategory
from kenyadeals.scrapers.base import Product, isoformat_utc

logger = structlog.get_logger(__name__)


def remove_duplicates(products: Iterable[Product]) -> List[Product]:
    """Drop exact repeats of (name, current_price, shop), keeping the first."""
    seen = set()
    unique: List[Product] = []
    for product in products:
        key = product.identity
        if key in seen:
            continue
        seen.add(key)
        unique.append(product)
    return unique


def sort_by_price(products: Iterable[Product]) -> List[Product]:
    """Cheapest first; ties keep their crawl order."""
    return sorted(products, key=lambda p: p.current_price)


@dataclass
class DealsReport:
    """The JSON artifact: generation time, count and the items."""

    timestamp: datetime
    items: List[Product] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        return len(self.items)

    def count_by_category(self, category: ProductCategory) -> int:
        return sum(1 for item in self.items if item.category == category)

    def shops(self) -> List[str]:
        """Shop names in first-seen order."""
        return list(dict.fromkeys(item.shop for item in self.items))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": isoformat_utc(self.timestamp),
            "totalItems": self.total_items,
            "items": [item.to_dict() for item in self.items],
        }


def build_report(
    products: Iterable[Product], generated_at: Optional[datetime] = None
) -> DealsReport:
    """Deduplicate, sort and wrap products into a DealsReport."""
    products = list(products)
    unique = remove_duplicates(products)
    if len(unique) != len(products):
        logger.info("duplicates_removed", count=len(products) - len(unique))

    return DealsReport(
        timestamp=generated_at or datetime.now(timezone.utc),
        items=sort_by_price(unique),
    )
