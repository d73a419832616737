"""Listing-page extraction and the per-candidate acceptance gate."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import structlog
from bs4 import BeautifulSoup

from kenyadeals.core.exceptions import ExtractionError
from kenyadeals.schemas.scrape import ProductCategory, ScrapeConfig, ShopConfig
from kenyadeals.scrapers.base import CandidateOutcome, Product
from kenyadeals.scrapers.factory import ExtractorRegistry, create_registry
from kenyadeals.scrapers.utils.normalizer import CategoryClassifier, PriceNormalizer

logger = structlog.get_logger(__name__)

_KEPT_CATEGORIES = frozenset({ProductCategory.PHONE, ProductCategory.LAPTOP})


def acceptance_check(product: Product, config: ScrapeConfig) -> Optional[str]:
    """Decide whether a candidate product is kept.

    Returns:
        None if accepted, otherwise a short skip reason
    """
    if not product.name or not product.name.strip():
        return "missing_name"
    if product.current_price is None:
        if PriceNormalizer.first_number(product.price_text) is not None:
            return "below_floor"
        return "no_price"
    if product.category not in _KEPT_CATEGORIES:
        return "unclassified"
    if product.current_price > config.max_price:
        return "over_max_price"
    return None


@dataclass
class PageResult:
    """Accepted products from one page plus extraction diagnostics."""

    url: str
    products: List[Product] = field(default_factory=list)
    candidates: int = 0
    selector: Optional[str] = None
    skipped: Counter = field(default_factory=Counter)

    @property
    def skipped_total(self) -> int:
        return sum(self.skipped.values())


class PageExtractor:
    """Turns the markup of one listing page into accepted products."""

    def __init__(self, config: ScrapeConfig, registry: Optional[ExtractorRegistry] = None):
        self.config = config
        self.registry = registry or create_registry(
            classifier=CategoryClassifier(config.category_keywords),
            price_floor=config.price_floor,
        )

    def extract_page(self, html: str, shop: ShopConfig, url: str = "") -> PageResult:
        """Extract and gate every product candidate on a page.

        Args:
            html: Raw page markup
            shop: Shop the page belongs to
            url: Page URL, for logging only

        Returns:
            PageResult; empty when no product containers are present
        """
        log = logger.bind(shop=shop.name, url=url)
        result = PageResult(url=url)

        soup = BeautifulSoup(html, "html.parser")
        extractor = self.registry.get(shop.kind)
        selector, elements = extractor.find_containers(soup)

        if not elements:
            log.info("no_product_elements")
            return result

        result.selector = selector
        result.candidates = len(elements)
        log.info("product_elements_found", selector=selector, count=len(elements))

        for index, element in enumerate(elements):
            outcome = self._build_candidate(extractor, element, shop, index, log)
            if outcome.ok:
                result.products.append(outcome.product)
            else:
                result.skipped[outcome.skip_reason] += 1

        log.info(
            "page_extracted",
            accepted=len(result.products),
            skipped=dict(result.skipped),
        )
        return result

    def _build_candidate(self, extractor, element, shop, index, log) -> CandidateOutcome:
        try:
            product = extractor.extract(element, shop)
        except ExtractionError as e:
            log.warning("candidate_extraction_failed", index=index, error=e.message)
            return CandidateOutcome.skipped("extraction_error")
        except Exception as e:
            log.warning("candidate_extraction_failed", index=index, error=f"{type(e).__name__}: {e}")
            return CandidateOutcome.skipped("extraction_error")

        reason = acceptance_check(product, self.config)
        if reason:
            log.debug(
                "candidate_rejected",
                index=index,
                reason=reason,
                name=product.name[:60],
                price=str(product.current_price),
            )
            return CandidateOutcome.skipped(reason, product)
        return CandidateOutcome.accepted(product)


def probe_selectors(html: str, selectors: Iterable[str], samples: int = 3) -> Dict[str, Dict]:
    """Count matches for each selector and keep a few text samples.

    Used when a shop changes its markup and the selector tables need
    updating.
    """
    soup = BeautifulSoup(html, "html.parser")
    report: Dict[str, Dict] = {}
    for selector in selectors:
        elements = soup.select(selector)
        report[selector] = {
            "count": len(elements),
            "samples": [el.get_text(" ", strip=True)[:100] for el in elements[:samples]],
        }
    return report
