"""Per-shop crawl: flash-sale page first, then each category page."""

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from kenyadeals.core.exceptions import KenyaDealsException
from kenyadeals.schemas.scrape import ShopConfig
from kenyadeals.scrapers.base import Product
from kenyadeals.scrapers.page import PageExtractor
from kenyadeals.scrapers.utils.fetcher import PageFetcher

logger = structlog.get_logger(__name__)


@dataclass
class ShopResult:
    """Summary of crawling a single shop."""

    shop: str
    products: List[Product] = field(default_factory=list)
    pages_ok: int = 0
    pages_failed: int = 0
    skipped: Counter = field(default_factory=Counter)
    error: Optional[str] = None


class ShopCrawler:
    """Fetches and extracts a shop's pages strictly in order.

    A failing page is logged and contributes nothing; the remaining pages
    (and other shops) still run.
    """

    def __init__(self, fetcher: PageFetcher, extractor: PageExtractor):
        self.fetcher = fetcher
        self.extractor = extractor

    async def crawl(self, shop: ShopConfig) -> ShopResult:
        """Crawl every configured page of ``shop``.

        Never raises for scrape-time failures; they are recorded on the
        returned ShopResult instead.
        """
        log = logger.bind(shop=shop.name)
        result = ShopResult(shop=shop.name)
        try:
            urls = shop.page_urls()
            log.info("scraping_shop", pages=len(urls))
            for url in urls:
                await self._crawl_page(shop, url, result, log)
        except Exception as e:
            result.error = str(e)
            log.error("shop_scrape_failed", error=str(e), exc_info=True)

        log.info(
            "shop_scraped",
            count=len(result.products),
            pages_ok=result.pages_ok,
            pages_failed=result.pages_failed,
        )
        return result

    async def _crawl_page(self, shop: ShopConfig, url: str, result: ShopResult, log) -> None:
        try:
            html = await self.fetcher.fetch(url)
            page = self.extractor.extract_page(html, shop, url=url)
        except KenyaDealsException as e:
            result.pages_failed += 1
            log.warning("page_scrape_failed", url=url, error=e.message)
            return
        except Exception as e:
            result.pages_failed += 1
            log.warning("page_scrape_failed", url=url, error=f"{type(e).__name__}: {e}")
            return

        result.pages_ok += 1
        result.products.extend(page.products)
        result.skipped.update(page.skipped)
