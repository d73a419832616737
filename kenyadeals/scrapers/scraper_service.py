"""Scraper orchestration service.

This service is the pipeline entry point: it crawls every configured shop
in order, aggregates the products and writes the JSON artifact and the HTML
report. Each run produces a full replacement snapshot.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import structlog

from kenyadeals.config import Settings, get_settings
from kenyadeals.report.html import write_html_report
from kenyadeals.schemas.scrape import ScrapeConfig
from kenyadeals.scrapers.aggregator import DealsReport, build_report
from kenyadeals.scrapers.crawler import ShopCrawler, ShopResult
from kenyadeals.scrapers.page import PageExtractor
from kenyadeals.scrapers.utils.fetcher import PageFetcher

logger = structlog.get_logger(__name__)


@dataclass
class RunSummary:
    """Outcome of one pipeline run."""

    report: DealsReport
    shop_results: List[ShopResult] = field(default_factory=list)
    json_path: Optional[Path] = None
    html_path: Optional[Path] = None

    @property
    def pages_failed(self) -> int:
        return sum(r.pages_failed for r in self.shop_results)


def write_json_report(report: DealsReport, path: Path) -> Path:
    """Write the JSON artifact, replacing any previous file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    logger.info("json_report_written", path=str(path), items=report.total_items)
    return path


class ScraperService:
    """Runs the scrape pipeline for one ScrapeConfig."""

    def __init__(
        self,
        config: ScrapeConfig,
        fetcher: Optional[PageFetcher] = None,
        app_settings: Optional[Settings] = None,
    ):
        """Initialize scraper service.

        Args:
            config: Immutable per-run configuration
            fetcher: Page fetcher; one is built from settings when omitted
            app_settings: Settings for fetcher defaults and output paths
        """
        self.config = config
        self.settings = app_settings or get_settings()
        self._fetcher = fetcher
        self.extractor = PageExtractor(config)
        self.logger = logger.bind(service="scraper_service")

    def _build_fetcher(self) -> PageFetcher:
        return PageFetcher(
            user_agent=self.settings.USER_AGENT,
            timeout=self.settings.HTTP_TIMEOUT_SECONDS,
            attempts=self.settings.FETCH_ATTEMPTS,
        )

    async def scrape(self) -> RunSummary:
        """Crawl all shops sequentially and aggregate the results.

        Does not write any files.
        """
        self.logger.info(
            "scrape_started",
            shops=[shop.name for shop in self.config.shops],
            max_price=str(self.config.max_price),
        )

        fetcher = self._fetcher or self._build_fetcher()
        shop_results: List[ShopResult] = []
        try:
            crawler = ShopCrawler(fetcher, self.extractor)
            for shop in self.config.shops:
                shop_results.append(await crawler.crawl(shop))
        finally:
            if self._fetcher is None:
                await fetcher.close()

        products = [p for result in shop_results for p in result.products]
        report = build_report(products, generated_at=datetime.now(timezone.utc))

        self.logger.info(
            "scrape_complete",
            total_items=report.total_items,
            shops_failed=sum(1 for r in shop_results if r.error),
            pages_failed=sum(r.pages_failed for r in shop_results),
        )
        return RunSummary(report=report, shop_results=shop_results)

    async def run(
        self,
        output_dir: Optional[Path] = None,
        write_html: bool = True,
    ) -> RunSummary:
        """Scrape, then write the JSON artifact and (optionally) the HTML report.

        Args:
            output_dir: Directory for the artifacts; defaults to settings.OUTPUT_DIR
            write_html: Also render the HTML report
        """
        summary = await self.scrape()

        directory = Path(output_dir) if output_dir else Path(self.settings.OUTPUT_DIR)
        summary.json_path = write_json_report(
            summary.report, directory / self.settings.OUTPUT_JSON
        )
        if write_html:
            summary.html_path = write_html_report(
                summary.report, self.config.max_price, directory / self.settings.OUTPUT_HTML
            )
        return summary
