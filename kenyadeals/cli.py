"""Command-line runner for the scraper.

Usage:
    python -m kenyadeals run
    python -m kenyadeals run --shop jumia --max-price 8000 --open
    python -m kenyadeals probe https://www.jumia.co.ke/mlp-flash-sales/
    python -m kenyadeals watch --interval-minutes 180
"""

import argparse
import asyncio
import sys
import webbrowser
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

import structlog

from kenyadeals.config import Settings, load_settings
from kenyadeals.core.exceptions import ConfigError, FetchError
from kenyadeals.core.logging import configure_logging
from kenyadeals.schemas.scrape import ScrapeConfig
from kenyadeals.scrapers.base import GENERIC_CONTAINER_SELECTORS
from kenyadeals.scrapers.page import probe_selectors
from kenyadeals.scrapers.scheduler import ScraperScheduler
from kenyadeals.scrapers.scraper_service import RunSummary, ScraperService
from kenyadeals.scrapers.utils.fetcher import PageFetcher

log = structlog.get_logger("kenyadeals.cli")

PROBE_PRICE_SELECTORS = (".prc", ".price", ".cost", "[class*='price']", "[class*='prc']")


def _decimal_arg(value: str) -> Decimal:
    try:
        parsed = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be positive")
    return parsed


def _format_price(price: Decimal) -> str:
    return f"KES {price:,.0f}"


def _build_config(settings: Settings, args: argparse.Namespace) -> ScrapeConfig:
    config = settings.build_scrape_config(max_price=getattr(args, "max_price", None))
    shops = getattr(args, "shop", None)
    if shops:
        config = config.with_shops(shops)
        if not config.shops:
            raise ConfigError("--shop", f"no configured shop matches {shops}")
    return config


def print_summary(summary: RunSummary, max_price: Decimal) -> None:
    """Print the deals found in a run."""
    report = summary.report
    print(f"\n{'='*70}")
    print(f"  Deals under {_format_price(max_price)}")
    print(f"{'='*70}\n")

    if not report.items:
        print("No deals found matching criteria.\n")

    for i, item in enumerate(report.items, 1):
        print(f"[{i}] {item.name}")
        print(f"    Category: {item.category.value}")
        print(f"    Price: {_format_price(item.current_price)}")
        if item.original_price > item.current_price:
            print(f"    Original: {_format_price(item.original_price)}")
        if item.discount:
            print(f"    Discount: {item.discount} off")
        print(f"    Shop: {item.shop}")
        if item.url:
            print(f"    URL: {item.url}")
        print()

    print(f"{'='*70}")
    print("  Summary")
    print(f"{'='*70}")
    for result in summary.shop_results:
        status = f"error: {result.error}" if result.error else "ok"
        print(
            f"  {result.shop}: {len(result.products)} accepted, "
            f"{result.pages_ok} pages ok, {result.pages_failed} failed ({status})"
        )
    print(f"  Total unique items: {report.total_items}")
    if summary.json_path:
        print(f"  JSON: {summary.json_path}")
    if summary.html_path:
        print(f"  HTML: {summary.html_path}")
    print(f"{'='*70}\n")


async def run_command(settings: Settings, args: argparse.Namespace) -> int:
    config = _build_config(settings, args)
    service = ScraperService(config, app_settings=settings)
    summary = await service.run(
        output_dir=Path(args.output_dir) if args.output_dir else None,
        write_html=not args.no_html,
    )
    print_summary(summary, config.max_price)

    if args.open and summary.html_path:
        webbrowser.open(summary.html_path.resolve().as_uri())
    return 0


async def probe_command(settings: Settings, args: argparse.Namespace) -> int:
    selectors: List[str] = args.selector or [*GENERIC_CONTAINER_SELECTORS, *PROBE_PRICE_SELECTORS]
    async with PageFetcher(
        user_agent=settings.USER_AGENT,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        attempts=settings.FETCH_ATTEMPTS,
    ) as fetcher:
        html = await fetcher.fetch(args.url)

    if args.save:
        Path(args.save).write_text(html, encoding="utf-8")
        print(f"Saved page markup to {args.save}")

    report = probe_selectors(html, selectors, samples=args.samples)
    print(f"\nSelector matches for {args.url}:\n")
    for selector, info in report.items():
        print(f'  "{selector}": {info["count"]} elements')
        for sample in info["samples"]:
            print(f"      - {sample}")
    print()
    return 0


async def watch_command(settings: Settings, args: argparse.Namespace) -> int:
    # Fail fast on a broken configuration before scheduling anything
    _build_config(settings, args)

    scheduler = ScraperScheduler(
        config_factory=lambda: _build_config(settings, args),
        interval_minutes=args.interval_minutes or settings.SCRAPE_INTERVAL_MINUTES,
        output_dir=Path(args.output_dir) if args.output_dir else None,
        write_html=not args.no_html,
        service_factory=lambda config: ScraperService(config, app_settings=settings),
    )
    await scheduler.serve_forever()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kenyadeals",
        description="Scrape Kenyan shops for phone and laptop deals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL (e.g. DEBUG)")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_run_options(p: argparse.ArgumentParser) -> None:
        p.add_argument("--max-price", type=_decimal_arg, help="Price ceiling in KES")
        p.add_argument(
            "--shop",
            action="append",
            help="Only scrape shops whose name contains this text (repeatable)",
        )
        p.add_argument("--output-dir", help="Directory for the JSON and HTML output")
        p.add_argument("--no-html", action="store_true", help="Skip the HTML report")

    run_p = sub.add_parser("run", help="Scrape once and write the reports")
    add_run_options(run_p)
    run_p.add_argument("--open", action="store_true", help="Open the HTML report afterwards")

    probe_p = sub.add_parser("probe", help="Count selector matches on one page")
    probe_p.add_argument("url")
    probe_p.add_argument("--selector", action="append", help="CSS selector to test (repeatable)")
    probe_p.add_argument("--samples", type=int, default=3, help="Sample texts per selector")
    probe_p.add_argument("--save", help="Also save the fetched markup to this file")

    watch_p = sub.add_parser("watch", help="Scrape now and then on an interval")
    add_run_options(watch_p)
    watch_p.add_argument("--interval-minutes", type=int, help="Minutes between runs")

    return parser


COMMANDS = {
    "run": run_command,
    "probe": probe_command,
    "watch": watch_command,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and dispatch the command."""
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
    except ConfigError as e:
        configure_logging(args.log_level or "INFO")
        log.error("invalid_configuration", error=e.message)
        return 2
    configure_logging(args.log_level or settings.LOG_LEVEL, settings.LOG_JSON)

    try:
        return asyncio.run(COMMANDS[args.command](settings, args))
    except ConfigError as e:
        log.error("invalid_configuration", error=e.message)
        return 2
    except FetchError as e:
        log.error("fetch_failed", url=e.url, error=e.message)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
