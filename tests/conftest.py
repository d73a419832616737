"""Pytest configuration and shared fixtures."""

from decimal import Decimal
from typing import Callable, Dict, Union

import httpx
import pytest
import structlog

from kenyadeals.schemas.scrape import ScrapeConfig, ShopConfig, ShopKind
from kenyadeals.scrapers.utils.fetcher import PageFetcher


@pytest.fixture
def anyio_backend():
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo configure_logging() calls made through the CLI."""
    yield
    structlog.reset_defaults()


# ============================================================================
# MARKUP BUILDERS
# ============================================================================

def jumia_block(
    name: str,
    price: str,
    old: str = "",
    badge: str = "",
    href: str = "/product-1.html",
    img: str = "https://ke.jumia.is/img/1.jpg",
) -> str:
    """One Jumia listing tile."""
    old_html = f'<div class="old">{old}</div>' if old else ""
    badge_html = f'<div class="bdg _dsct">{badge}</div>' if badge else ""
    return f"""
    <article class="prd _fb col c-prd">
      <a class="core" href="{href}">
        <div class="img-c"><img class="img" data-src="{img}" src="placeholder.gif"></div>
        <div class="info">
          <h3 class="name">{name}</h3>
          <div class="prc">{price}</div>
          {old_html}
          {badge_html}
        </div>
      </a>
    </article>
    """


def listing_page(*blocks: str) -> str:
    return "<html><body><section class='card -paxs'>" + "".join(blocks) + "</section></body></html>"


EMPTY_PAGE = "<html><body><p>The flash sale has ended.</p></body></html>"


# ============================================================================
# CONFIG
# ============================================================================

@pytest.fixture
def jumia_shop() -> ShopConfig:
    return ShopConfig(
        name="Jumia Kenya",
        kind=ShopKind.JUMIA,
        base_url="https://www.jumia.co.ke",
        flash_sale_url="https://www.jumia.co.ke/mlp-flash-sales/",
        category_urls=(
            "https://www.jumia.co.ke/laptops/",
            "https://www.jumia.co.ke/smartphones/",
        ),
    )


@pytest.fixture
def scrape_config(jumia_shop: ShopConfig) -> ScrapeConfig:
    return ScrapeConfig(max_price=Decimal("10000"), shops=(jumia_shop,))


# ============================================================================
# HTTP
# ============================================================================

Page = Union[str, int, Exception]


@pytest.fixture
def make_fetcher() -> Callable[[Dict[str, Page]], PageFetcher]:
    """Build a PageFetcher whose client serves canned pages.

    Values are markup (200), a status code, or an exception to raise.
    Unknown URLs return 404. Requested URLs are recorded on
    ``fetcher.requested``.
    """

    def factory(pages: Dict[str, Page]) -> PageFetcher:
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            url = str(request.url)
            requested.append(url)
            page = pages.get(url, 404)
            if isinstance(page, Exception):
                raise page
            if isinstance(page, int):
                return httpx.Response(page, text="error")
            return httpx.Response(200, text=page, headers={"Content-Type": "text/html"})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        fetcher = PageFetcher(client=client)
        fetcher.requested = requested
        return fetcher

    return factory
