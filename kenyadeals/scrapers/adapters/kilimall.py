"""Kilimall Kenya extractor.

Kilimall renders flash-sale tiles as div.product-item (older templates use
div.item) with the name in .title/.name and the price in .price. The
strikethrough list price, when shown, sits in a <del>.
"""

from kenyadeals.schemas.scrape import ShopKind
from kenyadeals.scrapers.base import BaseExtractor


class KilimallExtractor(BaseExtractor):
    """Kilimall Kenya product extractor."""

    shop_kind = ShopKind.KILIMALL

    CONTAINER_SELECTORS = (".product-item", ".item", ".product")
    NAME_SELECTOR = ".title, .name"
    PRICE_SELECTOR = ".price, .prc"
    ORIGINAL_PRICE_SELECTOR = "del, .old"
    IMAGE_ATTRS = ("data-src", "data-original", "src")
