"""Jumia Kenya extractor.

Listing structure (flash sales and category pages):
  article.prd > a.core[href]
    - div.img-c > img.img[data-src]
    - h3.name            (product name)
    - div.prc            (sale price, "KSh 8,500")
    - div.old            (pre-discount price)
    - div.bdg._dsct      (discount badge, "29%")
"""

from decimal import Decimal

from bs4 import Tag

from kenyadeals.schemas.scrape import ShopKind
from kenyadeals.scrapers.base import BaseExtractor
from kenyadeals.scrapers.utils.normalizer import calculate_discount, normalize_discount_badge


class JumiaExtractor(BaseExtractor):
    """Jumia Kenya product extractor."""

    shop_kind = ShopKind.JUMIA

    CONTAINER_SELECTORS = (".prd", "[data-gtm-product]")
    NAME_SELECTOR = ".name"
    PRICE_SELECTOR = ".prc"
    ORIGINAL_PRICE_SELECTOR = ".old"
    DISCOUNT_SELECTOR = ".bdg._dsct"
    LINK_SELECTOR = "a[href]"

    def _extract_discount(self, element: Tag, original: Decimal, current: Decimal) -> str:
        badge = normalize_discount_badge(self._select_text(element, self.DISCOUNT_SELECTOR))
        return badge or calculate_discount(original, current)
