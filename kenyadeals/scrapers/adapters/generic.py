"""Fallback extractor for shops without a dedicated strategy."""

from kenyadeals.schemas.scrape import ShopKind
from kenyadeals.scrapers.base import BaseExtractor


class GenericExtractor(BaseExtractor):
    """Uses BaseExtractor's prioritized selector lists unchanged."""

    shop_kind = ShopKind.GENERIC
