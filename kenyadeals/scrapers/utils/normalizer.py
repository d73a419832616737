"""Data normalization utilities for price parsing and category classification."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union
from urllib.parse import urljoin

import structlog

from kenyadeals.schemas.scrape import (
    DEFAULT_PRICE_FLOOR,
    CategoryKeywords,
    ProductCategory,
)

logger = structlog.get_logger()

Number = Union[Decimal, int, float]


# Spellings of the Kenyan shilling seen on listing pages. Longest first so
# "KShs" is removed whole rather than leaving a stray "s".
_CURRENCY_TOKENS = re.compile(r"kshs\.?|ksh\.?|kes|shs\.?|sh\.?", re.IGNORECASE)
_THOUSANDS_SEPARATOR = ","
# "8 500" / "8\u00a0500": whitespace between digit groups
_SPACE_SEPARATOR = re.compile(r"(?<=\d)[\s\u00a0](?=\d{3}\b)")
_NUMBER = re.compile(r"\d+(?:\.\d+)?")


class PriceNormalizer:
    """Price parsing for KES listing text."""

    @staticmethod
    def clean_price_string(raw: str) -> str:
        """Remove currency tokens and thousands separators.

        - "KSh 8,500" -> " 8500"
        - "KES 9,999.50" -> " 9999.50"
        - "KSh 8 500" -> " 8500"
        """
        cleaned = _CURRENCY_TOKENS.sub("", raw)
        cleaned = _SPACE_SEPARATOR.sub("", cleaned)
        return cleaned.replace(_THOUSANDS_SEPARATOR, "")

    @staticmethod
    def first_number(raw: Optional[str]) -> Optional[Decimal]:
        """First number in the cleaned text, with no plausibility check."""
        if not raw or not raw.strip():
            return None

        match = _NUMBER.search(PriceNormalizer.clean_price_string(raw))
        if not match:
            return None

        try:
            return Decimal(match.group(0))
        except InvalidOperation:
            return None

    @staticmethod
    def extract_price(
        raw: Optional[str], price_floor: Decimal = DEFAULT_PRICE_FLOOR
    ) -> Optional[Decimal]:
        """Extract the first price-like number from text.

        Values below ``price_floor`` are rejected: on listing pages such
        numbers are almost always ratings, review counts or quantities that a
        broad price selector picked up. Genuinely cheap items are lost too.

        Args:
            raw: Raw price text, e.g. "KSh 8,500"
            price_floor: Smallest value accepted as a real price

        Returns:
            Decimal price, or None if no plausible price is present
        """
        price = PriceNormalizer.first_number(raw)
        if price is None:
            return None

        if price < price_floor:
            logger.debug("price_below_floor", raw=raw, price=str(price))
            return None

        return price


class CategoryClassifier:
    """Keyword-based phone/laptop classification of product names.

    Phone keywords are tested before laptop keywords, so a name that
    matches both (e.g. "Lenovo Phone") is a phone.
    """

    def __init__(self, keywords: Optional[CategoryKeywords] = None):
        self.keywords = keywords or CategoryKeywords()

    def classify(self, name: Optional[str]) -> Optional[ProductCategory]:
        """Classify a product name.

        Returns:
            ProductCategory, or None when the name matches neither set
        """
        if not name:
            return None

        name_lower = name.lower()
        ordered = (
            (ProductCategory.PHONE, self.keywords.phone),
            (ProductCategory.LAPTOP, self.keywords.laptop),
        )
        for category, words in ordered:
            if any(kw in name_lower for kw in words):
                return category

        return None


def calculate_discount(
    original: Optional[Number], current: Optional[Number]
) -> str:
    """Percentage-off string such as "29%", or "" when there is no discount.

    Rounds half away from zero.
    """
    if not original or not current:
        return ""

    original = Decimal(str(original))
    current = Decimal(str(current))
    if original <= current:
        return ""

    pct = (original - current) / original * 100
    return f"{pct.quantize(Decimal('1'), rounding=ROUND_HALF_UP)}%"


def normalize_discount_badge(text: Optional[str]) -> str:
    """Turn badge text such as "-29%" or "29 % off" into "29%"."""
    if not text:
        return ""
    match = re.search(r"(\d+(?:\.\d+)?)\s*%", text)
    if not match:
        return ""
    pct = Decimal(match.group(1)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    if pct <= 0 or pct >= 100:
        return ""
    return f"{pct}%"


def absolute_url(base_url: str, link: Optional[str]) -> str:
    """Resolve a (possibly relative or protocol-relative) link against the shop origin."""
    if not link:
        return ""
    link = link.strip()
    if not link or link.startswith(("javascript:", "#", "data:")):
        return ""
    return urljoin(base_url.rstrip("/") + "/", link)
