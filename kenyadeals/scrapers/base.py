"""Base extractor interface and the product record.

Every shop-specific extractor inherits from BaseExtractor and overrides the
selector tables (and, where a site needs it, one of the _extract_* hooks).
An extractor is a pure mapping from one product container element to a
Product; filtering happens later in the page extractor.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Union

import structlog
from bs4 import BeautifulSoup, Tag

from kenyadeals.core.exceptions import ExtractionError
from kenyadeals.schemas.scrape import (
    DEFAULT_PRICE_FLOOR,
    ProductCategory,
    ShopConfig,
    ShopKind,
)
from kenyadeals.scrapers.utils.normalizer import (
    CategoryClassifier,
    PriceNormalizer,
    absolute_url,
    calculate_discount,
)

UNKNOWN_PRODUCT = "Unknown Product"

# Tried in order; the first selector with any matches is used for the page
GENERIC_CONTAINER_SELECTORS: Tuple[str, ...] = (
    ".prd",
    ".product-item",
    ".item",
    "[data-gtm-product]",
    ".product",
)


def isoformat_utc(value: datetime) -> str:
    """ISO-8601 with millisecond precision and a trailing Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def json_number(value: Optional[Decimal]) -> Union[int, float, None]:
    """Integral prices serialise as JSON integers, the rest as floats."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


@dataclass
class Product:
    """A product record produced from one listing-page container."""

    shop: str
    name: str = UNKNOWN_PRODUCT
    category: Optional[ProductCategory] = None
    current_price: Optional[Decimal] = None
    original_price: Optional[Decimal] = None
    discount: str = ""
    url: str = ""
    image_url: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    # Raw current-price text; diagnostics only, not serialised
    price_text: str = field(default="", repr=False, compare=False)

    def __post_init__(self):
        """Enforce original_price >= current_price."""
        if not self.shop:
            raise ValueError("shop is required")
        if self.current_price is None:
            return
        if self.original_price is None or self.original_price <= self.current_price:
            self.original_price = self.current_price
            self.discount = ""

    @property
    def identity(self) -> Tuple[str, Optional[Decimal], str]:
        """Deduplication key."""
        return (self.name, self.current_price, self.shop)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise using the output artifact's camelCase keys."""
        return {
            "shop": self.shop,
            "name": self.name,
            "category": self.category.value if self.category else None,
            "currentPrice": json_number(self.current_price),
            "originalPrice": json_number(self.original_price),
            "discount": self.discount,
            "url": self.url,
            "imageUrl": self.image_url,
            "timestamp": isoformat_utc(self.timestamp),
        }


@dataclass
class CandidateOutcome:
    """Result of mapping one candidate element: a product or a skip reason."""

    product: Optional[Product] = None
    skip_reason: Optional[str] = None

    @classmethod
    def accepted(cls, product: Product) -> "CandidateOutcome":
        return cls(product=product)

    @classmethod
    def skipped(cls, reason: str, product: Optional[Product] = None) -> "CandidateOutcome":
        return cls(product=product, skip_reason=reason)

    @property
    def ok(self) -> bool:
        return self.skip_reason is None and self.product is not None


class BaseExtractor:
    """Selector-driven product extractor.

    This class is also the generic fallback strategy used for shops that
    have no dedicated extractor. Subclasses override the selector tables.
    """

    shop_kind: ShopKind = ShopKind.GENERIC

    CONTAINER_SELECTORS: Tuple[str, ...] = GENERIC_CONTAINER_SELECTORS
    NAME_SELECTOR = "h3, h4, .title, .name"
    PRICE_SELECTOR = ".price, .prc, .cost"
    ORIGINAL_PRICE_SELECTOR = "del, .old, s"
    DISCOUNT_SELECTOR: Optional[str] = None
    LINK_SELECTOR = "a[href]"
    IMAGE_SELECTOR = "img"
    IMAGE_ATTRS: Tuple[str, ...] = ("data-src", "src")

    def __init__(
        self,
        classifier: Optional[CategoryClassifier] = None,
        price_floor: Decimal = DEFAULT_PRICE_FLOOR,
    ):
        self.classifier = classifier or CategoryClassifier()
        self.price_floor = price_floor
        self.logger = structlog.get_logger(__name__).bind(extractor=self.shop_kind.value)

    def find_containers(self, soup: BeautifulSoup) -> Tuple[Optional[str], List[Tag]]:
        """Locate product containers using the first selector that matches.

        Returns:
            (selector used, elements); (None, []) if nothing matched
        """
        for selector in self.CONTAINER_SELECTORS:
            elements = soup.select(selector)
            if elements:
                return selector, elements
        return None, []

    def extract(self, element: Tag, shop: ShopConfig) -> Product:
        """Map one container element to a Product.

        Raises:
            ExtractionError: The element's markup is not what the selectors expect
        """
        try:
            name = self._extract_name(element)
            current_price, original_price = self._extract_prices(element)

            discount = ""
            if current_price is not None and original_price is not None and original_price > current_price:
                discount = self._extract_discount(element, original_price, current_price)

            return Product(
                shop=shop.name,
                name=name,
                category=self.classifier.classify(name),
                current_price=current_price,
                original_price=original_price,
                discount=discount,
                url=absolute_url(shop.base_url, self._extract_link(element)),
                image_url=absolute_url(shop.base_url, self._extract_image(element)),
                price_text=self._select_text(element, self.PRICE_SELECTOR),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ExtractionError(shop.name, f"{type(e).__name__}: {e}") from e

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _extract_name(self, element: Tag) -> str:
        return self._select_text(element, self.NAME_SELECTOR) or UNKNOWN_PRODUCT

    def _extract_prices(self, element: Tag) -> Tuple[Optional[Decimal], Optional[Decimal]]:
        current = PriceNormalizer.extract_price(
            self._select_text(element, self.PRICE_SELECTOR), self.price_floor
        )
        original = PriceNormalizer.extract_price(
            self._select_text(element, self.ORIGINAL_PRICE_SELECTOR), self.price_floor
        )
        return current, original

    def _extract_discount(self, element: Tag, original: Decimal, current: Decimal) -> str:
        return calculate_discount(original, current)

    def _extract_link(self, element: Tag) -> Optional[str]:
        if element.name == "a" and element.get("href"):
            return element.get("href")
        link = element.select_one(self.LINK_SELECTOR)
        return link.get("href") if link else None

    def _extract_image(self, element: Tag) -> Optional[str]:
        img = element.select_one(self.IMAGE_SELECTOR)
        if not img:
            return None
        for attr in self.IMAGE_ATTRS:
            value = img.get(attr)
            if value:
                return value
        return None

    @staticmethod
    def _select_text(element: Tag, selector: Optional[str]) -> str:
        if not selector:
            return ""
        found = element.select_one(selector)
        return found.get_text(" ", strip=True) if found else ""
