"""Pydantic schemas for the scrape configuration.

A ScrapeConfig is built once per run (see kenyadeals.config) and handed to
the pipeline entry point. All models are frozen so nothing downstream can
mutate the configuration mid-run.
"""

from decimal import Decimal
from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ProductCategory(str, Enum):
    """The closed set of product categories kept in the results."""

    PHONE = "phone"
    LAPTOP = "laptop"


class ShopKind(str, Enum):
    """Extraction strategy identifier for a shop."""

    JUMIA = "jumia"
    KILIMALL = "kilimall"
    GENERIC = "generic"


# ---------------------------------------------------------------------------
# Defaults (Kenyan shops, prices in KES)
# ---------------------------------------------------------------------------

DEFAULT_MAX_PRICE = Decimal("10000")
DEFAULT_PRICE_FLOOR = Decimal("100")

DEFAULT_PHONE_KEYWORDS: Tuple[str, ...] = (
    "phone", "smartphone", "iphone", "android",
    "tecno", "infinix", "samsung", "xiaomi",
)

# "hp " keeps its trailing space so "hp" inside other words does not match
DEFAULT_LAPTOP_KEYWORDS: Tuple[str, ...] = (
    "laptop", "notebook", "macbook", "computer",
    "lenovo", "hp ", "dell", "asus",
)


class ShopConfig(BaseModel):
    """A shop to crawl: one flash-sale page plus optional category pages."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, examples=["Jumia Kenya"])
    kind: ShopKind = ShopKind.GENERIC
    base_url: str = Field(..., min_length=1, examples=["https://www.jumia.co.ke"])
    flash_sale_url: str = Field(..., min_length=1)
    category_urls: Tuple[str, ...] = ()

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def page_urls(self) -> List[str]:
        """All listing pages in crawl order (flash sale first)."""
        return [self.flash_sale_url, *self.category_urls]


class CategoryKeywords(BaseModel):
    """Keyword sets used by the category classifier, checked phone first."""

    model_config = ConfigDict(frozen=True)

    phone: Tuple[str, ...] = DEFAULT_PHONE_KEYWORDS
    laptop: Tuple[str, ...] = DEFAULT_LAPTOP_KEYWORDS

    @field_validator("phone", "laptop")
    @classmethod
    def lowercase_keywords(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        # Leading/trailing spaces are significant ("hp "), so no strip()
        return tuple(kw.lower() for kw in value if kw)


DEFAULT_SHOPS: Tuple[ShopConfig, ...] = (
    ShopConfig(
        name="Jumia Kenya",
        kind=ShopKind.JUMIA,
        base_url="https://www.jumia.co.ke",
        flash_sale_url="https://www.jumia.co.ke/mlp-flash-sales/",
        category_urls=(
            "https://www.jumia.co.ke/laptops/",
            "https://www.jumia.co.ke/smartphones/",
        ),
    ),
    ShopConfig(
        name="Kilimall Kenya",
        kind=ShopKind.KILIMALL,
        base_url="https://www.kilimall.co.ke",
        flash_sale_url="https://www.kilimall.co.ke/new-flash-sale.html",
        category_urls=(
            "https://www.kilimall.co.ke/kilimall-flash-sale-laptop-c-10000007.html",
            "https://www.kilimall.co.ke/kilimall-flash-sale-phone-c-10000001.html",
        ),
    ),
)


class ScrapeConfig(BaseModel):
    """Everything one scrape run needs to know."""

    model_config = ConfigDict(frozen=True)

    max_price: Decimal = Field(DEFAULT_MAX_PRICE, gt=0)
    price_floor: Decimal = Field(DEFAULT_PRICE_FLOOR, ge=0)
    shops: Tuple[ShopConfig, ...] = DEFAULT_SHOPS
    category_keywords: CategoryKeywords = CategoryKeywords()

    @model_validator(mode="after")
    def check_price_bounds(self) -> "ScrapeConfig":
        if self.price_floor > self.max_price:
            raise ValueError(
                f"price_floor ({self.price_floor}) is above max_price ({self.max_price})"
            )
        return self

    def with_shops(self, names: List[str]) -> "ScrapeConfig":
        """Return a copy restricted to shops whose name contains one of ``names``."""
        wanted = [n.lower() for n in names]
        selected = tuple(
            shop for shop in self.shops
            if any(w in shop.name.lower() for w in wanted)
        )
        return self.model_copy(update={"shops": selected})
