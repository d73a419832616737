"""Tests for Settings and the scrape configuration models."""

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError

from kenyadeals.config import Settings, load_settings
from kenyadeals.core.exceptions import ConfigError
from kenyadeals.schemas.scrape import (
    DEFAULT_SHOPS,
    CategoryKeywords,
    ScrapeConfig,
    ShopConfig,
    ShopKind,
)


def make_settings(**kwargs) -> Settings:
    values = {"SHOPS_FILE": "", "MAX_PRICE": Decimal("10000"), "PRICE_FLOOR": Decimal("100")}
    values.update(kwargs)
    return Settings(_env_file=None, **values)


class TestScrapeConfig:
    """Tests for the frozen ScrapeConfig model."""

    def test_defaults(self):
        config = ScrapeConfig()

        assert config.max_price == Decimal("10000")
        assert config.price_floor == Decimal("100")
        assert [shop.name for shop in config.shops] == ["Jumia Kenya", "Kilimall Kenya"]
        assert config.shops[0].kind == ShopKind.JUMIA
        assert "hp " in config.category_keywords.laptop

    def test_is_frozen(self):
        config = ScrapeConfig()

        with pytest.raises(ValidationError):
            config.max_price = Decimal("5")

    def test_floor_above_ceiling_rejected(self):
        with pytest.raises(ValidationError):
            ScrapeConfig(max_price=Decimal("50"), price_floor=Decimal("100"))

    def test_non_positive_ceiling_rejected(self):
        with pytest.raises(ValidationError):
            ScrapeConfig(max_price=Decimal("0"), price_floor=Decimal("0"))

    def test_with_shops_filters_by_name(self):
        config = ScrapeConfig().with_shops(["KILI"])

        assert [shop.name for shop in config.shops] == ["Kilimall Kenya"]
        assert ScrapeConfig().with_shops(["ebay"]).shops == ()

    def test_shop_page_urls(self):
        jumia = DEFAULT_SHOPS[0]

        assert jumia.page_urls()[0] == jumia.flash_sale_url
        assert len(jumia.page_urls()) == 3

    def test_base_url_trailing_slash_stripped(self):
        shop = ShopConfig(name="X", base_url="https://x.example/", flash_sale_url="https://x.example/d")

        assert shop.base_url == "https://x.example"

    def test_keywords_lowercased_spaces_kept(self):
        keywords = CategoryKeywords(phone=("Nokia",), laptop=("HP ",))

        assert keywords.phone == ("nokia",)
        assert keywords.laptop == ("hp ",)


class TestSettings:
    """Tests for Settings.build_scrape_config."""

    def test_build_from_defaults(self):
        config = make_settings().build_scrape_config()

        assert config.max_price == Decimal("10000")
        assert config.shops == DEFAULT_SHOPS

    def test_max_price_override(self):
        config = make_settings().build_scrape_config(max_price=Decimal("8000"))

        assert config.max_price == Decimal("8000")

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("MAX_PRICE", "7500")
        monkeypatch.setenv("FETCH_ATTEMPTS", "3")

        settings = Settings(_env_file=None)

        assert settings.MAX_PRICE == Decimal("7500")
        assert settings.FETCH_ATTEMPTS == 3

    def test_shops_file_replaces_shops(self, tmp_path):
        shops_file = tmp_path / "shops.json"
        shops_file.write_text(json.dumps({
            "shops": [{
                "name": "Phone Place",
                "base_url": "https://phoneplace.example",
                "flash_sale_url": "https://phoneplace.example/deals",
            }],
            "category_keywords": {"phone": ["nokia"], "laptop": ["thinkpad"]},
        }), encoding="utf-8")

        config = make_settings(SHOPS_FILE=str(shops_file)).build_scrape_config()

        assert [shop.name for shop in config.shops] == ["Phone Place"]
        assert config.shops[0].kind == ShopKind.GENERIC
        assert config.category_keywords.phone == ("nokia",)

    def test_missing_shops_file(self, tmp_path):
        with pytest.raises(ConfigError):
            make_settings(SHOPS_FILE=str(tmp_path / "missing.json")).build_scrape_config()

    def test_malformed_shops_file(self, tmp_path):
        shops_file = tmp_path / "shops.json"
        shops_file.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigError):
            make_settings(SHOPS_FILE=str(shops_file)).build_scrape_config()

    def test_shops_file_must_be_object(self, tmp_path):
        shops_file = tmp_path / "shops.json"
        shops_file.write_text("[]", encoding="utf-8")

        with pytest.raises(ConfigError):
            make_settings(SHOPS_FILE=str(shops_file)).build_scrape_config()

    def test_invalid_values_become_config_error(self):
        settings = make_settings(MAX_PRICE=Decimal("50"), PRICE_FLOOR=Decimal("100"))

        with pytest.raises(ConfigError) as exc_info:
            settings.build_scrape_config()

        assert exc_info.value.source == "environment"

    def test_invalid_environment_value(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MAX_PRICE", "abc")

        with pytest.raises(ConfigError) as exc_info:
            load_settings()

        assert exc_info.value.source == "environment"
        assert "MAX_PRICE" in exc_info.value.message

    def test_output_paths(self, tmp_path):
        settings = make_settings(OUTPUT_DIR=str(tmp_path))

        assert settings.output_json_path == tmp_path / "kenyan_electronics_deals.json"
        assert settings.output_html_path == tmp_path / "index.html"
