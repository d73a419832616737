"""Tests for price parsing, category classification and discount helpers."""

from decimal import Decimal

import pytest

from kenyadeals.schemas.scrape import CategoryKeywords, ProductCategory
from kenyadeals.scrapers.utils.normalizer import (
    CategoryClassifier,
    PriceNormalizer,
    absolute_url,
    calculate_discount,
    normalize_discount_badge,
)


# ============================================================================
# TESTS: PRICE PARSER
# ============================================================================

class TestPriceNormalizer:
    """Tests for PriceNormalizer.extract_price."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("KSh 8,500", Decimal("8500")),
            ("KES 9,999.50", Decimal("9999.5")),
            ("Ksh. 1,299", Decimal("1299")),
            ("KShs 2,000", Decimal("2000")),
            ("kes 12,345", Decimal("12345")),
            ("8,500", Decimal("8500")),
            ("KSh 8 500", Decimal("8500")),
            ("KSh 8\u00a0500", Decimal("8500")),
            ("KES 1 299 999.50", Decimal("1299999.50")),
        ],
    )
    def test_currency_and_separators_removed(self, raw, expected):
        assert PriceNormalizer.extract_price(raw) == expected

    def test_first_number_wins(self):
        assert PriceNormalizer.extract_price("KSh 7,999 - KSh 9,999") == Decimal("7999")

    @pytest.mark.parametrize("raw", ["KSh 54", "30", "KES 99.99", "4.5 out of 5"])
    def test_below_floor_rejected(self, raw):
        assert PriceNormalizer.extract_price(raw) is None

    def test_floor_is_inclusive(self):
        assert PriceNormalizer.extract_price("KSh 100") == Decimal("100")

    def test_custom_floor(self):
        assert PriceNormalizer.extract_price("KSh 54", price_floor=Decimal("0")) == Decimal("54")
        assert PriceNormalizer.extract_price("KSh 500", price_floor=Decimal("1000")) is None

    @pytest.mark.parametrize("raw", [None, "", "   ", "\n\t"])
    def test_empty_input_rejected(self, raw):
        assert PriceNormalizer.extract_price(raw) is None

    def test_no_digits_rejected(self):
        assert PriceNormalizer.extract_price("Call for price") is None

    def test_clean_price_string(self):
        assert PriceNormalizer.clean_price_string("KSh 8,500").strip() == "8500"


# ============================================================================
# TESTS: CATEGORY CLASSIFIER
# ============================================================================

class TestCategoryClassifier:
    """Tests for CategoryClassifier."""

    @pytest.fixture
    def classifier(self):
        return CategoryClassifier()

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Tecno Spark 10 Phone", ProductCategory.PHONE),
            ("Samsung Galaxy A05", ProductCategory.PHONE),
            ("XIAOMI Redmi 13C", ProductCategory.PHONE),
            ("HP Laptop 15", ProductCategory.LAPTOP),
            ("HP Pavilion 14", ProductCategory.LAPTOP),
            ("Dell Latitude E7450 Refurbished", ProductCategory.LAPTOP),
            ("Apple MacBook Air", ProductCategory.LAPTOP),
        ],
    )
    def test_classify(self, classifier, name, expected):
        assert classifier.classify(name) == expected

    def test_phone_takes_precedence(self, classifier):
        assert classifier.classify("Lenovo Phone K14") == ProductCategory.PHONE
        assert classifier.classify("Laptop and Phone Stand") == ProductCategory.PHONE

    @pytest.mark.parametrize("name", ["Wireless Mouse", "Bluetooth Speaker", "", None])
    def test_unclassified(self, classifier, name):
        assert classifier.classify(name) is None

    def test_idempotent(self, classifier):
        name = "Infinix Hot 30 Smartphone"
        assert classifier.classify(name) == classifier.classify(name) == ProductCategory.PHONE

    def test_custom_keywords_are_lowercased(self):
        classifier = CategoryClassifier(
            CategoryKeywords(phone=("Nokia",), laptop=("Chromebook",))
        )
        assert classifier.classify("NOKIA 105") == ProductCategory.PHONE
        assert classifier.classify("Acer Chromebook 314") == ProductCategory.LAPTOP
        assert classifier.classify("Samsung Galaxy A05") is None


# ============================================================================
# TESTS: DISCOUNT
# ============================================================================

class TestDiscount:
    """Tests for calculate_discount and badge normalisation."""

    def test_calculate_discount(self):
        assert calculate_discount(12000, 8500) == "29%"
        assert calculate_discount(Decimal("11000"), Decimal("9200")) == "16%"

    @pytest.mark.parametrize(
        "original,current",
        [(8500, 8500), (8000, 8500), (None, 8500), (12000, None), (None, None)],
    )
    def test_no_discount(self, original, current):
        assert calculate_discount(original, current) == ""

    def test_rounds_half_away_from_zero(self):
        # 0.5% off
        assert calculate_discount(200, 199) == "1%"

    @pytest.mark.parametrize(
        "text,expected",
        [("-29%", "29%"), ("29 % off", "29%"), ("Save 15.5%", "16%"), ("NEW", ""), ("", ""), (None, "")],
    )
    def test_normalize_discount_badge(self, text, expected):
        assert normalize_discount_badge(text) == expected


# ============================================================================
# TESTS: URLS
# ============================================================================

class TestAbsoluteUrl:
    """Tests for absolute_url."""

    def test_relative_path(self):
        assert absolute_url("https://www.jumia.co.ke", "/tecno-spark.html") == (
            "https://www.jumia.co.ke/tecno-spark.html"
        )

    def test_protocol_relative(self):
        assert absolute_url("https://www.jumia.co.ke", "//ke.jumia.is/1.jpg") == "https://ke.jumia.is/1.jpg"

    def test_absolute_unchanged(self):
        url = "https://www.kilimall.co.ke/listing/1"
        assert absolute_url("https://www.jumia.co.ke", url) == url

    @pytest.mark.parametrize("link", [None, "", "  ", "javascript:void(0)", "#"])
    def test_unusable_links(self, link):
        assert absolute_url("https://www.jumia.co.ke", link) == ""
