"""Application configuration via Pydantic Settings."""

import json
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from kenyadeals.core.exceptions import ConfigError
from kenyadeals.schemas.scrape import (
    DEFAULT_MAX_PRICE,
    DEFAULT_PRICE_FLOOR,
    ScrapeConfig,
)


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Global settings loaded from environment variables and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Filtering
    MAX_PRICE: Decimal = DEFAULT_MAX_PRICE
    PRICE_FLOOR: Decimal = DEFAULT_PRICE_FLOOR

    # Optional JSON file with "shops" and/or "category_keywords"
    SHOPS_FILE: str = ""

    # Output
    OUTPUT_DIR: str = "docs"
    OUTPUT_JSON: str = "kenyan_electronics_deals.json"
    OUTPUT_HTML: str = "index.html"

    # HTTP
    HTTP_TIMEOUT_SECONDS: float = 30.0
    USER_AGENT: str = DEFAULT_USER_AGENT
    FETCH_ATTEMPTS: int = 1  # 1 = no retry

    # Scheduling (watch mode)
    SCRAPE_INTERVAL_MINUTES: int = 360

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    def load_shops_file(self) -> Dict[str, Any]:
        """Read SHOPS_FILE as JSON.

        Returns:
            Parsed JSON object, or an empty dict if SHOPS_FILE is not set

        Raises:
            ConfigError: If the file is missing, unreadable or not an object
        """
        if not self.SHOPS_FILE:
            return {}
        path = Path(self.SHOPS_FILE)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(str(path), str(e)) from e
        if not isinstance(data, dict):
            raise ConfigError(str(path), "top-level JSON value must be an object")
        return data

    def build_scrape_config(self, max_price: Optional[Decimal] = None) -> ScrapeConfig:
        """Build the immutable per-run configuration.

        Args:
            max_price: Optional override for MAX_PRICE (e.g. from the CLI)

        Raises:
            ConfigError: If the merged values do not validate
        """
        overrides = self.load_shops_file()
        values: Dict[str, Any] = {
            "max_price": max_price if max_price is not None else self.MAX_PRICE,
            "price_floor": self.PRICE_FLOOR,
        }
        for key in ("shops", "category_keywords"):
            if key in overrides:
                values[key] = overrides[key]

        try:
            return ScrapeConfig.model_validate(values)
        except ValidationError as e:
            raise ConfigError(self.SHOPS_FILE or "environment", str(e)) from e

    @property
    def output_json_path(self) -> Path:
        return Path(self.OUTPUT_DIR) / self.OUTPUT_JSON

    @property
    def output_html_path(self) -> Path:
        return Path(self.OUTPUT_DIR) / self.OUTPUT_HTML


def load_settings() -> Settings:
    """Read settings from the environment and .env.

    Raises:
        ConfigError: If a variable does not validate (e.g. MAX_PRICE=abc)
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError("environment", str(e)) from e


@lru_cache
def get_settings() -> Settings:
    """Return the cached process-wide settings."""
    return load_settings()
