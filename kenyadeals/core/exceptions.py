"""Custom exception classes for the scraper."""

from typing import Optional


class KenyaDealsException(Exception):
    """Base exception for all kenyadeals errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class ConfigError(KenyaDealsException):
    """Raised when the scrape configuration is invalid or unreadable."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"Invalid configuration in {source}: {message}")


class ScraperError(KenyaDealsException):
    """Raised when a scraper encounters an error."""

    def __init__(self, shop: str, message: str):
        self.shop = shop
        super().__init__(f"Scraper error for {shop}: {message}")


class FetchError(ScraperError):
    """Raised when a listing page cannot be downloaded."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(url, message)


class ExtractionError(ScraperError):
    """Raised when a single product block has unexpected markup."""
