"""Kenyan electronics flash-sale scraper."""

__version__ = "0.1.0"
