"""Report rendering for scrape results."""

from .html import render_html_report, write_html_report

__all__ = [
    "render_html_report",
    "write_html_report",
]
