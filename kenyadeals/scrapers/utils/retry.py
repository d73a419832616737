"""Retry policy for page fetches (tenacity)."""

import logging

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)


logger = structlog.get_logger(__name__)

# Transport-level failures worth another attempt; 4xx/5xx responses are not
RETRYABLE_ERRORS = (
    httpx.ConnectError,
    httpx.TimeoutException,
    httpx.RemoteProtocolError,
)


def fetch_retrying(attempts: int = 1) -> AsyncRetrying:
    """Build the retry controller for one page fetch.

    Args:
        attempts: Total attempts; 1 disables retrying

    Returns:
        AsyncRetrying that re-raises the last error once attempts run out
    """
    return AsyncRetrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
