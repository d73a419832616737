"""HTTP page fetcher built on httpx."""

from typing import Optional

import httpx
import structlog

from kenyadeals.config import DEFAULT_USER_AGENT
from kenyadeals.core.exceptions import FetchError
from kenyadeals.scrapers.utils.retry import fetch_retrying


logger = structlog.get_logger(__name__)


class PageFetcher:
    """Downloads listing pages one at a time.

    Use as an async context manager so the underlying client is closed:

        async with PageFetcher() as fetcher:
            html = await fetcher.fetch(url)
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        attempts: int = 1,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize fetcher.

        Args:
            user_agent: User-Agent header sent with every request
            timeout: Per-request timeout in seconds
            attempts: Attempts per page for transport errors (1 = no retry)
            client: Pre-built client (tests inject one with a MockTransport)
        """
        self.attempts = attempts
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            headers={
                "User-Agent": user_agent,
                "Accept": "text/html,application/xhtml+xml",
                "Accept-Language": "en-KE,en;q=0.9",
            },
            timeout=timeout,
            follow_redirects=True,
        )

    async def __aenter__(self) -> "PageFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def fetch(self, url: str) -> str:
        """Fetch a page and return its markup.

        Raises:
            FetchError: On any network error or non-2xx response
        """
        logger.info("fetching_page", url=url)
        try:
            async for attempt in fetch_retrying(self.attempts):
                with attempt:
                    response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                url,
                f"HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(url, f"{type(e).__name__}: {e}") from e

        logger.debug("page_fetched", url=url, bytes=len(response.content))
        return response.text
