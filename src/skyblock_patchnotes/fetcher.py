"""
HTTP layer shared by every stage of the pipeline.

All forum pages are fetched with the same configuration: a realistic
browser User-Agent, a fixed timeout, and automatic redirect following.
Image downloads follow at most one redirect hop, handled by hand through
the ``Location`` header.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from .errors import FetchFailed

logger = logging.getLogger(__name__)

# Seconds before a connect or read times out
REQUEST_TIMEOUT = 10.0

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Status codes followed by hand when downloading images
IMAGE_REDIRECT_CODES = {301, 302}


@dataclass(frozen=True)
class FetchedPage:
    """
    A downloaded HTML page.

    Attributes:
        url: Final URL after redirects; relative links resolve against it
        html: Response body
    """
    url: str
    html: str

    def soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, "lxml")


class PageFetcher:
    """
    Async HTTP client wrapper for forum pages and images.

    The underlying ``httpx.AsyncClient`` lives only for the duration of the
    ``async with`` block, so every pipeline invocation gets its own
    connection pool.

    Usage:
        async with PageFetcher() as fetcher:
            page = await fetcher.fetch_page("https://hypixel.net/forums/")
    """

    def __init__(
        self,
        timeout: float = REQUEST_TIMEOUT,
        user_agent: str = USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            timeout: Connect/read timeout in seconds
            user_agent: User-Agent header sent with every request
            transport: Optional transport override (tests use httpx.MockTransport)
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "PageFetcher":
        self.client = httpx.AsyncClient(
            http2=True,
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
            headers={
                'User-Agent': self.user_agent,
                'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8',
                'Accept-Language': 'en-US,en;q=0.9',
            },
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    def _require_client(self) -> httpx.AsyncClient:
        if self.client is None:
            raise RuntimeError("PageFetcher must be used inside 'async with'")
        return self.client

    async def fetch_page(self, url: str) -> FetchedPage:
        """
        Download an HTML page.

        Raises:
            FetchFailed: on timeout, connection error or a non-2xx status
        """
        client = self._require_client()
        logger.debug("GET %s", url)
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchFailed(url, f"HTTP {e.response.status_code}", e.response.status_code) from e
        except httpx.RequestError as e:
            raise FetchFailed(url, type(e).__name__) from e

        return FetchedPage(url=str(response.url), html=response.text)

    async def fetch_image(self, url: str) -> Optional[bytes]:
        """
        Download raw image bytes for a display surface.

        A 301/302 response is followed exactly once through its ``Location``
        header; a second redirect, a missing ``Location``, or any other
        non-200 status yields ``None``. Network errors are logged and also
        yield ``None``, since a broken image must never fail the page.
        """
        client = self._require_client()
        target = url
        try:
            for hop in range(2):
                response = await client.get(target, follow_redirects=False)
                logger.debug("Image %s: HTTP %d", target, response.status_code)

                if response.status_code in IMAGE_REDIRECT_CODES:
                    location = response.headers.get("Location")
                    if not location or hop > 0:
                        break
                    target = str(response.url.join(location))
                    logger.info("Image redirect: %s -> %s", url, target)
                    continue

                if response.status_code != 200:
                    logger.error("Image fetch failed for %s: HTTP %d", target, response.status_code)
                    return None
                return response.content
        except httpx.RequestError as e:
            logger.error("Image fetch failed for %s: %s", target, e)
            return None

        logger.error("Image fetch for %s ended on an unresolved redirect", url)
        return None
