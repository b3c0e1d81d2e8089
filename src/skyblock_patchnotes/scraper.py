"""
Fetch orchestrator for Hypixel SkyBlock patch notes.

This module drives the whole pipeline:
- Navigator: forum root -> News and Announcements -> latest update thread
- Content extractor: thread page -> content blocks
- Fallback: any failure becomes the fixed FALLBACK_RESULT

The public entry point, fetch_latest_patch_notes(), returns a
concurrent.futures.Future immediately. The pipeline itself runs as an
asyncio coroutine on a background worker thread, so the caller's thread
(typically a UI thread) is never blocked.

Target: https://hypixel.net/forums/
"""

import asyncio
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Optional

import httpx

from .extractor import ContentExtractor
from .fetcher import REQUEST_TIMEOUT, USER_AGENT, PageFetcher
from .models import FALLBACK_RESULT, FALLBACK_TITLE, HYPIXEL_FORUMS_URL, PatchNotesResult
from .navigator import resolve_latest_thread

logger = logging.getLogger(__name__)

# Worker threads for background fetches
MAX_WORKERS = 4

_default_executor: Optional[ThreadPoolExecutor] = None
_default_executor_lock = threading.Lock()


def _background_executor() -> ThreadPoolExecutor:
    """Shared pool for background fetches, created on first use."""
    global _default_executor
    with _default_executor_lock:
        if _default_executor is None:
            _default_executor = ThreadPoolExecutor(
                max_workers=MAX_WORKERS, thread_name_prefix="patchnotes"
            )
    return _default_executor


class PatchNotesScraper:
    """
    Resolves, downloads and extracts the latest SkyBlock patch notes.

    The scraper holds configuration only. Each fetch() call opens its own
    HTTP client and builds its own result, so concurrent calls share no
    mutable state.

    Usage:
        scraper = PatchNotesScraper()
        result = asyncio.run(scraper.fetch())

        # or, from a UI thread:
        future = scraper.fetch_in_background()
    """

    def __init__(
        self,
        root_url: str = HYPIXEL_FORUMS_URL,
        timeout: float = REQUEST_TIMEOUT,
        user_agent: str = USER_AGENT,
        extractor: Optional[ContentExtractor] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            root_url: Forum index page to start navigation from
            timeout: Per-request connect/read timeout in seconds
            user_agent: User-Agent header for every request
            extractor: Content extractor (defaults to a ContentExtractor)
            transport: Optional httpx transport override, used by tests
        """
        self.root_url = root_url
        self.timeout = timeout
        self.user_agent = user_agent
        self.extractor = extractor or ContentExtractor()
        self.transport = transport

    def _fetcher(self) -> PageFetcher:
        return PageFetcher(
            timeout=self.timeout, user_agent=self.user_agent, transport=self.transport
        )

    async def _run_pipeline(self) -> PatchNotesResult:
        async with self._fetcher() as fetcher:
            thread = await resolve_latest_thread(fetcher, self.root_url)
            page = await fetcher.fetch_page(thread.url)

        post = self.extractor.extract(page.html)
        return PatchNotesResult(
            title=post.title,
            source_url=thread.url,
            header_image_url=post.header_image_url,
            blocks=post.blocks,
        )

    async def fetch(self) -> PatchNotesResult:
        """
        Run the full pipeline. Never raises.

        Returns:
            The extracted patch notes, or FALLBACK_RESULT if any network
            fetch, navigation step or parse failed
        """
        try:
            return await self._run_pipeline()
        except Exception as e:
            logger.error("Failed to fetch patch notes from %s: %s", self.root_url, e)
            logger.debug("Patch notes failure details", exc_info=True)
            return FALLBACK_RESULT

    def fetch_sync(self) -> PatchNotesResult:
        """Blocking variant of fetch() for callers without an event loop."""
        return asyncio.run(self.fetch())

    def fetch_in_background(self, executor: Optional[Executor] = None) -> "Future[PatchNotesResult]":
        """
        Schedule fetch_sync() on a worker thread and return its future.

        Args:
            executor: Pool to run on (defaults to the module's shared pool)
        """
        return (executor or _background_executor()).submit(self.fetch_sync)


def fetch_latest_patch_notes(
    root_url: str = HYPIXEL_FORUMS_URL,
    timeout: float = REQUEST_TIMEOUT,
    executor: Optional[Executor] = None,
) -> "Future[PatchNotesResult]":
    """
    Start fetching the latest patch notes in the background.

    The returned future always completes with a PatchNotesResult, never
    with an exception; failures produce FALLBACK_RESULT.

    Example:
        future = fetch_latest_patch_notes()
        deliver_on(future, screen.show, ui_executor)
    """
    return PatchNotesScraper(root_url=root_url, timeout=timeout).fetch_in_background(executor)


def deliver_on(
    future: "Future[PatchNotesResult]",
    callback: Callable[[PatchNotesResult], None],
    executor: Executor,
) -> None:
    """
    Run ``callback(result)`` on ``executor`` once ``future`` completes.

    Display surfaces use this to hop back onto the thread that owns their
    state. The callback is skipped if the future was cancelled.
    """
    def _dispatch(done: "Future[PatchNotesResult]") -> None:
        if done.cancelled():
            return
        executor.submit(callback, done.result())

    future.add_done_callback(_dispatch)
