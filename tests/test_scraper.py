"""Tests for the fetch orchestrator (no network access required)."""

import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from skyblock_patchnotes import scraper as scraper_module
from skyblock_patchnotes.models import ImageRef, PatchNotesResult, StyleHint, TextLine
from skyblock_patchnotes.scraper import (
    FALLBACK_RESULT, FALLBACK_TITLE, HYPIXEL_FORUMS_URL, PatchNotesScraper, deliver_on,
)

from conftest import ROOT_URL, SECTION_URL, THREAD_URL, make_transport


def _scraper(pages, fail_urls=()):
    return PatchNotesScraper(root_url=ROOT_URL, transport=make_transport(pages, fail_urls))


class TestFetch:
    def test_success(self, forum_pages):
        result = asyncio.run(_scraper(forum_pages).fetch())
        assert result.title == "SkyBlock 0.20.1 Update"
        assert result.source_url == THREAD_URL
        assert result.header_image_url == "https://cdn.hypixel.net/banner.png"
        assert TextLine("Intro", StyleHint.HEADER) in result.blocks
        assert ImageRef("https://hypixel.net/attachments/x.png") in result.blocks
        assert not result.is_fallback

    def test_idempotent(self, forum_pages):
        scraper = _scraper(forum_pages)
        first = asyncio.run(scraper.fetch())
        second = asyncio.run(scraper.fetch())
        assert first.blocks == second.blocks
        assert first == second

    @pytest.mark.parametrize("failing_url", [ROOT_URL, SECTION_URL, THREAD_URL])
    def test_fetch_failure_at_any_stage(self, forum_pages, failing_url):
        result = asyncio.run(_scraper(forum_pages, fail_urls={failing_url}).fetch())
        assert result is FALLBACK_RESULT
        assert result.title == "Error Loading Patch Notes"

    def test_http_error_status(self, forum_pages):
        del forum_pages[THREAD_URL]  # served as 404
        assert asyncio.run(_scraper(forum_pages).fetch()) is FALLBACK_RESULT

    def test_section_not_found(self, forum_pages):
        forum_pages[ROOT_URL] = "<html><body>nothing here</body></html>"
        assert asyncio.run(_scraper(forum_pages).fetch()) is FALLBACK_RESULT

    def test_thread_not_found(self, forum_pages):
        forum_pages[SECTION_URL] = "<html><body>no threads</body></html>"
        assert asyncio.run(_scraper(forum_pages).fetch()) is FALLBACK_RESULT

    def test_extractor_error(self, forum_pages):
        class BrokenExtractor:
            def extract(self, html):
                raise ValueError("bad markup")

        scraper = PatchNotesScraper(
            root_url=ROOT_URL, extractor=BrokenExtractor(), transport=make_transport(forum_pages)
        )
        assert asyncio.run(scraper.fetch()) is FALLBACK_RESULT

    def test_missing_post_body_is_not_a_failure(self, forum_pages):
        forum_pages[THREAD_URL] = '<span class="p-title-value">Empty</span>'
        result = asyncio.run(_scraper(forum_pages).fetch())
        assert not result.is_fallback
        assert result.title == "Empty"
        assert result.blocks[0].style is StyleHint.ERROR


class TestFallbackResult:
    def test_fixed_content(self):
        assert FALLBACK_RESULT.title == FALLBACK_TITLE
        assert FALLBACK_RESULT.source_url == HYPIXEL_FORUMS_URL
        assert FALLBACK_RESULT.header_image_url is None
        assert len(FALLBACK_RESULT.blocks) == 5
        assert FALLBACK_RESULT.blocks[0].style is StyleHint.ERROR
        assert FALLBACK_RESULT.blocks[-1] == TextLine(HYPIXEL_FORUMS_URL, StyleHint.LINK)


class TestBackground:
    def test_fetch_in_background(self, forum_pages):
        with ThreadPoolExecutor(max_workers=2) as pool:
            future = _scraper(forum_pages).fetch_in_background(pool)
            result = future.result(timeout=10)
        assert result.source_url == THREAD_URL

    def test_concurrent_invocations_independent(self, forum_pages):
        scraper = _scraper(forum_pages)
        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [scraper.fetch_in_background(pool) for _ in range(2)]
            results = [f.result(timeout=10) for f in futures]
        assert results[0] == results[1]
        assert results[0] is not results[1]

    def test_failure_completes_future_normally(self, forum_pages):
        with ThreadPoolExecutor(max_workers=1) as pool:
            future = _scraper(forum_pages, fail_urls={ROOT_URL}).fetch_in_background(pool)
            assert future.result(timeout=10) is FALLBACK_RESULT
            assert future.exception() is None


class TestDeliverOn:
    def test_callback_runs_on_designated_executor(self, forum_pages):
        received = []
        done = threading.Event()

        def callback(result: PatchNotesResult):
            received.append((result, threading.current_thread().name))
            done.set()

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="ui") as ui, \
                ThreadPoolExecutor(max_workers=1, thread_name_prefix="worker") as worker:
            future = _scraper(forum_pages).fetch_in_background(worker)
            deliver_on(future, callback, ui)
            assert done.wait(timeout=10)

        result, thread_name = received[0]
        assert result.source_url == THREAD_URL
        assert thread_name.startswith("ui")


class TestBackgroundExecutor:
    def test_shared_pool_created_once(self, monkeypatch):
        monkeypatch.setattr(scraper_module, "_default_executor", None)
        barrier = threading.Barrier(8)
        pools = []

        def first_call():
            barrier.wait()
            pools.append(scraper_module._background_executor())

        threads = [threading.Thread(target=first_call) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        try:
            assert len(pools) == 8
            assert all(pool is pools[0] for pool in pools)
        finally:
            pools[0].shutdown(wait=False)
