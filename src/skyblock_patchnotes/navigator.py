"""
Two-hop link discovery from the forum root to the latest update thread.

    root page --(News and Announcements link)--> section page
    section page --(first SkyBlock update title)--> thread URL

"Latest" means "first listed": the forum lists newest threads first and
no date is checked here. If the section is ever sorted differently, the
wrong thread will be picked silently.
"""

import logging
import re
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .errors import SectionNotFound, ThreadNotFound
from .fetcher import PageFetcher
from .models import ThreadReference
from .utils import collapse_whitespace

logger = logging.getLogger(__name__)

# Both spellings appear on the forum depending on the theme
NEWS_SECTION_NAMES = ("News and Announcements", "News & Announcements")

SECTION_TITLE_SELECTOR = ".node-title"
THREAD_TITLE_SELECTOR = ".structItem-title a"

_VERSION_RE = re.compile(r"\d+\.\d+")


def _is_news_section(text: str) -> bool:
    return any(name in text for name in NEWS_SECTION_NAMES)


def is_skyblock_update_title(title: str) -> bool:
    """
    Decide whether a thread title announces a SkyBlock update.

    The title must mention SkyBlock (any casing) and either carry a version
    number like "0.20" or the word "Update".

    Example:
        is_skyblock_update_title("Hypixel SkyBlock 1.2 Update")  # True
        is_skyblock_update_title("SkyBlock news")                # False
    """
    if "skyblock" not in title.lower():
        return False
    return bool(_VERSION_RE.search(title)) or "Update" in title


def find_section_url(soup: BeautifulSoup, base_url: str) -> Optional[str]:
    """
    Find the News and Announcements sub-forum link on the root page.

    Tries every ``a[href]`` first, then falls back to ``.node-title``
    blocks and their first link.

    Returns:
        Absolute section URL, or None if neither strategy matched
    """
    for link in soup.select("a[href]"):
        if _is_news_section(collapse_whitespace(link.get_text())):
            href = link.get("href", "").strip()
            if href:
                return urljoin(base_url, href)

    for node in soup.select(SECTION_TITLE_SELECTOR):
        if _is_news_section(collapse_whitespace(node.get_text())):
            link = node.find("a")
            if link is not None and link.get("href"):
                logger.warning("Section link found through %s fallback", SECTION_TITLE_SELECTOR)
                return urljoin(base_url, link["href"])

    return None


def find_latest_thread_url(soup: BeautifulSoup, base_url: str) -> Optional[str]:
    """Return the absolute URL of the first SkyBlock update thread in list order."""
    for link in soup.select(THREAD_TITLE_SELECTOR):
        href = link.get("href", "").strip()
        if href and is_skyblock_update_title(collapse_whitespace(link.get_text())):
            return urljoin(base_url, href)
    return None


async def resolve_latest_thread(fetcher: PageFetcher, root_url: str) -> ThreadReference:
    """
    Walk from the forum root to the latest SkyBlock update thread.

    Args:
        fetcher: An open PageFetcher
        root_url: Forum index URL, e.g. "https://hypixel.net/forums/"

    Returns:
        ThreadReference for the matched thread

    Raises:
        SectionNotFound: the root page has no News and Announcements link
        ThreadNotFound: the section lists no qualifying thread
        FetchFailed: either page could not be downloaded
    """
    logger.info("Fetching forum index %s", root_url)
    root_page = await fetcher.fetch_page(root_url)

    section_url = find_section_url(root_page.soup(), root_page.url)
    if section_url is None:
        raise SectionNotFound()
    logger.info("Found news section: %s", section_url)

    section_page = await fetcher.fetch_page(section_url)
    thread_url = find_latest_thread_url(section_page.soup(), section_page.url)
    if thread_url is None:
        raise ThreadNotFound()
    logger.info("Found latest update thread: %s", thread_url)

    return ThreadReference(url=thread_url)
