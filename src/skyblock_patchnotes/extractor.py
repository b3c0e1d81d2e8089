"""
Turn the first post of an announcement thread into content blocks.

Only the direct children of the post body are classified; nested markup
is looked into for list items and for inline images, nothing more.

Plain lines keep the legacy "§7" prefix the in-game renderer expects.
Every other style is carried by the StyleHint alone.
"""

import logging
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from .models import (
    BLANK_LINE, ContentBlock, ExtractedPost, ImageRef, StyleHint, TextLine,
)
from .utils import HYPIXEL_BASE_URL, collapse_whitespace, normalize_image_url, wrap_text

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Hypixel SkyBlock Update"
MISSING_BODY_MESSAGE = "Could not parse patch notes content"

TITLE_SELECTOR = ".p-title-value"
POST_BODY_SELECTOR = ".message-body .bbWrapper"

PLAIN_PREFIX = "§7"
LIST_BULLET = "  • "
WRAP_WIDTH = 80

HEADING_TAGS = {"h1", "h2", "h3"}
BOLD_TAGS = {"b", "strong"}
LIST_TAGS = {"ul", "ol"}

# Tags whose strings never contribute visible text
_SKIPPED_TEXT_TAGS = {"img", "script", "style"}


def _inside_skipped_tag(node: NavigableString, root: Tag) -> bool:
    parent = node.parent
    while parent is not None and parent is not root:
        if parent.name in _SKIPPED_TEXT_TAGS:
            return True
        parent = parent.parent
    return False


def _text_of(element: Tag) -> str:
    """
    Visible text of an element with images left out.

    Walks the element's strings without touching the tree: any string
    sitting under an ``img`` (or script/style) is ignored, ``<br>`` counts
    as a space, and the result is whitespace-collapsed.
    """
    parts: List[str] = []
    for node in element.descendants:
        if isinstance(node, Tag):
            if node.name == "br":
                parts.append(" ")
            continue
        if isinstance(node, Comment) or _inside_skipped_tag(node, element):
            continue
        parts.append(str(node))
    return collapse_whitespace("".join(parts))


def _image_source(img: Tag) -> Optional[str]:
    # Lazy-loaded attachments keep the real URL in data-src
    src = img.get("src") or img.get("data-src")
    src = src.strip() if src else ""
    return src or None


class ContentExtractor:
    """
    Converts a thread page into an ExtractedPost.

    The extractor keeps no per-call state, so one instance can be shared
    across threads.

    Usage:
        post = ContentExtractor().extract(html)
        for block in post.blocks:
            ...
    """

    def __init__(self, image_base_url: str = HYPIXEL_BASE_URL, wrap_width: int = WRAP_WIDTH):
        self.image_base_url = image_base_url
        self.wrap_width = wrap_width

    def extract(self, html: str) -> ExtractedPost:
        """Parse raw thread HTML and extract title, header image and blocks."""
        return self.extract_from_soup(BeautifulSoup(html, "lxml"))

    def extract_from_soup(self, soup: BeautifulSoup) -> ExtractedPost:
        title_elem = soup.select_one(TITLE_SELECTOR)
        title = collapse_whitespace(title_elem.get_text()) if title_elem else ""
        title = title or DEFAULT_TITLE

        body = soup.select_one(POST_BODY_SELECTOR)
        if body is None:
            logger.warning("No first post body found; emitting error block")
            return ExtractedPost(
                title=title,
                blocks=(TextLine(MISSING_BODY_MESSAGE, StyleHint.ERROR),),
            )

        # First image that actually has a source; bare <img> tags are ignored
        body_images = self._inline_images(body)
        header_image_url = body_images[0] if body_images else None

        blocks = list(self.iter_blocks(body))
        logger.info("Extracted %d blocks from '%s'", len(blocks), title)
        return ExtractedPost(title=title, header_image_url=header_image_url, blocks=tuple(blocks))

    def normalize(self, src: str) -> str:
        return normalize_image_url(src, self.image_base_url)

    def iter_blocks(self, body: Tag) -> Iterable[ContentBlock]:
        """Yield blocks for each direct child element of the post body, in order."""
        for element in body.find_all(True, recursive=False):
            yield from self._element_blocks(element)

    def _element_blocks(self, element: Tag) -> List[ContentBlock]:
        tag = element.name
        text = _text_of(element)

        if tag in HEADING_TAGS:
            return [BLANK_LINE, TextLine(text, StyleHint.HEADER), BLANK_LINE]

        if tag == "img":
            src = _image_source(element)
            if not src:
                return []
            return [ImageRef(self.normalize(src)), BLANK_LINE]

        images = self._inline_images(element)
        if not text and not images:
            return []

        if tag in LIST_TAGS:
            blocks: List[ContentBlock] = [
                TextLine(LIST_BULLET + _text_of(li), StyleHint.LIST_ITEM)
                for li in element.find_all("li")
            ]
            blocks.append(BLANK_LINE)
            return blocks

        blocks = []
        for url in images:
            blocks.append(ImageRef(url))
            blocks.append(BLANK_LINE)

        if not text:
            return blocks

        if tag in BOLD_TAGS:
            blocks.append(TextLine(text, StyleHint.BOLD))
        elif tag == "p":
            for line in wrap_text(text, self.wrap_width):
                blocks.append(TextLine(PLAIN_PREFIX + line, StyleHint.PLAIN))
            blocks.append(BLANK_LINE)
        else:
            blocks.append(TextLine(PLAIN_PREFIX + text, StyleHint.PLAIN))
        return blocks

    def _inline_images(self, element: Tag) -> List[str]:
        """Normalized URLs of every ``img`` under ``element``, in document order."""
        urls = []
        for img in element.find_all("img"):
            src = _image_source(img)
            if src:
                urls.append(self.normalize(src))
        return urls
