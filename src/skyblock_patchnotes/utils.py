"""
Utility functions for the SkyBlock patch notes pipeline.

This module provides the text and URL helpers used by the extractor.
"""

import re
from typing import List

# Host that protocol-less image paths on the forum are served from
HYPIXEL_BASE_URL = "https://hypixel.net"

# Legacy color/format codes ("§7", "§l", ...) used by the in-game renderer
_FORMAT_CODE_RE = re.compile(r"§[0-9a-fk-or]", re.IGNORECASE)


def normalize_image_url(url: str, base_url: str = HYPIXEL_BASE_URL) -> str:
    """
    Make a protocol-relative or host-relative image URL absolute.

    Args:
        url: The raw ``src`` attribute value
        base_url: Scheme and host used for host-relative paths

    Returns:
        An absolute URL

    Rules:
        - "//cdn.example.com/a.png" -> "https://cdn.example.com/a.png"
        - "/attachments/a.png"      -> "https://hypixel.net/attachments/a.png"
        - anything else is returned unchanged

    Example:
        normalize_image_url("/img/a.png")
        # Returns: "https://hypixel.net/img/a.png"
    """
    if url.startswith("//"):
        return "https:" + url
    if url.startswith("/"):
        return base_url + url
    return url


def wrap_text(text: str, max_width: int) -> List[str]:
    """
    Greedily wrap text into lines of at most ``max_width`` characters.

    Args:
        text: Input text, words separated by single spaces
        max_width: Maximum line length

    Returns:
        List of lines. Empty input yields an empty list.

    How it works:
        1. Split the input on single spaces
        2. Append words to the current line, joined by one space
        3. Flush the current line whenever the next word plus one separating
           space would push it past ``max_width``

    A single word longer than ``max_width`` is never split; it gets a line
    of its own. Empty fields from repeated spaces are dropped so no line
    ever carries a trailing space.

    Example:
        wrap_text("the quick brown fox", 10)
        # Returns: ["the quick", "brown fox"]
    """
    lines: List[str] = []
    if not text:
        return lines

    current = ""
    for word in text.split(" "):
        if not word:
            continue
        if current and len(current) + len(word) + 1 > max_width:
            lines.append(current)
            current = ""
        if current:
            current += " "
        current += word

    if current:
        lines.append(current)

    return lines


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace (including newlines) into single spaces and trim."""
    return " ".join(text.split())


def strip_format_codes(text: str) -> str:
    """Remove legacy "§x" format codes, e.g. for terminal display."""
    return _FORMAT_CODE_RE.sub("", text)
