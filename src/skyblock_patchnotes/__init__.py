"""
SkyBlock Patch Notes

This package finds the latest Hypixel SkyBlock update announcement on the
Hypixel forums and turns its first post into display-ready content blocks.

Main components:
- PatchNotesScraper: Orchestrates navigation, download and extraction
- ContentExtractor: Converts the first post's HTML into content blocks
- resolve_latest_thread: Two-hop walk from the forum root to the thread
- PatchNotesResult / TextLine / ImageRef: Data models for the output

Usage:
    from skyblock_patchnotes import fetch_latest_patch_notes

    future = fetch_latest_patch_notes()
    result = future.result()
    for block in result.blocks:
        print(block)
"""

from .errors import FetchFailed, NotFound, PatchNotesError, SectionNotFound, ThreadNotFound
from .extractor import ContentExtractor
from .fetcher import PageFetcher
from .models import (
    ContentBlock, ExtractedPost, ImageRef, PatchNotesResult, StyleHint, TextLine, ThreadReference,
)
from .navigator import resolve_latest_thread
from .scraper import (
    FALLBACK_RESULT, HYPIXEL_FORUMS_URL, PatchNotesScraper, deliver_on, fetch_latest_patch_notes,
)
from .utils import normalize_image_url, wrap_text

__all__ = [
    'PatchNotesScraper',
    'fetch_latest_patch_notes',
    'deliver_on',
    'FALLBACK_RESULT',
    'HYPIXEL_FORUMS_URL',
    'ContentExtractor',
    'PageFetcher',
    'resolve_latest_thread',
    'PatchNotesResult',
    'ExtractedPost',
    'ContentBlock',
    'TextLine',
    'ImageRef',
    'StyleHint',
    'ThreadReference',
    'PatchNotesError',
    'NotFound',
    'SectionNotFound',
    'ThreadNotFound',
    'FetchFailed',
    'normalize_image_url',
    'wrap_text',
]

__version__ = '1.0.0'
