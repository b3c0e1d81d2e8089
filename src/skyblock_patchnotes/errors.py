"""
Exception hierarchy for the SkyBlock patch notes pipeline.

None of these ever reach a caller of ``fetch_latest_patch_notes``: the
orchestrator converts every failure into the fixed fallback result.
"""

from typing import Optional


class PatchNotesError(Exception):
    """Base class for all pipeline errors."""


class NotFound(PatchNotesError):
    """A required link could not be located on a forum page."""

    def __init__(self, stage: str):
        super().__init__(f"Could not find {stage}")
        self.stage = stage


class SectionNotFound(NotFound):
    """The News and Announcements sub-forum link is missing from the root page."""

    def __init__(self):
        super().__init__("section")


class ThreadNotFound(NotFound):
    """No SkyBlock update thread is listed on the section page."""

    def __init__(self):
        super().__init__("thread")


class FetchFailed(PatchNotesError):
    """A page could not be downloaded (timeout, connection error, non-2xx)."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code
