"""
Data models for the SkyBlock patch notes pipeline.

This module defines the typed structures that flow out of the pipeline.
The display surface only ever sees a PatchNotesResult; everything else is
an intermediate value.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, Tuple, Union


class StyleHint(str, Enum):
    """How a text line should be emphasized, independent of any renderer."""
    PLAIN = "plain"
    BOLD = "bold"
    HEADER = "header"
    LIST_ITEM = "list_item"
    LINK = "link"
    ERROR = "error"


@dataclass(frozen=True)
class ThreadReference:
    """
    Absolute URL of the announcement thread chosen by the navigator.

    Example:
        ref = ThreadReference(url="https://hypixel.net/threads/skyblock-0-20-update.123/")
    """
    url: str

    def __post_init__(self):
        if not self.url:
            raise ValueError("ThreadReference.url must not be empty")


@dataclass(frozen=True)
class TextLine:
    """
    One line of styled text.

    Attributes:
        text: The line content. Never contains a newline. An empty string is
              an intentional blank separator line and must be rendered as such.
        style: Emphasis hint for the renderer
    """
    text: str = ""
    style: StyleHint = StyleHint.PLAIN

    def __post_init__(self):
        if "\n" in self.text or "\r" in self.text:
            raise ValueError("TextLine.text must not contain newlines")

    @property
    def is_blank(self) -> bool:
        return self.text == ""

    def to_dict(self) -> dict:
        return {"type": "text", "text": self.text, "style": self.style.value}


@dataclass(frozen=True)
class ImageRef:
    """Reference to an image in the post body; ``url`` is always absolute."""
    url: str

    def to_dict(self) -> dict:
        return {"type": "image", "url": self.url}


ContentBlock = Union[TextLine, ImageRef]

# Shared separator instance; TextLine is immutable so reuse is safe
BLANK_LINE = TextLine()


@dataclass(frozen=True)
class ExtractedPost:
    """Output of the content extractor for a single thread page."""
    title: str
    header_image_url: Optional[str] = None
    blocks: Tuple[ContentBlock, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PatchNotesResult:
    """
    The complete, immutable result of one fetch invocation.

    Attributes:
        title: Thread title (or the fallback title on failure)
        source_url: Thread URL, or the forum root for the fallback result
        header_image_url: First image of the post, shown above the body
        blocks: Content blocks in display order

    Design note:
        ``blocks`` is stored as a tuple so the result can be handed to the
        display thread without any copy or lock.
    """
    title: str
    source_url: Optional[str] = None
    header_image_url: Optional[str] = None
    blocks: Tuple[ContentBlock, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any sequence from callers but always store a tuple
        if not isinstance(self.blocks, tuple):
            object.__setattr__(self, "blocks", tuple(self.blocks))

    @property
    def is_fallback(self) -> bool:
        """True when this result is the fixed error placeholder."""
        return self == FALLBACK_RESULT

    @property
    def image_urls(self) -> Tuple[str, ...]:
        """All image URLs referenced in the body, in display order."""
        return tuple(b.url for b in self.blocks if isinstance(b, ImageRef))

    def to_dict(self) -> dict:
        """Convert the result to a dictionary for JSON serialization.

        Blocks are tagged with a ``type`` field so consumers can tell text
        lines from image references without inspecting keys.
        """
        d = asdict(self)
        d["blocks"] = [b.to_dict() for b in self.blocks]
        return d


# Forum index; also where the fallback result points the user
HYPIXEL_FORUMS_URL = "https://hypixel.net/forums/"

FALLBACK_TITLE = "Error Loading Patch Notes"

# Returned whenever any stage fails. Fixed text, never derived from the error.
FALLBACK_RESULT = PatchNotesResult(
    title=FALLBACK_TITLE,
    source_url=HYPIXEL_FORUMS_URL,
    header_image_url=None,
    blocks=(
        TextLine("Could not fetch patch notes from Hypixel forums.", StyleHint.ERROR),
        TextLine("§7Please check your internet connection and try again.", StyleHint.PLAIN),
        BLANK_LINE,
        TextLine("§7You can view patch notes directly at:", StyleHint.PLAIN),
        TextLine(HYPIXEL_FORUMS_URL, StyleHint.LINK),
    ),
)
