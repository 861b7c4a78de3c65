"""
Query Classifier: decides how a submitted query is analysed.

Pure string predicates, no network calls and no LLM involvement:
  - classify_query:        video URL vs. general (channel / niche) query
  - is_channel_reference:  whether platform enrichment is worth attempting
  - extract_video_id:      pull the 11-char video id out of a video URL
"""

import logging
import re
from enum import Enum
from typing import Optional

from config import config

logger = logging.getLogger(__name__)

# ── Video URL shapes ────────────────────────────────────────────────────────
_VIDEO_URL_PATTERN = re.compile(
    r"(?:youtube\.com/watch|youtu\.be/|youtube\.com/shorts/)",
    flags=re.IGNORECASE,
)

_VIDEO_ID_PATTERN = re.compile(
    r"(?:[?&]v=|youtu\.be/|/shorts/)([A-Za-z0-9_-]{6,})",
    flags=re.IGNORECASE,
)

# ── Channel reference markers ───────────────────────────────────────────────
PLATFORM_URL_FRAGMENT = "youtube.com"
HANDLE_MARKER = "@"


class QueryKind(str, Enum):
    """Which analysis variant a query is routed to."""
    VIDEO_REFERENCE = "video"
    GENERAL = "general"


def classify_query(query: str) -> QueryKind:
    """
    Classify a raw query string.

    Examples:
        "https://youtu.be/abc123"                 → VIDEO_REFERENCE
        "https://www.youtube.com/watch?v=abc123"  → VIDEO_REFERENCE
        "Stoicism"                                → GENERAL
        "@ExampleChannel"                         → GENERAL
    """
    if _VIDEO_URL_PATTERN.search(query or ""):
        return QueryKind.VIDEO_REFERENCE
    return QueryKind.GENERAL


def is_channel_reference(query: str, min_length: Optional[int] = None) -> bool:
    """
    Heuristic: does this general query name a channel rather than a topic?

    True when the query contains a YouTube URL fragment, starts with a
    handle marker, or is longer than the proper-name length threshold.
    Short bare keywords ("finance", "Stoicism") are topics.
    """
    if not query:
        return False

    threshold = config.analysis.channel_name_min_length if min_length is None else min_length
    text = query.strip()

    return (
        PLATFORM_URL_FRAGMENT in text.lower()
        or text.startswith(HANDLE_MARKER)
        or len(text) > threshold
    )


def extract_video_id(video_reference: str) -> Optional[str]:
    """Return the video id embedded in a video URL, or None."""
    match = _VIDEO_ID_PATTERN.search(video_reference or "")
    if not match:
        logger.debug(f"[QueryClassifier] no video id in reference: {video_reference!r}")
        return None
    return match.group(1)
