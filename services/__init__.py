"""
Services module for NicheScope.

Pure query heuristics used to route an analysis request.
"""

from .query_classifier import (
    QueryKind,
    classify_query,
    extract_video_id,
    is_channel_reference,
)

__all__ = [
    "QueryKind",
    "classify_query",
    "extract_video_id",
    "is_channel_reference",
]
