"""
Unit tests for the query classifier.

Tests cover:
- Video URL detection (watch, short links, shorts)
- Channel-reference heuristic used to gate platform enrichment
- Video id extraction
"""

import pytest

from services.query_classifier import (
    QueryKind,
    classify_query,
    extract_video_id,
    is_channel_reference,
)


# =============================================================================
# classify_query
# =============================================================================

class TestClassifyQuery:
    """Routing between video forensics and general analysis."""

    @pytest.mark.parametrize("query", [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ",
        "youtu.be/abc123",
        "https://www.youtube.com/shorts/abc123XYZ",
        "HTTPS://WWW.YOUTUBE.COM/WATCH?v=abc123",
        "check this out https://youtu.be/abc123 please",
    ])
    def test_video_urls_are_video_references(self, query):
        assert classify_query(query) is QueryKind.VIDEO_REFERENCE

    @pytest.mark.parametrize("query", [
        "Stoicism",
        "@ExampleChannel",
        "https://www.youtube.com/@ExampleChannel",
        "https://www.youtube.com/channel/UCabcdefghijklmnopqrstuv",
        "personal finance for teenagers",
        "",
    ])
    def test_everything_else_is_general(self, query):
        assert classify_query(query) is QueryKind.GENERAL

    def test_none_is_general(self):
        assert classify_query(None) is QueryKind.GENERAL


# =============================================================================
# is_channel_reference
# =============================================================================

class TestIsChannelReference:
    """Heuristic deciding whether enrichment is worth attempting."""

    def test_handle_is_channel(self):
        assert is_channel_reference("@ExampleChannel") is True

    def test_handle_with_surrounding_whitespace_is_channel(self):
        assert is_channel_reference("  @ExampleChannel  ") is True

    def test_platform_url_is_channel(self):
        assert is_channel_reference("https://www.YouTube.com/@someone") is True

    def test_short_keyword_is_topic(self):
        assert is_channel_reference("finance") is False
        assert is_channel_reference("Stoicism") is False

    def test_long_name_is_channel(self):
        assert is_channel_reference("The Very Long Channel Name Here") is True

    def test_threshold_is_exclusive(self):
        assert is_channel_reference("a" * 20, min_length=20) is False
        assert is_channel_reference("a" * 21, min_length=20) is True

    def test_custom_threshold(self):
        assert is_channel_reference("finance", min_length=3) is True

    def test_empty_is_not_channel(self):
        assert is_channel_reference("") is False


# =============================================================================
# extract_video_id
# =============================================================================

class TestExtractVideoId:
    """Pulling the id out of a video URL."""

    @pytest.mark.parametrize("reference,expected", [
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://youtu.be/dQw4w9WgXcQ?t=42", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/shorts/abc123XYZ_-", "abc123XYZ_-"),
    ])
    def test_extracts_id(self, reference, expected):
        assert extract_video_id(reference) == expected

    def test_no_id_returns_none(self):
        assert extract_video_id("Stoicism") is None
        assert extract_video_id("") is None
