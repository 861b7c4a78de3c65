"""
Unit tests for ModelRequestBuilder.

Tests cover:
- Ground-truth vs. full-simulation instructions
- Payload contents (excerpt size, outlier parts, thumbnails)
- Per-variant temperature and schema
"""

import json

import pytest

from config import config

from executor.request_builder import (
    AnalysisVariant,
    ModelRequestBuilder,
    VARIANT_TEMPERATURES,
)
from executor.response_schemas import (
    ANALYSIS_SCHEMA,
    CHANNEL_DRILL_DOWN_SCHEMA,
    VIDEO_REPORT_SCHEMA,
)


@pytest.fixture
def builder():
    return ModelRequestBuilder(excerpt_size=15, top_outlier_count=5)


def text_parts(request):
    return [part["text"] for part in request.payload if part["type"] == "text"]


def image_urls(request):
    return [part["image_url"]["url"] for part in request.payload if part["type"] == "image_url"]


# =============================================================================
# General Analysis
# =============================================================================

class TestBuildGeneral:
    """General/niche request construction."""

    def test_without_snapshot_is_full_simulation(self, builder):
        request = builder.build_general("Stoicism")

        assert request.variant is AnalysisVariant.GENERAL
        assert request.grounded is False
        assert "FULL SIMULATION" in request.instruction
        assert "ground truth" not in request.instruction.lower()
        assert len(request.payload) == 1
        assert "Stoicism" in request.payload[0]["text"]
        assert image_urls(request) == []

    def test_with_snapshot_is_ground_truth(self, builder, channel_snapshot, fixed_now):
        request = builder.build_general("@ExampleChannel", channel_snapshot, now=fixed_now)

        assert request.grounded is True
        assert "ground truth" in request.instruction.lower()
        assert "Do NOT contradict" in request.instruction
        assert "FULL SIMULATION" not in request.instruction
        assert "Example Channel" in request.instruction
        assert "125000" in request.instruction

    def test_ground_truth_payload_carries_recent_videos(self, builder, channel_snapshot, fixed_now):
        request = builder.build_general("@ExampleChannel", channel_snapshot, now=fixed_now)

        data_part = next(t for t in text_parts(request) if t.startswith("REAL CHANNEL DATA"))
        data = json.loads(data_part.split("\n", 1)[1])
        assert [v["title"] for v in data["recentVideos"]] == [
            v.title for v in channel_snapshot.videos
        ]
        assert data["recentVideos"][2]["views"] == 25000

    def test_excerpt_is_capped(self, video_factory, snapshot_factory, fixed_now):
        videos = [video_factory(f"vid{i:08d}", f"Video {i}", 100 + i) for i in range(30)]
        builder = ModelRequestBuilder(excerpt_size=15, top_outlier_count=5)

        request = builder.build_general("@Big", snapshot_factory(videos), now=fixed_now)

        data_part = next(t for t in text_parts(request) if t.startswith("REAL CHANNEL DATA"))
        data = json.loads(data_part.split("\n", 1)[1])
        assert len(data["recentVideos"]) == 15
        assert data["recentVideos"][0]["title"] == "Video 0"

    def test_top_outliers_attached_with_thumbnails(self, builder, channel_snapshot, fixed_now):
        request = builder.build_general("@ExampleChannel", channel_snapshot, now=fixed_now)

        outliers = [
            json.loads(t[len("TOP OUTLIER: "):])
            for t in text_parts(request)
            if t.startswith("TOP OUTLIER: ")
        ]
        assert len(outliers) == 5
        assert outliers[0]["id"] == "vidAAAAAAA3"
        assert outliers[0]["zScore"] >= outliers[-1]["zScore"]
        assert len(image_urls(request)) == 5
        assert image_urls(request)[0] == "https://i.ytimg.com/vi/vidAAAAAAA3/mqdefault.jpg"

    def test_outlier_without_thumbnail_has_no_image(self, video_factory, snapshot_factory, fixed_now):
        snapshot = snapshot_factory([
            video_factory("vidBBBBBBB1", "No thumb", 9000, thumbnail=""),
            video_factory("vidBBBBBBB2", "Small", 10),
        ])
        builder = ModelRequestBuilder(top_outlier_count=1)

        request = builder.build_general("@ExampleChannel", snapshot, now=fixed_now)

        assert image_urls(request) == []
        assert sum(t.startswith("TOP OUTLIER: ") for t in text_parts(request)) == 1

    def test_zero_sizes_are_respected(self, channel_snapshot, fixed_now):
        builder = ModelRequestBuilder(excerpt_size=0, top_outlier_count=0)

        request = builder.build_general("@ExampleChannel", channel_snapshot, now=fixed_now)

        data_part = next(t for t in text_parts(request) if t.startswith("REAL CHANNEL DATA"))
        assert json.loads(data_part.split("\n", 1)[1])["recentVideos"] == []
        assert not any(t.startswith("TOP OUTLIER: ") for t in text_parts(request))
        assert image_urls(request) == []

    def test_sizes_default_to_config(self, monkeypatch):
        monkeypatch.setattr(config.analysis, "ground_truth_excerpt_size", 7)
        monkeypatch.setattr(config.analysis, "top_outlier_count", 3)

        builder = ModelRequestBuilder()

        assert builder.excerpt_size == 7
        assert builder.top_outlier_count == 3

    def test_empty_snapshot_is_still_grounded(self, builder, snapshot_factory):
        request = builder.build_general("@Empty", snapshot_factory([]))

        assert request.grounded is True
        assert image_urls(request) == []

    def test_schema_and_temperature(self, builder):
        request = builder.build_general("Stoicism")
        assert request.schema is ANALYSIS_SCHEMA
        assert request.temperature == VARIANT_TEMPERATURES[AnalysisVariant.GENERAL] == 0.7


# =============================================================================
# Video Forensics & Drill-Down
# =============================================================================

class TestOtherVariants:
    """Forensics and drill-down requests."""

    def test_video_forensics(self, builder):
        url = "https://youtu.be/dQw4w9WgXcQ"
        request = builder.build_video_forensics(url)

        assert request.variant is AnalysisVariant.VIDEO_FORENSICS
        assert request.schema is VIDEO_REPORT_SCHEMA
        assert request.temperature == 0.5
        assert url in request.payload[0]["text"]
        assert request.grounded is False

    def test_channel_drill_down(self, builder):
        request = builder.build_channel_drill_down("Example Channel")

        assert request.variant is AnalysisVariant.CHANNEL_DRILL_DOWN
        assert request.schema is CHANNEL_DRILL_DOWN_SCHEMA
        assert request.temperature == 0.6
        assert "Example Channel" in request.payload[0]["text"]
        assert "FULL SIMULATION" in request.instruction

    def test_requests_are_immutable(self, builder):
        request = builder.build_video_forensics("https://youtu.be/abc123")
        with pytest.raises(Exception):
            request.temperature = 1.0
