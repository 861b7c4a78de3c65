"""
Shared pytest fixtures for the NicheScope test suite.

Provides reusable fixtures for:
- Platform snapshots (ground truth)
- Session credentials
- Raw model payloads for each analysis variant
- Mock model clients
"""

import json
from datetime import datetime, timezone

import pytest
from unittest.mock import AsyncMock, MagicMock

from executor.execute import SessionContext
from schemas.platform import (
    PlatformChannelSnapshot,
    PlatformChannelStats,
    PlatformVideo,
    PlatformVideoStats,
)


# =============================================================================
# Time Fixtures
# =============================================================================

@pytest.fixture
def fixed_now():
    """Reference time used for views-per-hour calculations."""
    return datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Platform Snapshot Fixtures
# =============================================================================

def make_video(video_id, title, views, published_at="2025-02-20T12:00:00Z", thumbnail=None):
    """Build a PlatformVideo with sensible defaults."""
    return PlatformVideo(
        id=video_id,
        title=title,
        thumbnail_url=thumbnail if thumbnail is not None else f"https://i.ytimg.com/vi/{video_id}/mqdefault.jpg",
        published_at=published_at,
        stats=PlatformVideoStats(view_count=views, like_count=views // 20, comment_count=views // 200),
        duration="10:05",
    )


@pytest.fixture
def video_factory():
    """Factory for PlatformVideo instances."""
    return make_video


@pytest.fixture
def snapshot_factory():
    """Factory for PlatformChannelSnapshot instances."""
    def _make(videos=(), title="Example Channel", channel_id="UCabcdefghijklmnopqrstuv"):
        return PlatformChannelSnapshot(
            id=channel_id,
            title=title,
            stats=PlatformChannelStats(
                view_count=sum(v.stats.view_count for v in videos),
                subscriber_count=125000,
                video_count=len(videos),
            ),
            videos=tuple(videos),
        )
    return _make


@pytest.fixture
def channel_snapshot(snapshot_factory):
    """Snapshot of a small channel with one clear outlier."""
    return snapshot_factory([
        make_video("vidAAAAAAA1", "Ep 1: Intro", 1000),
        make_video("vidAAAAAAA2", "Ep 2: The Hook", 1200),
        make_video("vidAAAAAAA3", "Ep 3: Why Nobody Talks About This", 25000),
        make_video("vidAAAAAAA4", "Ep 4: Follow Up", 900),
        make_video("vidAAAAAAA5", "Ep 5: Q&A", 1100),
    ])


# =============================================================================
# Session Fixtures
# =============================================================================

@pytest.fixture
def model_only_context():
    """Session with a model key but no platform key."""
    return SessionContext(model_api_key="model-test-key")


@pytest.fixture
def full_context():
    """Session with both model and platform keys."""
    return SessionContext(model_api_key="model-test-key", platform_api_key="yt-test-key")


# =============================================================================
# Raw Model Payload Fixtures
# =============================================================================

@pytest.fixture
def raw_analysis():
    """A well-formed general analysis as the model returns it."""
    return {
        "summary": "Stoic self-improvement is under-served for beginners.",
        "beginnerOpportunityScore": 82,
        "successProbability": 76,
        "channelProfile": {
            "name": "Example Channel",
            "subscriberCount": "125K",
            "avgViews": 5840,
            "medianViews": 1100,
            "engagementRate": "4.2%",
            "dominantSubNiche": "Daily stoic lessons",
        },
        "channelAudit": {
            "strengths": ["Consistent uploads"],
            "weaknesses": ["Weak thumbnails"],
            "expansionOpportunities": ["Shorts"],
        },
        "videos": [
            {
                "id": "vidAAAAAAA3",
                "title": "Ep 3: Why Nobody Talks About This",
                "thumbnailUrl": "https://i.ytimg.com/vi/vidAAAAAAA3/mqdefault.jpg",
                "uploadDate": "2025-02-20",
                "views": 25000,
                "likes": 1250,
                "comments": 125,
                "duration": "10:05",
                "type": "Long",
                "zScore": 2.0,
                "viewsPerHour": 115.7,
                "performanceLabel": "Outlier+",
                "thumbnailStrategy": {
                    "visualHook": "Shocked face",
                    "colorPsychology": "High-contrast yellow",
                    "textAnalysis": "Three words",
                    "improvementSuggestion": "Bigger text",
                },
            }
        ],
        "microNiches": [
            {
                "name": "Stoicism for students",
                "subNiches": ["Exam stress"],
                "demandScore": 80,
                "competitionScore": 30,
                "dominanceRatio": 0.25,
                "monetizationClass": "High",
                "saturationLevel": "Low",
                "successProbability": 78,
                "barrierToEntry": "Low",
                "whyItWorks": "Search demand outpaces supply.",
                "sampleIdeas": ["Marcus Aurelius before exams"],
                "keywords": ["stoicism", "students"],
            }
        ],
        "competitors": [
            {"name": "Daily Stoic", "subscribers": "1.2M", "similarityScore": 70, "notes": "Market leader"}
        ],
        "shadowAnalysis": [],
        "contentRoadmap": [
            {"title": "Stoic morning", "hook": "You wake up wrong", "structure": "3 acts", "ctaStrategy": "Subscribe"}
        ],
        "globalMonetization": {"topRegions": ["US", "UK"], "avgRPM": "$6.50"},
    }


@pytest.fixture
def raw_video_report():
    """A well-formed forensic video report."""
    return {
        "videoId": "dQw4w9WgXcQ",
        "videoTitle": "Original upload",
        "originalityStatus": "Likely Original",
        "originalityConfidencePct": 87,
        "topMatches": [
            {
                "sourceVideoId": "xyz987",
                "sourceChannelName": "Other Channel",
                "compositeCopyScore": 35,
                "timeDiffHours": -12,
                "copyType": "Format-Reuse",
            }
        ],
        "transcriptSimilarity": 20,
        "titleSimilarity": 40,
        "thumbnailSimilarity": 15,
        "audioSimilarity": 5,
        "microNiche": {"label": "Retro gaming", "beginnerOpportunityScore": 64},
        "roadmap": [{"title": "Step 1", "hook": "h", "structure": "s", "ctaStrategy": "c"}],
        "improvementSuggestions": ["Tighter intro"],
    }


@pytest.fixture
def raw_drill_down():
    """A well-formed channel drill-down."""
    return {
        "channelId": "UCabcdefghijklmnopqrstuv",
        "channelName": "Example Channel",
        "subscriberCount": "125K",
        "copyBehaviorScore": 40,
        "originatorScore": 72,
        "outliers": [{"id": "o1", "title": "Big one", "views": 90000, "performanceLabel": "Outlier++"}],
        "copyEvents": [
            {
                "sourceVideoId": "s1",
                "sourceChannelName": "Big Channel",
                "copyVideoId": "c1",
                "copyChannelName": "Example Channel",
                "titleSimilarity": 80,
                "transcriptSimilarity": 60,
                "thumbnailSimilarity": 70,
                "audioSimilarity": 10,
                "compositeCopyScore": 63,
                "timeDiffHours": 48,
                "copyOutcome": "Success",
                "copyType": "Thumbnail-Mimic",
            }
        ],
        "recommendedMicroNiches": [{"name": "Stoic parenting", "successProbability": 74}],
        "shadowMapData": {
            "nodes": [
                {"id": "s1", "label": "Source", "type": "Source", "date": "2025-01-01"},
                {"id": "c1", "label": "Copy", "type": "Copy", "date": "2025-01-03"},
            ],
            "edges": [{"from": "s1", "to": "c1", "weight": 0.8}],
        },
    }


# =============================================================================
# Model Client Fixtures
# =============================================================================

@pytest.fixture
def model_client_factory():
    """
    Factory for mock model clients.

    The returned client's generate() resolves to the JSON encoding of
    `payload` (or to `text` verbatim when given).
    """
    def _make(payload=None, text=None, side_effect=None):
        client = MagicMock()
        if side_effect is not None:
            client.generate = AsyncMock(side_effect=side_effect)
        else:
            client.generate = AsyncMock(
                return_value=text if text is not None else json.dumps(payload)
            )
        return client
    return _make
