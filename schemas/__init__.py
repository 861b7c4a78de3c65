"""
Schemas module for NicheScope.

Platform snapshots, sanitized analysis records and HTTP bodies.
"""

from schemas.platform import (
    PlatformChannelSnapshot,
    PlatformChannelStats,
    PlatformVideo,
    PlatformVideoStats,
)
from schemas.analysis import (
    AnalysisResult,
    ChannelDrillDown,
    DeepVideoReport,
    MicroNiche,
    Video,
)

__all__ = [
    "PlatformChannelSnapshot",
    "PlatformChannelStats",
    "PlatformVideo",
    "PlatformVideoStats",
    "AnalysisResult",
    "ChannelDrillDown",
    "DeepVideoReport",
    "MicroNiche",
    "Video",
]
