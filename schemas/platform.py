"""
Platform snapshot schemas.

Verified channel statistics fetched from the YouTube Data API. A snapshot
is immutable once built and lives for a single analysis request.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PlatformVideoStats(_FrozenModel):
    """Per-video public counters."""

    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0


class PlatformVideo(_FrozenModel):
    """One upload from the channel's uploads playlist."""

    id: str
    title: str
    thumbnail_url: str = ""
    published_at: str = ""
    stats: PlatformVideoStats = Field(default_factory=PlatformVideoStats)
    duration: str = "0:00"


class PlatformChannelStats(_FrozenModel):
    """Channel-level public counters."""

    view_count: int = 0
    subscriber_count: int = 0
    video_count: int = 0


class PlatformChannelSnapshot(_FrozenModel):
    """
    Ground-truth view of a channel and its most recent uploads.

    Videos are ordered as the uploads playlist returns them (newest first).
    """

    id: str
    title: str
    stats: PlatformChannelStats = Field(default_factory=PlatformChannelStats)
    videos: tuple[PlatformVideo, ...] = ()
