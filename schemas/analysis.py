"""
Analysis result schemas.

Strictly-typed records produced by the response sanitizer. Field names
serialise to camelCase so the dashboard receives the same JSON shape the
model is asked to produce.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _AnalysisModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# Enumerations
# =============================================================================

class VideoType(str, Enum):
    """Long-form upload or Short."""
    LONG = "Long"
    SHORT = "Short"


class PerformanceLabel(str, Enum):
    """Four-state outlier classification derived from the z-score."""
    OUTLIER_PLUS_PLUS = "Outlier++"
    OUTLIER_PLUS = "Outlier+"
    STANDARD = "Standard"
    UNDERPERFORMER = "Underperformer"


class Level(str, Enum):
    """Low/Medium/High classification used by micro-niche fields."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class PerformanceStatus(str, Enum):
    """How a copycat performed relative to the original."""
    BETTER = "Better"
    WORSE = "Worse"
    SIMILAR = "Similar"


class OriginalityStatus(str, Enum):
    """Forensic verdict for a single video."""
    ORIGINAL = "Original"
    LIKELY_ORIGINAL = "Likely Original"
    DERIVATIVE = "Derivative"
    LIKELY_COPY = "Likely Copy"
    UNCLEAR = "Unclear/Concurrent"


class CopyOutcome(str, Enum):
    SUCCESS = "Success"
    FAIL = "Fail"


class CopyType(str, Enum):
    DIRECT = "Direct"
    DERIVATIVE = "Derivative"
    FORMAT_REUSE = "Format-Reuse"
    THUMBNAIL_MIMIC = "Thumbnail-Mimic"


class ShadowNodeType(str, Enum):
    SOURCE = "Source"
    COPY = "Copy"


class DataSource(str, Enum):
    """Whether an analysis was grounded on fetched platform statistics."""
    PLATFORM = "platform"
    SIMULATED = "simulated"


# =============================================================================
# General / niche analysis
# =============================================================================

class ThumbnailStrategy(_AnalysisModel):
    visual_hook: str = ""
    color_psychology: str = ""
    text_analysis: str = ""
    improvement_suggestion: str = ""


class Video(_AnalysisModel):
    """A scored video record."""

    id: str
    title: str = ""
    thumbnail_url: str = ""
    upload_date: str = ""
    views: int = 0
    likes: int = 0
    comments: int = 0
    duration: str = ""
    video_type: VideoType = Field(default=VideoType.LONG, alias="type")
    z_score: float = 0.0
    views_per_hour: float = 0.0
    performance_label: PerformanceLabel = PerformanceLabel.STANDARD
    thumbnail_strategy: Optional[ThumbnailStrategy] = None


class ChannelProfile(_AnalysisModel):
    name: str = ""
    subscriber_count: str = ""
    avg_views: float = 0.0
    median_views: float = 0.0
    engagement_rate: str = ""
    dominant_sub_niche: str = ""


class ChannelAudit(_AnalysisModel):
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    expansion_opportunities: list[str] = Field(default_factory=list)


class MicroNiche(_AnalysisModel):
    """A narrow content-topic cluster with its own opportunity profile."""

    name: str = ""
    sub_niches: list[str] = Field(default_factory=list)
    demand_score: float = 0.0
    competition_score: float = 0.0
    dominance_ratio: float = Field(default=0.1, ge=0.0, le=1.0)
    monetization_class: Level = Level.MEDIUM
    saturation_level: Level = Level.MEDIUM
    success_probability: float = 0.0
    barrier_to_entry: Level = Level.MEDIUM
    why_it_works: str = ""
    sample_ideas: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)


class Competitor(_AnalysisModel):
    name: str = ""
    subscribers: str = ""
    similarity_score: float = 0.0
    notes: str = ""


class ShadowVideo(_AnalysisModel):
    original_video_id: str = ""
    copycat_channel: str = ""
    copycat_title: str = ""
    performance_status: PerformanceStatus = PerformanceStatus.SIMILAR
    similarity_reason: str = ""


class RoadmapItem(_AnalysisModel):
    title: str = ""
    hook: str = ""
    structure: str = ""
    cta_strategy: str = ""


class GlobalMonetization(_AnalysisModel):
    top_regions: list[str] = Field(default_factory=list)
    avg_rpm: str = Field(default="", alias="avgRPM")


class AnalysisResult(_AnalysisModel):
    """Sanitized output of a general or niche analysis."""

    summary: str = ""
    beginner_opportunity_score: float = Field(default=0.0, ge=0.0, le=100.0)
    success_probability: float = Field(default=0.0, ge=0.0, le=100.0)
    channel_profile: ChannelProfile = Field(default_factory=ChannelProfile)
    channel_audit: Optional[ChannelAudit] = None
    videos: list[Video] = Field(default_factory=list)
    micro_niches: list[MicroNiche] = Field(default_factory=list)
    competitors: list[Competitor] = Field(default_factory=list)
    shadow_analysis: list[ShadowVideo] = Field(default_factory=list)
    content_roadmap: list[RoadmapItem] = Field(default_factory=list)
    global_monetization: GlobalMonetization = Field(default_factory=GlobalMonetization)
    data_source: DataSource = DataSource.SIMULATED


# =============================================================================
# Single-video forensics
# =============================================================================

class SourceMatch(_AnalysisModel):
    source_video_id: str = ""
    source_channel_name: str = ""
    composite_copy_score: float = 0.0
    time_diff_hours: float = 0.0
    copy_type: str = ""


class ReportMicroNiche(_AnalysisModel):
    label: str = ""
    beginner_opportunity_score: float = Field(default=0.0, ge=0.0, le=100.0)


class DeepVideoReport(_AnalysisModel):
    """Forensic originality report for one video."""

    video_id: str = ""
    video_title: str = ""
    originality_status: OriginalityStatus = OriginalityStatus.UNCLEAR
    originality_confidence_pct: float = Field(default=0.0, ge=0.0, le=100.0)
    top_matches: list[SourceMatch] = Field(default_factory=list)
    transcript_similarity: float = 0.0
    title_similarity: float = 0.0
    thumbnail_similarity: float = 0.0
    audio_similarity: float = 0.0
    micro_niche: ReportMicroNiche = Field(default_factory=ReportMicroNiche)
    roadmap: list[RoadmapItem] = Field(default_factory=list)
    improvement_suggestions: list[str] = Field(default_factory=list)


# =============================================================================
# Channel drill-down
# =============================================================================

class CopyEvent(_AnalysisModel):
    source_video_id: str = ""
    source_channel_name: str = ""
    copy_video_id: str = ""
    copy_channel_name: str = ""
    title_similarity: float = 0.0
    transcript_similarity: float = 0.0
    thumbnail_similarity: float = 0.0
    audio_similarity: float = 0.0
    composite_copy_score: float = 0.0
    time_diff_hours: float = 0.0
    copy_outcome: CopyOutcome = CopyOutcome.FAIL
    copy_type: CopyType = CopyType.DERIVATIVE


class ShadowNode(_AnalysisModel):
    id: str = ""
    label: str = ""
    node_type: ShadowNodeType = Field(default=ShadowNodeType.COPY, alias="type")
    date: str = ""


class ShadowEdge(_AnalysisModel):
    source: str = Field(default="", alias="from")
    target: str = Field(default="", alias="to")
    weight: float = 0.0


class ShadowMap(_AnalysisModel):
    nodes: list[ShadowNode] = Field(default_factory=list)
    edges: list[ShadowEdge] = Field(default_factory=list)


class ChannelDrillDown(_AnalysisModel):
    """Competitive deep-dive on a single channel."""

    channel_id: str = ""
    channel_name: str = ""
    subscriber_count: str = ""
    copy_behavior_score: float = Field(default=0.0, ge=0.0, le=100.0)
    originator_score: float = Field(default=0.0, ge=0.0, le=100.0)
    outliers: list[Video] = Field(default_factory=list)
    copy_events: list[CopyEvent] = Field(default_factory=list)
    recommended_micro_niches: list[MicroNiche] = Field(default_factory=list)
    shadow_map_data: ShadowMap = Field(default_factory=ShadowMap)
