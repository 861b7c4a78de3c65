"""
Response sanitizer for model output.

Converts the loosely-typed JSON tree returned by the model into strictly
typed records. Every field access is treated as fallible: missing or
malformed values are coerced to documented defaults instead of raising.

Guarantees:
  - Every list field is present (possibly empty)
  - Video ids are unique within a result
  - Sanitizing an already-sanitized result returns an identical result
"""

import logging
import math
from enum import Enum
from typing import Any, Optional, TypeVar

from schemas.analysis import (
    AnalysisResult,
    ChannelAudit,
    ChannelDrillDown,
    ChannelProfile,
    Competitor,
    CopyEvent,
    CopyOutcome,
    CopyType,
    DataSource,
    DeepVideoReport,
    GlobalMonetization,
    Level,
    MicroNiche,
    OriginalityStatus,
    PerformanceLabel,
    PerformanceStatus,
    ReportMicroNiche,
    RoadmapItem,
    ShadowEdge,
    ShadowMap,
    ShadowNode,
    ShadowNodeType,
    ShadowVideo,
    SourceMatch,
    ThumbnailStrategy,
    Video,
    VideoType,
)
from schemas.platform import PlatformChannelSnapshot, PlatformVideo
from services.query_classifier import extract_video_id

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# ── Documented defaults ─────────────────────────────────────────────────────
DEFAULT_WHY_IT_WORKS = "High demand and low competition detected."
DEFAULT_DOMINANCE_RATIO = 0.1

PLACEHOLDER_HOST = "picsum.photos"
PLACEHOLDER_URL_TEMPLATE = "https://picsum.photos/seed/{seed}/320/180"


# =============================================================================
# Coercion helpers
# =============================================================================

def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _as_dicts(value: Any) -> list[dict[str, Any]]:
    """List of objects; non-object entries are dropped."""
    return [item for item in _as_list(value) if isinstance(item, dict)]


def _as_str(value: Any, default: str = "") -> str:
    if value is None or isinstance(value, (dict, list)):
        return default
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return default
    return str(value)


def _as_strings(value: Any) -> list[str]:
    return [
        str(item) if not isinstance(item, str) else item
        for item in _as_list(value)
        if isinstance(item, (str, int, float)) and not isinstance(item, bool)
    ]


def _as_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.replace(",", "").strip().rstrip("%")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def _as_int(value: Any, default: int = 0) -> int:
    return int(_as_float(value, float(default)))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _as_score(value: Any) -> float:
    """0-100 score."""
    return _clamp(_as_float(value), 0.0, 100.0)


def _as_enum(value: Any, enum_cls: type[E], default: E) -> E:
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return default


def _first_present(raw: dict[str, Any], key: str, default: Any) -> Any:
    """Return raw[key] unless it is missing, None or an empty string."""
    value = raw.get(key)
    if value is None or value == "":
        return default
    return value


# =============================================================================
# Shared records
# =============================================================================

def is_placeholder_thumbnail(url: str) -> bool:
    return PLACEHOLDER_HOST in url


def placeholder_thumbnail(seed: str) -> str:
    """Deterministic placeholder image keyed by the video id."""
    return PLACEHOLDER_URL_TEMPLATE.format(seed=seed)


def _match_by_title(
    title: str,
    snapshot: Optional[PlatformChannelSnapshot],
) -> Optional[PlatformVideo]:
    """
    Find the snapshot video with exactly this title.

    Case-sensitive exact match only: "Ep 1: Intro " does not match
    "Ep 1: Intro". Near-duplicates are never merged.
    """
    if snapshot is None or not title:
        return None
    for video in snapshot.videos:
        if video.title == title:
            return video
    return None


def _sanitize_thumbnail_strategy(value: Any) -> Optional[ThumbnailStrategy]:
    if not isinstance(value, dict):
        return None
    return ThumbnailStrategy(
        visual_hook=_as_str(value.get("visualHook")),
        color_psychology=_as_str(value.get("colorPsychology")),
        text_analysis=_as_str(value.get("textAnalysis")),
        improvement_suggestion=_as_str(value.get("improvementSuggestion")),
    )


def sanitize_videos(
    raw_videos: Any,
    snapshot: Optional[PlatformChannelSnapshot] = None,
) -> list[Video]:
    """
    Normalize a list of model video records.

    Id resolution: model id → snapshot id (exact title match, only when the
    model gave no id) → "vid-<index>". Colliding ids are re-keyed to the
    positional id so ids stay unique.

    Thumbnail reconciliation: when the thumbnail is absent or a placeholder
    and a snapshot is available, the authentic thumbnail is recovered by
    exact title match; otherwise a placeholder keyed by the id is used.
    """
    videos: list[Video] = []
    seen_ids: set[str] = set()

    for index, raw in enumerate(_as_dicts(raw_videos)):
        title = _as_str(raw.get("title"))
        thumbnail = _as_str(raw.get("thumbnailUrl"))

        match = None
        if not thumbnail or is_placeholder_thumbnail(thumbnail):
            match = _match_by_title(title, snapshot)

        video_id = _as_str(raw.get("id")) or (match.id if match else "") or f"vid-{index}"
        if video_id in seen_ids:
            video_id = f"vid-{index}"
            suffix = 1
            while video_id in seen_ids:
                video_id = f"vid-{index}-{suffix}"
                suffix += 1
        seen_ids.add(video_id)

        if match and match.thumbnail_url:
            thumbnail = match.thumbnail_url
        elif not thumbnail or (snapshot is not None and is_placeholder_thumbnail(thumbnail)):
            thumbnail = placeholder_thumbnail(video_id)

        videos.append(Video(
            id=video_id,
            title=title,
            thumbnail_url=thumbnail,
            upload_date=_as_str(raw.get("uploadDate")),
            views=_as_int(raw.get("views")),
            likes=_as_int(raw.get("likes")),
            comments=_as_int(raw.get("comments")),
            duration=_as_str(raw.get("duration")),
            video_type=_as_enum(raw.get("type"), VideoType, VideoType.LONG),
            z_score=_as_float(raw.get("zScore")),
            views_per_hour=_as_float(raw.get("viewsPerHour")),
            performance_label=_as_enum(
                raw.get("performanceLabel"), PerformanceLabel, PerformanceLabel.STANDARD
            ),
            thumbnail_strategy=_sanitize_thumbnail_strategy(raw.get("thumbnailStrategy")),
        ))

    return videos


def sanitize_micro_niches(raw_niches: Any) -> list[MicroNiche]:
    """
    Normalize micro-niche clusters.

    Missing optional fields receive fixed defaults so every entry renders:
    subNiches=[], whyItWorks=DEFAULT_WHY_IT_WORKS, sampleIdeas=[],
    dominanceRatio=DEFAULT_DOMINANCE_RATIO (clamped to [0, 1]).
    """
    niches = []
    for raw in _as_dicts(raw_niches):
        dominance = raw.get("dominanceRatio")
        if dominance is None or isinstance(dominance, bool):
            dominance_ratio = DEFAULT_DOMINANCE_RATIO
        else:
            dominance_ratio = _clamp(
                _as_float(dominance, DEFAULT_DOMINANCE_RATIO), 0.0, 1.0
            )

        niches.append(MicroNiche(
            name=_as_str(raw.get("name")),
            sub_niches=_as_strings(raw.get("subNiches")),
            demand_score=_as_score(raw.get("demandScore")),
            competition_score=_as_score(raw.get("competitionScore")),
            dominance_ratio=dominance_ratio,
            monetization_class=_as_enum(raw.get("monetizationClass"), Level, Level.MEDIUM),
            saturation_level=_as_enum(raw.get("saturationLevel"), Level, Level.MEDIUM),
            success_probability=_as_score(raw.get("successProbability")),
            barrier_to_entry=_as_enum(raw.get("barrierToEntry"), Level, Level.MEDIUM),
            why_it_works=_as_str(_first_present(raw, "whyItWorks", DEFAULT_WHY_IT_WORKS)),
            sample_ideas=_as_strings(raw.get("sampleIdeas")),
            keywords=_as_strings(raw.get("keywords")),
        ))
    return niches


def _sanitize_roadmap(raw_items: Any) -> list[RoadmapItem]:
    return [
        RoadmapItem(
            title=_as_str(raw.get("title")),
            hook=_as_str(raw.get("hook")),
            structure=_as_str(raw.get("structure")),
            cta_strategy=_as_str(raw.get("ctaStrategy")),
        )
        for raw in _as_dicts(raw_items)
    ]


# =============================================================================
# General / niche analysis
# =============================================================================

def _sanitize_channel_audit(value: Any) -> Optional[ChannelAudit]:
    if not isinstance(value, dict):
        return None
    return ChannelAudit(
        strengths=_as_strings(value.get("strengths")),
        weaknesses=_as_strings(value.get("weaknesses")),
        expansion_opportunities=_as_strings(value.get("expansionOpportunities")),
    )


def sanitize_analysis(
    raw: Any,
    snapshot: Optional[PlatformChannelSnapshot] = None,
    data_source: Optional[DataSource] = None,
) -> AnalysisResult:
    """
    Normalize a general/niche analysis.

    Args:
        raw: Parsed model output (any JSON value).
        snapshot: Ground-truth snapshot used for the request, if any.
        data_source: Provenance decided by the caller. Defaults to PLATFORM
            when a snapshot is given, else SIMULATED. Any "dataSource"
            value in the model output is ignored.

    Returns:
        AnalysisResult with every list field present. Never raises.
    """
    data = _as_dict(raw)
    profile = _as_dict(data.get("channelProfile"))
    monetization = _as_dict(data.get("globalMonetization"))

    if data_source is None:
        data_source = DataSource.PLATFORM if snapshot is not None else DataSource.SIMULATED

    result = AnalysisResult(
        summary=_as_str(data.get("summary")),
        beginner_opportunity_score=_as_score(data.get("beginnerOpportunityScore")),
        success_probability=_as_score(data.get("successProbability")),
        channel_profile=ChannelProfile(
            name=_as_str(profile.get("name")),
            subscriber_count=_as_str(profile.get("subscriberCount")),
            avg_views=_as_float(profile.get("avgViews")),
            median_views=_as_float(profile.get("medianViews")),
            engagement_rate=_as_str(profile.get("engagementRate")),
            dominant_sub_niche=_as_str(profile.get("dominantSubNiche")),
        ),
        channel_audit=_sanitize_channel_audit(data.get("channelAudit")),
        videos=sanitize_videos(data.get("videos"), snapshot),
        micro_niches=sanitize_micro_niches(data.get("microNiches")),
        competitors=[
            Competitor(
                name=_as_str(item.get("name")),
                subscribers=_as_str(item.get("subscribers")),
                similarity_score=_as_score(item.get("similarityScore")),
                notes=_as_str(item.get("notes")),
            )
            for item in _as_dicts(data.get("competitors"))
        ],
        shadow_analysis=[
            ShadowVideo(
                original_video_id=_as_str(item.get("originalVideoId")),
                copycat_channel=_as_str(item.get("copycatChannel")),
                copycat_title=_as_str(item.get("copycatTitle")),
                performance_status=_as_enum(
                    item.get("performanceStatus"), PerformanceStatus, PerformanceStatus.SIMILAR
                ),
                similarity_reason=_as_str(item.get("similarityReason")),
            )
            for item in _as_dicts(data.get("shadowAnalysis"))
        ],
        content_roadmap=_sanitize_roadmap(data.get("contentRoadmap")),
        global_monetization=GlobalMonetization(
            top_regions=_as_strings(monetization.get("topRegions")),
            avg_rpm=_as_str(monetization.get("avgRPM")),
        ),
        data_source=data_source,
    )

    logger.debug(
        f"Sanitized analysis: videos={len(result.videos)} "
        f"niches={len(result.micro_niches)} competitors={len(result.competitors)} "
        f"source={result.data_source.value}"
    )
    return result


# =============================================================================
# Single-video forensics
# =============================================================================

def sanitize_video_report(
    raw: Any,
    video_reference: Optional[str] = None,
) -> DeepVideoReport:
    """
    Normalize a forensic video report.

    The video id falls back to the id embedded in the submitted URL.
    """
    data = _as_dict(raw)
    niche = _as_dict(data.get("microNiche"))

    video_id = _as_str(data.get("videoId"))
    if not video_id and video_reference:
        video_id = extract_video_id(video_reference) or ""

    return DeepVideoReport(
        video_id=video_id,
        video_title=_as_str(data.get("videoTitle")),
        originality_status=_as_enum(
            data.get("originalityStatus"), OriginalityStatus, OriginalityStatus.UNCLEAR
        ),
        originality_confidence_pct=_as_score(data.get("originalityConfidencePct")),
        top_matches=[
            SourceMatch(
                source_video_id=_as_str(item.get("sourceVideoId")),
                source_channel_name=_as_str(item.get("sourceChannelName")),
                composite_copy_score=_as_score(item.get("compositeCopyScore")),
                time_diff_hours=_as_float(item.get("timeDiffHours")),
                copy_type=_as_str(item.get("copyType")),
            )
            for item in _as_dicts(data.get("topMatches"))
        ],
        transcript_similarity=_as_score(data.get("transcriptSimilarity")),
        title_similarity=_as_score(data.get("titleSimilarity")),
        thumbnail_similarity=_as_score(data.get("thumbnailSimilarity")),
        audio_similarity=_as_score(data.get("audioSimilarity")),
        micro_niche=ReportMicroNiche(
            label=_as_str(niche.get("label")),
            beginner_opportunity_score=_as_score(niche.get("beginnerOpportunityScore")),
        ),
        roadmap=_sanitize_roadmap(data.get("roadmap")),
        improvement_suggestions=_as_strings(data.get("improvementSuggestions")),
    )


# =============================================================================
# Channel drill-down
# =============================================================================

def sanitize_channel_drill_down(raw: Any) -> ChannelDrillDown:
    """Normalize a channel drill-down. Outliers follow the video rules above."""
    data = _as_dict(raw)
    shadow_map = _as_dict(data.get("shadowMapData"))

    return ChannelDrillDown(
        channel_id=_as_str(data.get("channelId")),
        channel_name=_as_str(data.get("channelName")),
        subscriber_count=_as_str(data.get("subscriberCount")),
        copy_behavior_score=_as_score(data.get("copyBehaviorScore")),
        originator_score=_as_score(data.get("originatorScore")),
        outliers=sanitize_videos(data.get("outliers")),
        copy_events=[
            CopyEvent(
                source_video_id=_as_str(item.get("sourceVideoId")),
                source_channel_name=_as_str(item.get("sourceChannelName")),
                copy_video_id=_as_str(item.get("copyVideoId")),
                copy_channel_name=_as_str(item.get("copyChannelName")),
                title_similarity=_as_score(item.get("titleSimilarity")),
                transcript_similarity=_as_score(item.get("transcriptSimilarity")),
                thumbnail_similarity=_as_score(item.get("thumbnailSimilarity")),
                audio_similarity=_as_score(item.get("audioSimilarity")),
                composite_copy_score=_as_score(item.get("compositeCopyScore")),
                time_diff_hours=_as_float(item.get("timeDiffHours")),
                copy_outcome=_as_enum(item.get("copyOutcome"), CopyOutcome, CopyOutcome.FAIL),
                copy_type=_as_enum(item.get("copyType"), CopyType, CopyType.DERIVATIVE),
            )
            for item in _as_dicts(data.get("copyEvents"))
        ],
        recommended_micro_niches=sanitize_micro_niches(data.get("recommendedMicroNiches")),
        shadow_map_data=ShadowMap(
            nodes=[
                ShadowNode(
                    id=_as_str(node.get("id")),
                    label=_as_str(node.get("label")),
                    node_type=_as_enum(node.get("type"), ShadowNodeType, ShadowNodeType.COPY),
                    date=_as_str(node.get("date")),
                )
                for node in _as_dicts(shadow_map.get("nodes"))
            ],
            edges=[
                ShadowEdge(
                    source=_as_str(edge.get("from")),
                    target=_as_str(edge.get("to")),
                    weight=_as_float(edge.get("weight")),
                )
                for edge in _as_dicts(shadow_map.get("edges"))
            ],
        ),
    )
