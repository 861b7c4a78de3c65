"""
Output schemas enforced on the model, one per analysis variant.

These JSON-Schema objects are the single source of truth for the shape
the model must return. They mirror the records in schemas/analysis.py
(camelCase names, same enumerations) so the sanitizer only ever has to
fill gaps, never translate.
"""

from typing import Any, Optional

from schemas.analysis import (
    CopyOutcome,
    CopyType,
    Level,
    OriginalityStatus,
    PerformanceLabel,
    PerformanceStatus,
    ShadowNodeType,
    VideoType,
)


def _string(enum: Optional[type] = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "string"}
    if enum is not None:
        schema["enum"] = [member.value for member in enum]
    return schema


def _number() -> dict[str, Any]:
    return {"type": "number"}


def _array(items: dict[str, Any]) -> dict[str, Any]:
    return {"type": "array", "items": items}


def _object(
    properties: dict[str, Any],
    required: Optional[list[str]] = None,
) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


# =============================================================================
# Shared building blocks
# =============================================================================

THUMBNAIL_STRATEGY_SCHEMA = _object({
    "visualHook": _string(),
    "colorPsychology": _string(),
    "textAnalysis": _string(),
    "improvementSuggestion": _string(),
})

VIDEO_SCHEMA = _object(
    {
        "id": _string(),
        "title": _string(),
        "thumbnailUrl": _string(),
        "uploadDate": _string(),
        "views": _number(),
        "likes": _number(),
        "comments": _number(),
        "duration": _string(),
        "type": _string(VideoType),
        "zScore": _number(),
        "viewsPerHour": _number(),
        "performanceLabel": _string(PerformanceLabel),
        "thumbnailStrategy": THUMBNAIL_STRATEGY_SCHEMA,
    },
    required=["title", "views", "zScore", "performanceLabel"],
)

MICRO_NICHE_PROPERTIES = {
    "name": _string(),
    "subNiches": _array(_string()),
    "demandScore": _number(),
    "competitionScore": _number(),
    "dominanceRatio": _number(),
    "monetizationClass": _string(Level),
    "saturationLevel": _string(Level),
    "successProbability": _number(),
    "barrierToEntry": _string(Level),
    "whyItWorks": _string(),
    "sampleIdeas": _array(_string()),
    "keywords": _array(_string()),
}

ROADMAP_ITEM_SCHEMA = _object(
    {
        "title": _string(),
        "hook": _string(),
        "structure": _string(),
        "ctaStrategy": _string(),
    },
    required=["title", "hook"],
)


# =============================================================================
# General / niche analysis
# =============================================================================

ANALYSIS_SCHEMA = _object(
    {
        "summary": _string(),
        "beginnerOpportunityScore": _number(),
        "successProbability": _number(),
        "channelProfile": _object(
            {
                "name": _string(),
                "subscriberCount": _string(),
                "avgViews": _number(),
                "medianViews": _number(),
                "engagementRate": _string(),
                "dominantSubNiche": _string(),
            },
            required=["name", "avgViews", "medianViews"],
        ),
        "channelAudit": _object(
            {
                "strengths": _array(_string()),
                "weaknesses": _array(_string()),
                "expansionOpportunities": _array(_string()),
            },
            required=["strengths", "weaknesses", "expansionOpportunities"],
        ),
        "videos": _array(VIDEO_SCHEMA),
        "competitors": _array(_object(
            {
                "name": _string(),
                "subscribers": _string(),
                "similarityScore": _number(),
                "notes": _string(),
            },
            required=["name", "similarityScore"],
        )),
        "shadowAnalysis": _array(_object(
            {
                "originalVideoId": _string(),
                "copycatChannel": _string(),
                "copycatTitle": _string(),
                "performanceStatus": _string(PerformanceStatus),
                "similarityReason": _string(),
            },
            required=["copycatChannel", "performanceStatus"],
        )),
        "microNiches": _array(_object(
            MICRO_NICHE_PROPERTIES,
            required=[
                "name", "successProbability", "monetizationClass",
                "whyItWorks", "sampleIdeas", "dominanceRatio",
            ],
        )),
        "contentRoadmap": _array(ROADMAP_ITEM_SCHEMA),
        "globalMonetization": _object(
            {
                "topRegions": _array(_string()),
                "avgRPM": _string(),
            },
            required=["avgRPM", "topRegions"],
        ),
    },
    required=[
        "summary", "beginnerOpportunityScore", "successProbability",
        "channelProfile", "videos", "microNiches", "contentRoadmap",
        "competitors", "shadowAnalysis", "globalMonetization",
    ],
)


# =============================================================================
# Single-video forensics
# =============================================================================

VIDEO_REPORT_SCHEMA = _object(
    {
        "videoId": _string(),
        "videoTitle": _string(),
        "originalityStatus": _string(OriginalityStatus),
        "originalityConfidencePct": _number(),
        "topMatches": _array(_object({
            "sourceVideoId": _string(),
            "sourceChannelName": _string(),
            "compositeCopyScore": _number(),
            "timeDiffHours": _number(),
            "copyType": _string(),
        })),
        "transcriptSimilarity": _number(),
        "titleSimilarity": _number(),
        "thumbnailSimilarity": _number(),
        "audioSimilarity": _number(),
        "microNiche": _object({
            "label": _string(),
            "beginnerOpportunityScore": _number(),
        }),
        "roadmap": _array(ROADMAP_ITEM_SCHEMA),
        "improvementSuggestions": _array(_string()),
    },
    required=[
        "originalityStatus", "originalityConfidencePct", "topMatches",
        "roadmap", "microNiche", "videoTitle",
    ],
)


# =============================================================================
# Channel drill-down
# =============================================================================

CHANNEL_DRILL_DOWN_SCHEMA = _object(
    {
        "channelId": _string(),
        "channelName": _string(),
        "subscriberCount": _string(),
        "copyBehaviorScore": _number(),
        "originatorScore": _number(),
        "outliers": _array(VIDEO_SCHEMA),
        "copyEvents": _array(_object({
            "sourceVideoId": _string(),
            "sourceChannelName": _string(),
            "copyVideoId": _string(),
            "copyChannelName": _string(),
            "titleSimilarity": _number(),
            "transcriptSimilarity": _number(),
            "thumbnailSimilarity": _number(),
            "audioSimilarity": _number(),
            "compositeCopyScore": _number(),
            "timeDiffHours": _number(),
            "copyOutcome": _string(CopyOutcome),
            "copyType": _string(CopyType),
        })),
        "recommendedMicroNiches": _array(_object(
            MICRO_NICHE_PROPERTIES,
            required=["name", "successProbability", "monetizationClass"],
        )),
        "shadowMapData": _object({
            "nodes": _array(_object({
                "id": _string(),
                "label": _string(),
                "type": _string(ShadowNodeType),
                "date": _string(),
            })),
            "edges": _array(_object({
                "from": _string(),
                "to": _string(),
                "weight": _number(),
            })),
        }),
    },
    required=[
        "channelName", "copyBehaviorScore", "originatorScore",
        "copyEvents", "shadowMapData",
    ],
)
