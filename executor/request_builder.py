"""
Model request construction.

Builds the full model invocation for each analysis variant: a role
instruction, the strict output schema, and the content payload
(LangChain content parts). Construction is pure and cannot fail.

Grounding rule: a request is either built on a platform snapshot
(ground truth, must not be contradicted) or asks for a full simulation.
It never asks the model to fill only some fields.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from analytics.outliers import select_top_outliers
from config import config
from executor.response_schemas import (
    ANALYSIS_SCHEMA,
    CHANNEL_DRILL_DOWN_SCHEMA,
    VIDEO_REPORT_SCHEMA,
)
from schemas.platform import PlatformChannelSnapshot

logger = logging.getLogger(__name__)


class AnalysisVariant(str, Enum):
    """The three request shapes the core can produce."""
    GENERAL = "general"
    VIDEO_FORENSICS = "video_forensics"
    CHANNEL_DRILL_DOWN = "channel_drill_down"


VARIANT_TEMPERATURES = {
    AnalysisVariant.GENERAL: 0.7,
    AnalysisVariant.VIDEO_FORENSICS: 0.5,
    AnalysisVariant.CHANNEL_DRILL_DOWN: 0.6,
}


@dataclass(frozen=True)
class ModelRequest:
    """A fully specified model invocation."""

    variant: AnalysisVariant
    instruction: str
    schema: dict[str, Any]
    payload: list[dict[str, Any]] = field(default_factory=list)
    temperature: float = 0.7
    # True when the payload carries platform ground truth
    grounded: bool = False


# =============================================================================
# Instruction text
# =============================================================================

_GENERAL_ROLE = """You are NicheScope, a YouTube research and analytics engine.
Your job is a deep, forensic-level analysis that helps new faceless creators win a niche.

1. CHANNEL ANALYSIS (when the query names a channel):
   - Score every video with a z-score against the channel mean view count.
   - Label videos with zScore > 2.0 as "Outlier++", > 1.0 as "Outlier+",
     < -1.0 as "Underperformer", otherwise "Standard".
   - Report viewsPerHour as lifetime views divided by hours since upload.

2. NICHE DISCOVERY (when the query is a topic or keyword):
   - Cluster content into micro-niches.
   - Only recommend micro-niches with a success probability of 70 or more.
   - If a niche is saturated, say so explicitly and suggest a pivot.
   - For each micro-niche give a dominanceRatio between 0 and 1 (share of
     visible results owned by already-large channels) and explain why it works.
   - Give 10 distinct, clickable video ideas per micro-niche.

3. COMPETITOR AND COPY MAPPING:
   - List all relevant competitors, not a token two or three.
   - Detect shadow patterns: smaller channels closely following bigger ones.

4. SUCCESS PROJECTION:
   - beginnerOpportunityScore and successProbability are 0-100.
   - Below 70: do not recommend unless the strategy is exceptional.
   - 80 and above: strongly recommend.

Answer with JSON only. No generic advice: specific, data-backed insights.
"""

_GROUND_TRUTH_CLAUSE = """
GROUND TRUTH:
You have been given REAL statistics fetched from the YouTube Data API for the
channel "{title}" (subscribers: {subscribers}, total views: {views}, videos: {videos}).
These numbers are ground truth.
- Do NOT contradict them and do NOT invent other video statistics.
- Compute z-scores from the PROVIDED view counts.
- Reuse the provided video titles exactly as given.
- Base the channelAudit on this actual performance.
- The highest z-score uploads are attached with their thumbnails: fill in
  thumbnailStrategy for each of them.
"""

_SIMULATION_CLAUSE = """
FULL SIMULATION:
No verified platform statistics are available for this query. Produce a
complete, self-consistent estimate for EVERY field based on your knowledge.
Do not leave fields blank and do not mix partial data with estimates.
"""

_VIDEO_FORENSICS_ROLE = """You are NicheScope's video forensic analyst.
Task: analyse one specific video for originality.

1. ORIGINALITY: decide whether it is Original, Likely Original, Derivative,
   Likely Copy, or Unclear/Concurrent, with a confidence percentage.
2. COMPARISON: compare it against recent uploads on transcript, title,
   thumbnail and audio similarity (each 0-100).
3. COMPOSITE SCORE: weight transcript 35%, title 30%, thumbnail 20%, audio 15%.
4. ATTRIBUTION: identify the most likely original source video.
5. ROADMAP: give a 10-step reproduction plan for a new creator.

Answer with JSON only.
"""

_CHANNEL_DRILL_DOWN_ROLE = """You are NicheScope's competitive intelligence unit.
Perform a full deep-dive on one channel.

1. COPY BEHAVIOUR: copyBehaviorScore 0-100. Does the channel take ideas from others?
2. ORIGINATOR SCORE: originatorScore 0-100. Does it start trends?
3. SHADOW MAP: nodes (Source or Copy) and weighted edges between related videos.
4. VULNERABILITIES: weak spots where a new creator can win.
5. RECOMMENDATIONS: micro-niches worth attacking.

Answer with JSON only.
"""


def _text(text: str) -> dict[str, Any]:
    return {"type": "text", "text": text}


def _image(url: str) -> dict[str, Any]:
    return {"type": "image_url", "image_url": {"url": url}}


class ModelRequestBuilder:
    """
    Builds ModelRequest objects for each analysis variant.

    Variant selection changes only the instruction and schema; payload
    mechanics are shared.
    """

    def __init__(
        self,
        excerpt_size: Optional[int] = None,
        top_outlier_count: Optional[int] = None,
    ) -> None:
        self.excerpt_size = (
            config.analysis.ground_truth_excerpt_size if excerpt_size is None else excerpt_size
        )
        self.top_outlier_count = (
            config.analysis.top_outlier_count if top_outlier_count is None else top_outlier_count
        )

    def _build(
        self,
        variant: AnalysisVariant,
        instruction: str,
        schema: dict[str, Any],
        payload: list[dict[str, Any]],
        grounded: bool = False,
    ) -> ModelRequest:
        request = ModelRequest(
            variant=variant,
            instruction=instruction.strip(),
            schema=schema,
            payload=payload,
            temperature=VARIANT_TEMPERATURES[variant],
            grounded=grounded,
        )
        logger.debug(
            f"Built {variant.value} request: parts={len(payload)}, "
            f"grounded={request.grounded}"
        )
        return request

    # -------------------------------------------------------------------------
    # General / niche
    # -------------------------------------------------------------------------

    def build_general(
        self,
        query: str,
        snapshot: Optional[PlatformChannelSnapshot] = None,
        now: Optional[datetime] = None,
    ) -> ModelRequest:
        """
        Build the general/niche analysis request.

        With a snapshot the instruction declares the data ground truth, the
        payload carries the most recent uploads verbatim, and the top
        z-score uploads are attached with their thumbnails.
        """
        payload = [_text(
            f'Analyze: "{query}". Identify micro-niche clusters with a success '
            f'rate of 70% or more. Give a clear "why it works" and 10 sample '
            f'ideas for each micro-niche.'
        )]

        if snapshot is None:
            return self._build(
                AnalysisVariant.GENERAL,
                _GENERAL_ROLE + _SIMULATION_CLAUSE,
                ANALYSIS_SCHEMA,
                payload,
            )

        instruction = _GENERAL_ROLE + _GROUND_TRUTH_CLAUSE.format(
            title=snapshot.title,
            subscribers=snapshot.stats.subscriber_count,
            views=snapshot.stats.view_count,
            videos=snapshot.stats.video_count,
        )

        recent = [
            {
                "title": video.title,
                "views": video.stats.view_count,
                "date": video.published_at,
            }
            for video in snapshot.videos[: self.excerpt_size]
        ]
        payload.append(_text(
            "REAL CHANNEL DATA (ground truth):\n" + json.dumps({
                "channel": snapshot.title,
                "subscribers": snapshot.stats.subscriber_count,
                "totalViews": snapshot.stats.view_count,
                "videoCount": snapshot.stats.video_count,
                "recentVideos": recent,
            }, ensure_ascii=False)
        ))

        for entry in select_top_outliers(snapshot, limit=self.top_outlier_count, now=now):
            video = entry["video"]
            payload.append(_text(
                "TOP OUTLIER: " + json.dumps({
                    "id": video.id,
                    "title": video.title,
                    "views": video.stats.view_count,
                    "likes": video.stats.like_count,
                    "comments": video.stats.comment_count,
                    "duration": video.duration,
                    "zScore": entry["z_score"],
                    "viewsPerHour": entry["views_per_hour"],
                    "performanceLabel": entry["performance_label"],
                }, ensure_ascii=False)
            ))
            if video.thumbnail_url:
                payload.append(_image(video.thumbnail_url))

        return self._build(
            AnalysisVariant.GENERAL, instruction, ANALYSIS_SCHEMA, payload, grounded=True
        )

    # -------------------------------------------------------------------------
    # Single-video forensics
    # -------------------------------------------------------------------------

    def build_video_forensics(self, video_reference: str) -> ModelRequest:
        """Build the forensic request for a single video URL."""
        payload = [_text(
            f'Perform forensic analysis on video: "{video_reference}". '
            f'Search recent uploads for potential copies or sources.'
        )]
        return self._build(
            AnalysisVariant.VIDEO_FORENSICS,
            _VIDEO_FORENSICS_ROLE,
            VIDEO_REPORT_SCHEMA,
            payload,
        )

    # -------------------------------------------------------------------------
    # Channel drill-down
    # -------------------------------------------------------------------------

    def build_channel_drill_down(self, channel_name: str) -> ModelRequest:
        """Build the competitive deep-dive request for one channel."""
        payload = [_text(
            f'Deep dive analysis for channel: "{channel_name}". '
            f'Map detailed copy events and the shadow map.'
        )]
        return self._build(
            AnalysisVariant.CHANNEL_DRILL_DOWN,
            _CHANNEL_DRILL_DOWN_ROLE + _SIMULATION_CLAUSE,
            CHANNEL_DRILL_DOWN_SCHEMA,
            payload,
        )
