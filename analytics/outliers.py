"""
Outlier statistics over a platform snapshot.

Deterministic, pure-Python helpers. The z-scores computed here decide
which uploads get closer (thumbnail-augmented) scrutiny from the model;
they are computed locally so the ranking never depends on the model.
"""

import logging
import statistics
from datetime import datetime, timezone
from typing import Optional

from schemas.analysis import PerformanceLabel
from schemas.platform import PlatformChannelSnapshot, PlatformVideo

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Z-Score
# ---------------------------------------------------------------------------

def compute_z_scores(view_counts: list[int]) -> list[float]:
    """
    Population z-score of each view count against the list mean.

    Returns all zeros when the list has fewer than two entries or no
    spread (every video has the same view count).

    Examples:
        [100, 100, 400] → [-0.71, -0.71, 1.41]  (rounded)
    """
    if len(view_counts) < 2:
        return [0.0 for _ in view_counts]

    mean = statistics.fmean(view_counts)
    stdev = statistics.pstdev(view_counts)
    if stdev == 0:
        return [0.0 for _ in view_counts]

    return [(count - mean) / stdev for count in view_counts]


def classify_performance(z_score: float) -> PerformanceLabel:
    """
    Map a z-score to the four-state performance label.

    Thresholds:
        > 2.0   → Outlier++
        > 1.0   → Outlier+
        < -1.0  → Underperformer
        else    → Standard
    """
    if z_score > 2.0:
        return PerformanceLabel.OUTLIER_PLUS_PLUS
    elif z_score > 1.0:
        return PerformanceLabel.OUTLIER_PLUS
    elif z_score < -1.0:
        return PerformanceLabel.UNDERPERFORMER
    return PerformanceLabel.STANDARD


# ---------------------------------------------------------------------------
# Velocity
# ---------------------------------------------------------------------------

def views_per_hour(
    view_count: int,
    published_at: str,
    now: Optional[datetime] = None,
) -> Optional[float]:
    """
    Average views per hour since publication.

    Args:
        view_count: Lifetime views.
        published_at: RFC 3339 timestamp from the Data API.
        now: Reference time (defaults to current UTC time).

    Returns:
        Views per hour rounded to 1dp, or None if the timestamp is unusable.
        Videos younger than one hour are treated as one hour old.
    """
    if not published_at:
        return None
    try:
        published = datetime.fromisoformat(published_at.replace("Z", "+00:00"))
    except ValueError:
        return None
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    hours = max((now - published).total_seconds() / 3600, 1.0)
    return round(view_count / hours, 1)


# ---------------------------------------------------------------------------
# Top-N selection
# ---------------------------------------------------------------------------

def select_top_outliers(
    snapshot: PlatformChannelSnapshot,
    limit: int = 5,
    now: Optional[datetime] = None,
) -> list[dict]:
    """
    Rank the snapshot's uploads by z-score and return the top `limit`.

    Returns:
        List of dicts (highest z-score first) with keys:
            "video" (PlatformVideo), "z_score" (float, 2dp),
            "views_per_hour" (float|None), "performance_label" (str)
    """
    videos: list[PlatformVideo] = list(snapshot.videos)
    if not videos or limit <= 0:
        return []

    z_scores = compute_z_scores([v.stats.view_count for v in videos])
    ranked = sorted(zip(videos, z_scores), key=lambda pair: pair[1], reverse=True)

    top = [
        {
            "video": video,
            "z_score": round(z, 2),
            "views_per_hour": views_per_hour(video.stats.view_count, video.published_at, now),
            "performance_label": classify_performance(z).value,
        }
        for video, z in ranked[:limit]
    ]

    logger.debug(
        f"Top outliers for {snapshot.id}: "
        f"{[(entry['video'].id, entry['z_score']) for entry in top]}"
    )
    return top
