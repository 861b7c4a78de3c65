"""
YouTube Data API v3 Client.

Read-only, API-key authenticated access to public channel and video
statistics. Used to enrich an analysis with ground-truth numbers before
the model is invoked.

All failures (transport, HTTP status incl. quota exhaustion, malformed
body) surface as a single PlatformFetchError.
"""

import logging
import re
from datetime import timedelta
from typing import Any, Optional

import httpx
import isodate
from pydantic import ValidationError

from config import config
from schemas.platform import (
    PlatformChannelSnapshot,
    PlatformChannelStats,
    PlatformVideo,
    PlatformVideoStats,
)

logger = logging.getLogger(__name__)

# Canonical channel ids are "UC" followed by 22 url-safe base64 chars
_CHANNEL_ID_PATTERN = re.compile(r"^UC[A-Za-z0-9_-]{22}$")
_CHANNEL_PATH_PATTERN = re.compile(r"/channel/(UC[A-Za-z0-9_-]{22})")
_HANDLE_PATTERN = re.compile(r"@([A-Za-z0-9._-]+)")
_USER_PATH_PATTERN = re.compile(r"/user/([^/?#]+)")


class PlatformFetchError(Exception):
    """Raised when platform statistics cannot be resolved or fetched."""


def parse_duration(duration: Optional[str]) -> str:
    """
    Convert an ISO-8601 duration to a display string.

    Examples:
        "PT15M33S" → "15:33"
        "PT1H2M3S" → "1:02:03"
        "PT45S"    → "0:45"
        "P1DT1M"   → "24:01:00"
        garbage    → "0:00"
    """
    if not duration:
        return "0:00"
    try:
        parsed = isodate.parse_duration(duration)
    except (isodate.ISO8601Error, ValueError, TypeError):
        logger.debug(f"Could not parse duration: {duration}")
        return "0:00"

    if not isinstance(parsed, timedelta):
        # Year/month durations never occur for videos
        return "0:00"

    total = int(parsed.total_seconds())
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def _to_int(value: Any) -> int:
    """Parse a counter the API returns as a string; hidden counters are 0."""
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def _pick_thumbnail(thumbnails: dict[str, Any]) -> str:
    for size in ("medium", "high", "default"):
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return ""


class PlatformStatsClient:
    """
    YouTube Data API client bound to one API key.

    Owns an httpx.AsyncClient for the lifetime of one orchestration:

        async with PlatformStatsClient(api_key) as client:
            channel_id = await client.resolve_channel_id("@SomeHandle")
            snapshot = await client.fetch_snapshot(channel_id)
    """

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            api_key: YouTube Data API key (sent as the `key` query param).
            base_url: API root (defaults to config).
            http_client: Optional pre-built client (used by tests).
        """
        self.api_key = api_key
        self.base_url = (base_url or config.youtube.base_url).rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.youtube.timeout)

    async def __aenter__(self) -> "PlatformStatsClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _get(self, resource: str, params: dict[str, Any]) -> dict[str, Any]:
        """
        Issue one GET against the Data API.

        Raises:
            PlatformFetchError: On any transport, status or decoding failure.
        """
        url = f"{self.base_url}/{resource}"
        query = {**params, "key": self.api_key}

        try:
            response = await self._http.get(url, params=query)
        except httpx.HTTPError as e:
            raise PlatformFetchError(f"{resource} request failed: {e}") from e

        if response.status_code != 200:
            # 403 quotaExceeded lands here as well
            raise PlatformFetchError(
                f"{resource} returned {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise PlatformFetchError(f"{resource} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise PlatformFetchError(f"{resource} returned unexpected body")
        if "error" in data:
            raise PlatformFetchError(f"{resource} returned error: {data['error']}")

        return data

    @staticmethod
    def _first_item(data: dict[str, Any]) -> Optional[dict[str, Any]]:
        items = data.get("items") or []
        if not isinstance(items, list) or not items:
            return None
        return items[0] if isinstance(items[0], dict) else None

    @staticmethod
    def _parse_video(item: dict[str, Any]) -> PlatformVideo:
        """Build one PlatformVideo from a videos.list item."""
        snippet = item.get("snippet") or {}
        stats = item.get("statistics") or {}
        details = item.get("contentDetails") or {}
        return PlatformVideo(
            id=item["id"],
            title=snippet.get("title") or "",
            thumbnail_url=_pick_thumbnail(snippet.get("thumbnails") or {}),
            published_at=snippet.get("publishedAt") or "",
            stats=PlatformVideoStats(
                view_count=_to_int(stats.get("viewCount")),
                like_count=_to_int(stats.get("likeCount")),
                comment_count=_to_int(stats.get("commentCount")),
            ),
            duration=parse_duration(details.get("duration")),
        )

    async def resolve_channel_id(self, reference: str) -> Optional[str]:
        """
        Resolve a free-form reference to a canonical channel id.

        Order:
          1. Already a channel id (or a /channel/<id> URL) → returned as is
          2. Contains @handle → channels?forHandle
          3. Contains /user/name → channels?forUsername
          4. Anything else → top hit of a channel search

        Returns:
            The channel id, or None when nothing matches.

        Raises:
            PlatformFetchError: If a lookup request fails.
        """
        text = (reference or "").strip()
        if not text:
            return None

        if _CHANNEL_ID_PATTERN.match(text):
            return text

        path_match = _CHANNEL_PATH_PATTERN.search(text)
        if path_match:
            return path_match.group(1)

        handle_match = _HANDLE_PATTERN.search(text)
        if handle_match:
            handle = handle_match.group(1)
            logger.info(f"Resolving channel by handle: @{handle}")
            data = await self._get("channels", {"part": "id", "forHandle": f"@{handle}"})
            item = self._first_item(data)
            return item.get("id") if item else None

        user_match = _USER_PATH_PATTERN.search(text)
        if user_match:
            username = user_match.group(1)
            logger.info(f"Resolving channel by legacy username: {username}")
            data = await self._get("channels", {"part": "id", "forUsername": username})
            item = self._first_item(data)
            return item.get("id") if item else None

        logger.info(f"Resolving channel by search: {text!r}")
        data = await self._get(
            "search",
            {"part": "id", "type": "channel", "q": text, "maxResults": 1},
        )
        item = self._first_item(data)
        if not item:
            return None
        return (item.get("id") or {}).get("channelId")

    async def fetch_snapshot(self, channel_id: str) -> PlatformChannelSnapshot:
        """
        Fetch channel statistics and its most recent uploads.

        Steps:
          1. channels.list (snippet, contentDetails, statistics)
          2. playlistItems.list on the uploads playlist (max 50)
          3. videos.list (snippet, statistics, contentDetails) for that batch

        Raises:
            PlatformFetchError: If the channel is missing or any call fails.
        """
        channel_data = await self._get(
            "channels",
            {"part": "snippet,contentDetails,statistics", "id": channel_id},
        )
        channel_item = self._first_item(channel_data)
        if not channel_item:
            raise PlatformFetchError(f"Channel not found: {channel_id}")

        try:
            snippet = channel_item.get("snippet") or {}
            statistics = channel_item.get("statistics") or {}
            uploads_playlist = channel_item["contentDetails"]["relatedPlaylists"]["uploads"]
            channel_stats = PlatformChannelStats(
                view_count=_to_int(statistics.get("viewCount")),
                subscriber_count=_to_int(statistics.get("subscriberCount")),
                video_count=_to_int(statistics.get("videoCount")),
            )
            title = snippet.get("title") or ""
            if not isinstance(title, str) or not isinstance(uploads_playlist, str):
                raise TypeError("channel title and uploads playlist must be strings")
        except (KeyError, TypeError, AttributeError) as e:
            raise PlatformFetchError(f"Malformed channel payload for {channel_id}") from e

        playlist_data = await self._get(
            "playlistItems",
            {
                "part": "contentDetails",
                "playlistId": uploads_playlist,
                "maxResults": config.youtube.max_uploads,
            },
        )
        try:
            video_ids = [
                (item.get("contentDetails") or {}).get("videoId")
                for item in playlist_data.get("items") or []
                if isinstance(item, dict)
            ]
        except (TypeError, AttributeError) as e:
            raise PlatformFetchError(f"Malformed playlistItems payload for {channel_id}") from e
        video_ids = [vid for vid in video_ids if vid and isinstance(vid, str)][: config.youtube.max_uploads]

        if not video_ids:
            logger.info(f"Channel {channel_id} has no uploads")
            return PlatformChannelSnapshot(id=channel_id, title=title, stats=channel_stats)

        video_data = await self._get(
            "videos",
            {"part": "snippet,statistics,contentDetails", "id": ",".join(video_ids)},
        )

        try:
            videos = [
                self._parse_video(item)
                for item in video_data.get("items") or []
                if isinstance(item, dict) and item.get("id")
            ]
        except (TypeError, AttributeError, ValidationError) as e:
            raise PlatformFetchError(f"Malformed videos payload for {channel_id}") from e

        logger.info(
            f"Fetched platform snapshot: channel={channel_id} videos={len(videos)}"
        )
        return PlatformChannelSnapshot(
            id=channel_id,
            title=title,
            stats=channel_stats,
            videos=tuple(videos),
        )
