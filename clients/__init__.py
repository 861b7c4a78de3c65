"""
YouTube API Clients.

Provides API-key authenticated, read-only access to the YouTube Data API.
"""

from .youtube_data import PlatformFetchError, PlatformStatsClient, parse_duration

__all__ = ["PlatformFetchError", "PlatformStatsClient", "parse_duration"]
