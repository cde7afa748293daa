"""
Video import component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from src.components.content import ContentRepoPort
from src.domain.entities import ContentItem

from .models import VideoPayload


class VideoFeedPort(Protocol):
    """Source of channel uploads."""

    def fetch_videos(self, *, published_after: datetime | None, limit: int) -> list[VideoPayload]:
        """
        Newest uploads first, at most `limit`.

        With published_after set only uploads after that time are returned.
        Raises FeedUnavailable when the feed cannot be read.
        """
        ...


class VideoContentRepoPort(ContentRepoPort, Protocol):
    """Content repository that can find items by their source video."""

    def find_by_video_id(self, video_id: str) -> ContentItem | None:
        ...
