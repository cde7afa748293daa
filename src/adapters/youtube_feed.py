"""YouTube Data API v3 client implementing VideoFeedPort.

The periodic sync reads the newest item of the channel's uploads playlist.
A backfill searches the channel for uploads after a cutoff, page by page.
Either way the full video records (snippet and privacy status) are then
read in batches of 50 ids.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from src.components.video_import import VideoPayload
from src.core.errors import FeedUnavailable

logger = logging.getLogger(__name__)

YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"
PAGE_SIZE = 50


def uploads_playlist_for(channel_id: str) -> str:
    """A channel's uploads playlist id is its channel id with the UC prefix swapped for UU."""
    return f"UU{channel_id[2:]}" if channel_id.startswith("UC") else channel_id


def _parse_time(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def to_video_payload(item: dict[str, Any]) -> VideoPayload:
    snippet = item.get("snippet") or {}
    thumbnails = {
        size: thumb["url"]
        for size, thumb in (snippet.get("thumbnails") or {}).items()
        if isinstance(thumb, dict) and thumb.get("url")
    }
    return VideoPayload(
        video_id=item["id"],
        title=snippet.get("title", ""),
        description=snippet.get("description") or "",
        tags=tuple(snippet.get("tags") or ()),
        thumbnails=thumbnails,
        published_at=_parse_time(snippet.get("publishedAt")),
        channel_id=snippet.get("channelId"),
        privacy_status=(item.get("status") or {}).get("privacyStatus", ""),
    )


class YouTubeFeedAdapter:
    """Wrapper around the YouTube Data API."""

    def __init__(
        self,
        api_key: str,
        channel_id: str,
        *,
        uploads_playlist_id: str | None = None,
        transport: httpx.BaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self.channel_id = channel_id
        self.uploads_playlist_id = uploads_playlist_id or uploads_playlist_for(channel_id)
        self._client = httpx.Client(
            base_url=YOUTUBE_API_BASE,
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            resp = self._client.get(path, params={**params, "key": self._api_key})
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as e:
            raise FeedUnavailable(f"YouTube API {path} failed: {e}") from e
        except ValueError as e:
            raise FeedUnavailable(f"YouTube API {path} returned invalid JSON") from e

    def _newest_upload_ids(self, limit: int) -> list[str]:
        data = self._get(
            "/playlistItems",
            {"part": "snippet", "playlistId": self.uploads_playlist_id, "maxResults": min(limit, PAGE_SIZE)},
        )
        return [item["snippet"]["resourceId"]["videoId"] for item in data.get("items") or []][:limit]

    def _search_ids(self, published_after: datetime, limit: int) -> list[str]:
        cutoff = published_after.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        ids: list[str] = []
        page_token: str | None = None
        while len(ids) < limit:
            params: dict[str, Any] = {
                "part": "snippet",
                "channelId": self.channel_id,
                "type": "video",
                "order": "date",
                "publishedAfter": cutoff,
                "maxResults": PAGE_SIZE,
            }
            if page_token:
                params["pageToken"] = page_token
            data = self._get("/search", params)
            items = data.get("items") or []
            if not items:
                break
            ids.extend(item["id"]["videoId"] for item in items)
            page_token = data.get("nextPageToken")
            if not page_token:
                break
        return ids[:limit]

    def _videos(self, ids: list[str]) -> list[VideoPayload]:
        videos: list[VideoPayload] = []
        for start in range(0, len(ids), PAGE_SIZE):
            batch = ids[start : start + PAGE_SIZE]
            data = self._get("/videos", {"part": "snippet,status", "id": ",".join(batch)})
            found = {item["id"]: item for item in data.get("items") or []}
            for video_id in batch:
                if video_id in found:
                    videos.append(to_video_payload(found[video_id]))
                else:
                    logger.info("Video %s not returned by the API", video_id)
        return videos

    def fetch_videos(self, *, published_after: datetime | None, limit: int) -> list[VideoPayload]:
        if published_after is None:
            ids = self._newest_upload_ids(limit)
        else:
            ids = self._search_ids(published_after, limit)
        logger.info("YouTube feed returned %d video ids", len(ids))
        return self._videos(ids) if ids else []

    def close(self) -> None:
        self._client.close()
