"""
Video import component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from src.components.content import ContentValidationError
from src.domain.entities import ContentItem, Identity

# created    - published as a new content item
# duplicate  - an item for this video already exists
# not_public - private or unlisted upload
# invalid    - the lifecycle rejected the prepared item
ImportStatus = Literal["created", "duplicate", "not_public", "invalid"]


# --- Configuration ---


@dataclass(frozen=True)
class ImportConfig:
    max_tags: int = 50
    excerpt_length: int = 160
    backfill_days: int = 30
    max_videos: int = 200
    embed_width: int = 560
    embed_height: int = 315


# --- Feed Payload ---


@dataclass(frozen=True)
class VideoPayload:
    """One upload as reported by the video feed."""

    video_id: str
    title: str
    description: str = ""
    tags: tuple[str, ...] = ()
    # size name (maxres, high, default, ...) -> url
    thumbnails: dict[str, str] = field(default_factory=dict)
    published_at: datetime | None = None
    channel_id: str | None = None
    privacy_status: str = "public"


@dataclass(frozen=True)
class PreparedPost:
    """Display fields derived from a video before it enters the lifecycle."""

    title: str
    excerpt: str
    content: str
    tags: list[str]
    thumbnail_url: str | None
    description_clean: str


# --- Input Models ---


@dataclass(frozen=True)
class ImportVideoInput:
    """
    Import a single upload.

    With backfilled set the item keeps the upload's own time as published_at;
    otherwise it is stamped at write time like any other publish.
    """

    video: VideoPayload
    identity: Identity
    backfilled: bool = False


@dataclass(frozen=True)
class SyncVideosInput:
    """Without days only the newest upload is checked; with days every upload in that window."""

    identity: Identity
    days: int | None = None
    max_videos: int | None = None


# --- Output Models ---


@dataclass(frozen=True)
class ImportVideoOutput:
    video_id: str
    status: ImportStatus
    content: ContentItem | None = None
    errors: list[ContentValidationError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status == "created"


@dataclass(frozen=True)
class SyncSummary:
    results: list[ImportVideoOutput]
    published_after: datetime | None = None

    @property
    def processed_count(self) -> int:
        return len(self.results)

    @property
    def created_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def skipped_count(self) -> int:
        return self.processed_count - self.created_count
