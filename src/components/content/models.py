"""
Content component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any

from src.domain.entities import ContentItem, ContentStatus, Identity

# --- Validation Error ---


@dataclass(frozen=True)
class ContentValidationError:
    """Content validation error."""

    code: str
    message: str
    field: str | None = None


# --- Patch ---


@dataclass(frozen=True)
class ContentPatch:
    """
    Editable fields supplied by the editor. None means "leave unchanged".

    `slug` is a manual override. `author_id`/`author_email` are accepted so
    that callers can pass whole form payloads, but they are never applied.
    """

    title: str | None = None
    excerpt: str | None = None
    content: str | None = None
    tags: list[str] | None = None
    featured_image: str | None = None
    thumbnail_url: str | None = None
    slug: str | None = None
    author_id: str | None = None
    author_email: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContentPatch:
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @property
    def manual_slug(self) -> str | None:
        if self.slug and self.slug.strip():
            return self.slug
        return None


# --- Input Models ---


@dataclass(frozen=True)
class SaveDraftInput:
    """Input for creating a new draft."""

    patch: ContentPatch
    identity: Identity


@dataclass(frozen=True)
class VideoSource:
    """Channel video a new published item is imported from."""

    video_id: str
    url: str
    # Original upload time; None stamps the item at write time
    published_at: datetime | None = None


@dataclass(frozen=True)
class PublishInput:
    """Input for publishing; without content_id a new item is created published."""

    patch: ContentPatch
    identity: Identity
    content_id: str | None = None
    source: VideoSource | None = None


@dataclass(frozen=True)
class UpdateDraftInput:
    """Input for editing an existing item without changing its status."""

    content_id: str
    patch: ContentPatch


@dataclass(frozen=True)
class UnpublishInput:
    """Input for moving a published item back to draft."""

    content_id: str


@dataclass(frozen=True)
class DeleteContentInput:
    """Input for deleting content."""

    content_id: str


@dataclass(frozen=True)
class GetContentInput:
    """Input for retrieving content by id."""

    content_id: str


@dataclass(frozen=True)
class GetBySlugInput:
    """Input for public lookup by current or historical slug."""

    slug: str


@dataclass(frozen=True)
class ListContentInput:
    """Input for listing content; status None lists every item."""

    status: ContentStatus | None = None
    limit: int | None = None
    offset: int = 0


@dataclass(frozen=True)
class ListTagsInput:
    """Input for tag counts across published content."""

    limit: int | None = None


# --- Output Models ---


@dataclass(frozen=True)
class ContentOutput:
    """Output containing a single content item."""

    content: ContentItem | None
    errors: list[ContentValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ContentListOutput:
    """Output containing a list of content items."""

    items: list[ContentItem]
    total: int
    limit: int | None
    offset: int
    errors: list[ContentValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ContentOperationOutput:
    """Output for content operations (save, publish, update, unpublish, delete)."""

    content: ContentItem | None = None
    errors: list[ContentValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class SlugLookupOutput:
    """Output for slug lookup. redirect_to is set when matched via an old slug."""

    content: ContentItem | None = None
    redirect_to: str | None = None
    errors: list[ContentValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class TagCount:
    tag: str
    count: int


@dataclass(frozen=True)
class TagCountsOutput:
    """Output containing tag usage counts, most used first."""

    tags: list[TagCount] = field(default_factory=list)
    errors: list[ContentValidationError] = field(default_factory=list)
    success: bool = True
