from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.components.content import ContentPatch, ContentValidationError
from src.components.slugs import SlugValidationError
from src.domain.entities import ContentItem

# --- Shared Enums/Types ---
ContentStatus = Literal["draft", "published"]


# --- Content Items ---
class ContentPatchRequest(BaseModel):
    """Editor fields; omitted fields are left unchanged on updates."""

    title: str | None = None
    excerpt: str | None = None
    content: str | None = None
    tags: list[str] | None = None
    featured_image: str | None = None
    thumbnail_url: str | None = None
    slug: str | None = None
    author_id: str | None = None
    author_email: str | None = None

    def to_patch(self) -> ContentPatch:
        return ContentPatch.from_dict(self.model_dump(exclude_unset=True))


class ContentItemResponse(BaseModel):
    id: str
    title: str
    excerpt: str
    content: str
    status: ContentStatus
    author_id: str
    author_email: str
    slug: str
    old_slugs: list[str] = []
    tags: list[str] = []
    created_at: datetime
    updated_at: datetime
    published_at: datetime | None = None
    featured_image: str | None = None
    thumbnail_url: str | None = None
    youtube_video_id: str | None = None
    youtube_url: str | None = None

    @classmethod
    def from_item(cls, item: ContentItem) -> "ContentItemResponse":
        return cls.model_validate(item.model_dump())


class ContentListResponse(BaseModel):
    items: list[ContentItemResponse]
    total: int
    limit: int | None = None
    offset: int = 0


class SlugPreviewResponse(BaseModel):
    slug: str | None
    candidate: str | None = None
    available: bool = True
    errors: list[dict[str, Any]] = []


class TagCountResponse(BaseModel):
    tag: str
    count: int


# --- Errors ---
def error_details(
    errors: list[ContentValidationError] | list[SlugValidationError],
) -> list[dict[str, Any]]:
    return [{"code": e.code, "message": e.message, "field": e.field} for e in errors]


# --- Forms ---
class ContactFormRequest(BaseModel):
    """Contact form body; raw values are sanitized by the contact component."""

    model_config = ConfigDict(populate_by_name=True)

    name: Any = None
    email: Any = None
    subject: Any = None
    message: Any = None
    newsletter: Any = None
    website: Any = None
    form_load_time: Any = Field(default=None, alias="formLoadTime")
    submission_time: Any = Field(default=None, alias="submissionTime")


class NewsletterFormRequest(BaseModel):
    name: Any = None
    email: Any = None
    website: Any = None


class PageViewRequest(BaseModel):
    path: Any = None


# --- Site Settings ---
class SiteSettingsResponse(BaseModel):
    maintenance_mode: bool
    disable_registrations: bool
    disable_comments: bool
    disable_contact_forms: bool
    disable_problem_reports: bool
    read_only_mode: bool
    nuclear_lockdown: bool
    updated_at: datetime | None = None
    updated_by: str | None = None


class SiteSettingsUpdateRequest(BaseModel):
    """Switch updates; unknown keys are reported by the settings component."""

    model_config = ConfigDict(extra="allow")

    maintenance_mode: bool | None = None
    disable_registrations: bool | None = None
    disable_comments: bool | None = None
    disable_contact_forms: bool | None = None
    disable_problem_reports: bool | None = None
    read_only_mode: bool | None = None
    nuclear_lockdown: bool | None = None


# --- Admin Stats ---
class ContactStatsResponse(BaseModel):
    total_contacts: int
    total_subscribers: int
    newsletter_subscribers: int
    timestamp: datetime


class VisitorStatsResponse(BaseModel):
    total_unique_visitors: int


# --- Video Import ---
class VideoImportResult(BaseModel):
    video_id: str
    status: str
    content_id: str | None = None
    slug: str | None = None


class VideoSyncResponse(BaseModel):
    processed_count: int
    created_count: int
    skipped_count: int
    published_after: datetime | None = None
    results: list[VideoImportResult] = []
