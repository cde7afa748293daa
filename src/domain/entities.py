from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

# --- Enums / Literals ---
ContentStatus = Literal["draft", "published"]
SubscriberSource = Literal["contact_form", "newsletter_signup"]

# --- Identity ---


@dataclass(frozen=True)
class Identity:
    """Caller identity as supplied by the identity provider."""

    user_id: str
    email: str
    email_verified: bool = False


# --- Content ---


class ContentDocument(BaseModel):
    """Stored shape of a content record (everything except the store id)."""

    title: str
    excerpt: str = ""
    content: str = ""
    status: ContentStatus = "draft"

    author_id: str
    author_email: str

    slug: str
    old_slugs: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    created_at: datetime
    updated_at: datetime
    published_at: datetime | None = None

    featured_image: str | None = None
    thumbnail_url: str | None = None

    # Set only on items imported from the video channel
    youtube_video_id: str | None = None
    youtube_url: str | None = None


class ContentItem(ContentDocument):
    id: str

    @property
    def is_published(self) -> bool:
        return self.status == "published"


# --- Forms ---


class ContactSubmission(BaseModel):
    name: str
    email: str
    subject: str
    message: str
    newsletter: bool = False
    form_load_time: int | None = None
    submission_time: int | None = None
    time_to_fill: int | None = None
    ip_address: str = "unknown"
    user_agent: str = "Unknown"


class Subscriber(BaseModel):
    email: str
    name: str
    source: SubscriberSource
    status: Literal["active", "unsubscribed"] = "active"
    ip_address: str | None = None
    user_agent: str | None = None


# --- Site Settings ---


class SiteSettings(BaseModel):
    """Emergency switches; defaults are the fail-safe "site runs normally" state."""

    maintenance_mode: bool = False
    disable_registrations: bool = False
    disable_comments: bool = False
    disable_contact_forms: bool = False
    disable_problem_reports: bool = False
    read_only_mode: bool = False
    nuclear_lockdown: bool = False
    updated_at: datetime | None = None
    updated_by: str | None = None
