"""
Contact component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

# accepted  - stored and notified
# ignored   - honeypot tripped; caller reports success without side effects
# blocked   - client IP in a blocked range
# invalid   - failed validation
# cooldown  - same client submitted too recently
# duplicate - newsletter email already subscribed
# disabled  - forms switched off in site settings
# failed    - stored, but the notification could not be delivered
RelayStatus = Literal[
    "accepted", "ignored", "blocked", "invalid", "cooldown", "duplicate", "disabled", "failed"
]

DEFAULT_SPAM_TRIGGERS: tuple[str, ...] = (
    "seo", "wikipedia", "promotion", "marketing", "branding", "web design",
    "guest post", "backlink", "crypto", "opt-out", "bitcoin", "forex",
    "investment", "loan", "credit", "debt", "casino", "gambling", "viagra",
    "pharmacy", "weight loss", "diet pill", "supplement", "insurance",
    "mortgage", "refinance", "trading", "stocks", "profit", "earn money",
    "work from home", "make money", "get rich", "click here", "buy now",
    "limited time", "act now", "free trial", "no obligation", "risk free",
)


# --- Configuration ---


@dataclass(frozen=True)
class ContactConfig:
    """Relay configuration from rules and environment."""

    cooldown_seconds: int = 300
    min_fill_seconds: int = 10
    max_fill_seconds: int = 3600

    name_min: int = 2
    name_max: int = 100
    subject_min: int = 5
    subject_max: int = 200
    message_min: int = 10
    message_max: int = 5000
    email_max: int = 254

    spam_triggers: tuple[str, ...] = DEFAULT_SPAM_TRIGGERS
    blocked_ip_prefixes: tuple[str, ...] = ()

    notify_email: str = ""
    site_name: str = "Ministry Website"


# --- Input Models ---


@dataclass(frozen=True)
class ContactFormInput:
    """Raw contact form payload plus request metadata. Nothing here is trusted."""

    name: object = None
    email: object = None
    subject: object = None
    message: object = None
    newsletter: object = False
    website: object = None  # honeypot
    form_load_time: object = None  # epoch milliseconds
    submission_time: object = None  # epoch milliseconds
    client_ip: str = "unknown"
    user_agent: str = "Unknown"


@dataclass(frozen=True)
class NewsletterFormInput:
    """Raw newsletter sign-up payload plus request metadata."""

    name: object = None
    email: object = None
    website: object = None  # honeypot
    client_ip: str = "unknown"
    user_agent: str = "Unknown"


# --- Sanitized Data ---


@dataclass(frozen=True)
class SanitizedContact:
    name: str
    email: str
    subject: str
    message: str
    newsletter: bool
    form_load_time: int
    submission_time: int

    @property
    def time_to_fill(self) -> int:
        return self.submission_time - self.form_load_time


@dataclass(frozen=True)
class SanitizedNewsletter:
    name: str
    email: str


@dataclass(frozen=True)
class SanitizeResult:
    """Outcome of sanitizing a form. `required` lists missing or non-text fields."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    required: list[str] = field(default_factory=list)
    contact: SanitizedContact | None = None
    newsletter: SanitizedNewsletter | None = None


# --- Output Models ---


@dataclass(frozen=True)
class RelayOutput:
    """Output of a contact or newsletter relay request."""

    status: RelayStatus
    message: str = ""
    contact_id: str | None = None
    subscriber_id: str | None = None
    errors: list[str] = field(default_factory=list)
    required: list[str] = field(default_factory=list)
    retry_after: int | None = None

    @property
    def success(self) -> bool:
        return self.status in ("accepted", "ignored")


@dataclass(frozen=True)
class ContactStatsOutput:
    """Submission counts for the admin dashboard."""

    total_contacts: int
    total_subscribers: int
    # Contact form senders who ticked the newsletter box
    newsletter_subscribers: int
    generated_at: datetime
