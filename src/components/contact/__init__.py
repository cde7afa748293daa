"""
Contact component - contact form and newsletter relay with spam protection.
"""

from ._impl import (
    EMAIL_REGEX,
    contains_spam_triggers,
    contains_suspicious_content,
    escape_html_for_email,
    is_blocked_ip,
    is_bot_submission,
    is_truthy,
    is_valid_email,
    sanitize_contact_form,
    sanitize_email,
    sanitize_newsletter_form,
    sanitize_text,
)
from .component import config_from_rules, forms_enabled, run_contact, run_contact_stats, run_newsletter
from .models import (
    DEFAULT_SPAM_TRIGGERS,
    ContactConfig,
    ContactFormInput,
    ContactStatsOutput,
    NewsletterFormInput,
    RelayOutput,
    RelayStatus,
    SanitizedContact,
    SanitizedNewsletter,
    SanitizeResult,
)
from .ports import ContactRepoPort, ContactStatsPort, RateLimiterPort

__all__ = [
    # Entry points
    "run_contact",
    "run_contact_stats",
    "run_newsletter",
    "config_from_rules",
    "forms_enabled",
    # Policy
    "EMAIL_REGEX",
    "contains_spam_triggers",
    "contains_suspicious_content",
    "escape_html_for_email",
    "is_blocked_ip",
    "is_bot_submission",
    "is_truthy",
    "is_valid_email",
    "sanitize_contact_form",
    "sanitize_email",
    "sanitize_newsletter_form",
    "sanitize_text",
    # Models
    "DEFAULT_SPAM_TRIGGERS",
    "ContactConfig",
    "ContactFormInput",
    "ContactStatsOutput",
    "NewsletterFormInput",
    "RelayOutput",
    "RelayStatus",
    "SanitizedContact",
    "SanitizedNewsletter",
    "SanitizeResult",
    # Ports
    "ContactRepoPort",
    "ContactStatsPort",
    "RateLimiterPort",
]
