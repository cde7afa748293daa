"""
Contact relay policy - pure functions (functional core).

Key behaviors:
- honeypot field filled → treated as a bot, silently accepted
- text fields lose HTML tags and script-ish patterns before validation
- submissions must take between min and max fill time (epoch ms timestamps)
- suspicious markup and promotional trigger words are rejected
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .models import (
    ContactConfig,
    SanitizedContact,
    SanitizedNewsletter,
    SanitizeResult,
)

# --- Email Validation Regex (RFC 5322 simplified) ---

EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)

_TAGS = re.compile(r"<[^>]*>")

_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
    ("&quot;", '"'),
    ("&#x27;", "'"),
    ("&#x2F;", "/"),
    ("&nbsp;", " "),
)

_INJECTION = re.compile(
    r"javascript:|data:|vbscript:|onload=|onerror=|onclick=|onmouseover=",
    re.IGNORECASE,
)

SUSPICIOUS_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"<script[^>]*>",
        r"javascript:",
        r"vbscript:",
        r"data:text/html",
        r"<iframe[^>]*>",
        r"<object[^>]*>",
        r"<embed[^>]*>",
        r"<link[^>]*>",
        r"<meta[^>]*>",
        r"<style[^>]*>",
        r"on\w+\s*=",
        r"eval\s*\(",
        r"document\.",
        r"window\.",
        r"alert\s*\(",
        r"prompt\s*\(",
        r"confirm\s*\(",
    )
)


# --- Request Policy ---


def is_truthy(value: object) -> bool:
    """Form-field truthiness as the browser front end sees it."""
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)):
        return value == value and value != 0  # NaN is falsy
    if isinstance(value, str):
        return value != ""
    return True


def is_bot_submission(honeypot: object) -> bool:
    """The hidden `website` field is only ever filled in by bots."""
    return is_truthy(honeypot)


def is_blocked_ip(client_ip: str, prefixes: Iterable[str]) -> bool:
    return any(client_ip.startswith(prefix) for prefix in prefixes)


# --- Sanitizers ---


def sanitize_text(value: str, max_length: int) -> str:
    """Strip tags, decode common entities, drop injection patterns and truncate."""
    if not value or not isinstance(value, str):
        return ""

    text = _TAGS.sub("", value)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    text = _INJECTION.sub("", text.strip())
    return text[:max_length]


def sanitize_email(value: str) -> str:
    if not value or not isinstance(value, str):
        return ""
    return _TAGS.sub("", value).strip().lower()


def is_valid_email(email: str, max_length: int = 254) -> bool:
    return bool(email) and len(email) <= max_length and bool(EMAIL_REGEX.match(email))


def contains_spam_triggers(text: str, triggers: Iterable[str]) -> bool:
    if not text:
        return False
    return any(
        re.search(rf"\b{re.escape(trigger)}\b", text, re.IGNORECASE) for trigger in triggers
    )


def contains_suspicious_content(text: str) -> bool:
    if not text:
        return False
    return any(pattern.search(text) for pattern in SUSPICIOUS_PATTERNS)


def escape_html_for_email(text: str) -> str:
    """Escape user text for the HTML notification body; newlines become <br>."""
    if not text or not isinstance(text, str):
        return ""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
        .replace("/", "&#x2F;")
        .replace("\n", "<br>")
    )


# --- Form Validation ---


def _missing_text_fields(fields: dict[str, object]) -> list[str]:
    return [name for name, value in fields.items() if not isinstance(value, str) or not value]


def _parse_millis(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _check_timing(form_load_time: object, submission_time: object, config: ContactConfig) -> str | None:
    if not form_load_time or not submission_time:
        return "Form timing information is missing"

    loaded = _parse_millis(form_load_time)
    submitted = _parse_millis(submission_time)
    if loaded is None or submitted is None:
        return "Invalid form timing data"
    if submitted < loaded:
        return "Invalid form timing sequence"

    time_to_fill = submitted - loaded
    if time_to_fill < config.min_fill_seconds * 1000:
        return "Form submitted too quickly. Please take your time to fill out the form."
    if time_to_fill > config.max_fill_seconds * 1000:
        return "Form submission timed out. Please try again."
    return None


def _name_errors(name: str, config: ContactConfig) -> list[str]:
    if len(name) < config.name_min:
        return [f"Name must be at least {config.name_min} characters long"]
    return []


def sanitize_contact_form(
    name: object,
    email: object,
    subject: object,
    message: object,
    newsletter: object,
    form_load_time: object,
    submission_time: object,
    config: ContactConfig,
) -> SanitizeResult:
    """
    Sanitize and validate a contact form.

    Structural problems (missing fields, bad timing) are reported before any
    content checks run.
    """
    required = _missing_text_fields(
        {"name": name, "email": email, "subject": subject, "message": message}
    )
    errors = [f"{field.capitalize()} is required and must be a string" for field in required]

    timing_error = _check_timing(form_load_time, submission_time, config)
    if timing_error:
        errors.append(timing_error)

    if errors:
        return SanitizeResult(is_valid=False, errors=errors, required=required)

    data = SanitizedContact(
        name=sanitize_text(str(name), config.name_max),
        email=sanitize_email(str(email)),
        subject=sanitize_text(str(subject), config.subject_max),
        message=sanitize_text(str(message), config.message_max),
        newsletter=is_truthy(newsletter),
        form_load_time=_parse_millis(form_load_time) or 0,
        submission_time=_parse_millis(submission_time) or 0,
    )

    errors.extend(_name_errors(data.name, config))
    if not is_valid_email(data.email, config.email_max):
        errors.append("Email must be a valid email address")
    if len(data.subject) < config.subject_min:
        errors.append(f"Subject must be at least {config.subject_min} characters long")
    if len(data.message) < config.message_min:
        errors.append(f"Message must be at least {config.message_min} characters long")

    texts = (data.name, data.subject, data.message)
    if any(contains_suspicious_content(t) for t in texts):
        errors.append("Content contains suspicious elements and cannot be processed")
    if any(contains_spam_triggers(t, config.spam_triggers) for t in texts):
        errors.append("Message appears to be promotional or spam content")

    if errors:
        return SanitizeResult(is_valid=False, errors=errors)
    return SanitizeResult(is_valid=True, contact=data)


def sanitize_newsletter_form(name: object, email: object, config: ContactConfig) -> SanitizeResult:
    """Sanitize and validate a newsletter sign-up."""
    required = _missing_text_fields({"name": name, "email": email})
    if required:
        return SanitizeResult(
            is_valid=False,
            errors=[f"{field.capitalize()} is required and must be a string" for field in required],
            required=required,
        )

    data = SanitizedNewsletter(
        name=sanitize_text(str(name), config.name_max),
        email=sanitize_email(str(email)),
    )

    errors = _name_errors(data.name, config)
    if not is_valid_email(data.email, config.email_max):
        errors.append("Email must be a valid email address")
    if contains_suspicious_content(data.name):
        errors.append("Name contains suspicious elements and cannot be processed")
    if contains_spam_triggers(data.name, config.spam_triggers):
        errors.append("Name appears to be promotional or spam content")

    if errors:
        return SanitizeResult(is_valid=False, errors=errors)
    return SanitizeResult(is_valid=True, newsletter=data)
