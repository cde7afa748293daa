"""
Contact component - contact form and newsletter sign-up relay.

Order of checks for both forms:
1. forms disabled in site settings
2. blocked client IP range
3. honeypot (silent success, nothing stored or sent)
4. sanitization and validation
5. cooldown per client IP (contact form only)
6. duplicate subscriber (newsletter only)

Then the submission is stored and the site owner is notified by email.
"""

from __future__ import annotations

import logging

from src.core.errors import UniquenessConflict
from src.domain.entities import ContactSubmission, SiteSettings, Subscriber
from src.ports.clock import ClockPort
from src.ports.email import EmailPort
from src.rules.models import ContactRules

from ._impl import (
    escape_html_for_email,
    is_blocked_ip,
    is_bot_submission,
    sanitize_contact_form,
    sanitize_newsletter_form,
)
from .models import (
    ContactStatsOutput,
    ContactConfig,
    ContactFormInput,
    NewsletterFormInput,
    RelayOutput,
    SanitizedContact,
    SanitizedNewsletter,
)
from .ports import ContactRepoPort, ContactStatsPort, RateLimiterPort

logger = logging.getLogger(__name__)

BLOCKED_MESSAGE = (
    "We've detected that you're using a VPN. To help prevent spam, please turn off "
    "your VPN and try again. If you're not using a VPN, please contact us directly."
)


def config_from_rules(rules: ContactRules, notify_email: str = "", site_name: str = "") -> ContactConfig:
    return ContactConfig(
        cooldown_seconds=rules.cooldown_seconds,
        min_fill_seconds=rules.form_timing.min_seconds,
        max_fill_seconds=rules.form_timing.max_seconds,
        name_min=rules.lengths.name.min,
        name_max=rules.lengths.name.max,
        subject_min=rules.lengths.subject.min,
        subject_max=rules.lengths.subject.max,
        message_min=rules.lengths.message.min,
        message_max=rules.lengths.message.max,
        email_max=rules.lengths.email_max,
        spam_triggers=tuple(rules.spam_triggers),
        blocked_ip_prefixes=tuple(rules.blocked_ip_prefixes),
        notify_email=notify_email,
        site_name=site_name or ContactConfig.site_name,
    )


def forms_enabled(settings: SiteSettings | None) -> bool:
    if settings is None:
        return True
    return not (settings.disable_contact_forms or settings.nuclear_lockdown)


def _precheck(
    client_ip: str,
    honeypot: object,
    config: ContactConfig,
    settings: SiteSettings | None,
) -> RelayOutput | None:
    if not forms_enabled(settings):
        return RelayOutput(status="disabled", message="Forms are temporarily unavailable")

    if is_blocked_ip(client_ip, config.blocked_ip_prefixes):
        logger.info("Blocked IP range: %s", client_ip)
        return RelayOutput(status="blocked", message=BLOCKED_MESSAGE)

    if is_bot_submission(honeypot):
        logger.info("Bot detected via honeypot from %s", client_ip)
        return RelayOutput(status="ignored")

    return None


def _subscribe_from_contact(repo: ContactRepoPort, data: SanitizedContact) -> str | None:
    """Add the sender to subscribers unless already present; returns the new id."""
    if repo.find_subscriber(data.email) is not None:
        return None
    try:
        subscriber_id = repo.add_subscriber(
            Subscriber(email=data.email, name=data.name, source="contact_form")
        )
    except UniquenessConflict:
        return None
    logger.info("Added newsletter subscriber %s from contact form", subscriber_id)
    return subscriber_id


# --- Notifications ---


def _contact_email(data: SanitizedContact, client_ip: str, contact_id: str, site_name: str) -> tuple[str, str, str]:
    newsletter = "Yes" if data.newsletter else "No"
    subject = f"Contact Form: {data.subject}"
    text = (
        f"Name: {data.name}\nEmail: {data.email}\nSubject: {data.subject}\n"
        f"Newsletter: {newsletter}\nIP: {client_ip}\n\n{data.message}"
    )
    html = (
        "<h3>New Contact Form Submission</h3>"
        f"<p><b>Name:</b> {escape_html_for_email(data.name)}</p>"
        f"<p><b>Email:</b> {escape_html_for_email(data.email)}</p>"
        f"<p><b>Subject:</b> {escape_html_for_email(data.subject)}</p>"
        f"<p><b>Newsletter Subscription:</b> {newsletter}</p>"
        f"<p><b>IP Address:</b> {escape_html_for_email(client_ip)}</p>"
        "<hr><p><b>Message:</b></p>"
        f"<p>{escape_html_for_email(data.message)}</p>"
        f"<hr><p><small>This email was sent from the {escape_html_for_email(site_name)} contact form.</small></p>"
        f"<p><small>Contact ID: {contact_id}</small></p>"
    )
    return subject, html, text


def _newsletter_email(
    data: SanitizedNewsletter, client_ip: str, subscriber_id: str
) -> tuple[str, str, str]:
    subject = f"New Newsletter Subscription: {data.name}"
    text = (
        f"Name: {data.name}\nEmail: {data.email}\nIP: {client_ip}\n\n"
        "This person subscribed to the newsletter through the standalone signup form."
    )
    html = (
        "<h3>New Newsletter Subscription</h3>"
        f"<p><b>Name:</b> {escape_html_for_email(data.name)}</p>"
        f"<p><b>Email:</b> {escape_html_for_email(data.email)}</p>"
        f"<p><b>IP Address:</b> {escape_html_for_email(client_ip)}</p>"
        "<hr><p><small>This subscription was made through the standalone newsletter signup form.</small></p>"
        f"<p><small>Subscriber ID: {subscriber_id}</small></p>"
    )
    return subject, html, text


# --- Component Entry Points ---


def run_contact(
    inp: ContactFormInput,
    *,
    repo: ContactRepoPort,
    email: EmailPort,
    limiter: RateLimiterPort,
    config: ContactConfig | None = None,
    settings: SiteSettings | None = None,
) -> RelayOutput:
    """
    Handle a contact form submission.

    Args:
        inp: Raw form payload and request metadata.
        repo: Contact and subscriber persistence.
        email: Notification email port.
        limiter: Per-IP cooldown tracker.
        config: Relay configuration.
        settings: Current site settings snapshot.

    Returns:
        RelayOutput; store errors propagate to the caller.
    """
    config = config or ContactConfig()

    early = _precheck(inp.client_ip, inp.website, config, settings)
    if early:
        return early

    result = sanitize_contact_form(
        inp.name,
        inp.email,
        inp.subject,
        inp.message,
        inp.newsletter,
        inp.form_load_time,
        inp.submission_time,
        config,
    )
    if not result.is_valid or result.contact is None:
        logger.info("Contact form validation failed: %s", result.errors)
        return RelayOutput(
            status="invalid",
            message="Please check your input and try again.",
            errors=result.errors,
            required=result.required,
        )
    data = result.contact

    cooldown_key = f"contact:{inp.client_ip}"
    allowed, retry_after = limiter.check_rate_limit(cooldown_key, 1, config.cooldown_seconds)
    if not allowed:
        logger.info("Cooldown active for %s (%ss)", inp.client_ip, retry_after)
        return RelayOutput(
            status="cooldown",
            message="Please wait before submitting another message",
            retry_after=retry_after,
        )

    contact_id = repo.add_contact(
        ContactSubmission(
            name=data.name,
            email=data.email,
            subject=data.subject,
            message=data.message,
            newsletter=data.newsletter,
            form_load_time=data.form_load_time,
            submission_time=data.submission_time,
            time_to_fill=data.time_to_fill,
            ip_address=inp.client_ip,
            user_agent=inp.user_agent,
        )
    )
    limiter.record_attempt(cooldown_key)
    logger.info("Contact stored with ID %s", contact_id)

    subscriber_id = None
    if data.newsletter:
        subscriber_id = _subscribe_from_contact(repo, data)
        if subscriber_id is None:
            logger.info("Contact %s already subscribed", contact_id)

    subject, html, text = _contact_email(data, inp.client_ip, contact_id, config.site_name)
    sent = email.send_email(
        config.notify_email,
        subject,
        html,
        text,
        reply_to=f"{data.name} <{data.email}>",
    )
    if not sent.delivered:
        logger.error("Contact %s notification failed: %s", contact_id, sent.error)
        return RelayOutput(status="failed", message="Failed to process contact form", contact_id=contact_id)

    return RelayOutput(
        status="accepted",
        message="Email sent successfully",
        contact_id=contact_id,
        subscriber_id=subscriber_id,
    )


def run_newsletter(
    inp: NewsletterFormInput,
    *,
    repo: ContactRepoPort,
    email: EmailPort,
    config: ContactConfig | None = None,
    settings: SiteSettings | None = None,
) -> RelayOutput:
    """Handle a standalone newsletter sign-up."""
    config = config or ContactConfig()

    early = _precheck(inp.client_ip, inp.website, config, settings)
    if early:
        return early

    result = sanitize_newsletter_form(inp.name, inp.email, config)
    if not result.is_valid or result.newsletter is None:
        logger.info("Newsletter validation failed: %s", result.errors)
        return RelayOutput(
            status="invalid",
            message="Please check your input and try again.",
            errors=result.errors,
            required=result.required,
        )
    data = result.newsletter

    if repo.find_subscriber(data.email) is not None:
        return RelayOutput(
            status="duplicate",
            message="This email address is already subscribed to our newsletter.",
        )

    try:
        subscriber_id = repo.add_subscriber(
            Subscriber(
                email=data.email,
                name=data.name,
                source="newsletter_signup",
                ip_address=inp.client_ip,
                user_agent=inp.user_agent,
            )
        )
    except UniquenessConflict:
        return RelayOutput(
            status="duplicate",
            message="This email address is already subscribed to our newsletter.",
        )
    logger.info("Newsletter subscription added with ID %s", subscriber_id)

    subject, html, text = _newsletter_email(data, inp.client_ip, subscriber_id)
    sent = email.send_email(config.notify_email, subject, html, text)
    if not sent.delivered:
        logger.error("Subscriber %s notification failed: %s", subscriber_id, sent.error)
        return RelayOutput(
            status="failed",
            message="Failed to process newsletter subscription",
            subscriber_id=subscriber_id,
        )

    return RelayOutput(
        status="accepted",
        message="Successfully subscribed to newsletter",
        subscriber_id=subscriber_id,
    )


def run_contact_stats(*, repo: ContactStatsPort, clock: ClockPort) -> ContactStatsOutput:
    return ContactStatsOutput(
        total_contacts=repo.count_contacts(),
        total_subscribers=repo.count_subscribers(),
        newsletter_subscribers=repo.count_newsletter_contacts(),
        generated_at=clock.now_utc(),
    )
