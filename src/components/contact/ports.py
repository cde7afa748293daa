"""
Contact component port definitions.
"""

from __future__ import annotations

from typing import Any, Protocol

from src.domain.entities import ContactSubmission, Subscriber


class ContactRepoPort(Protocol):
    """Persistence for contact submissions and newsletter subscribers."""

    def add_contact(self, submission: ContactSubmission) -> str:
        """Store a submission and return its id."""
        ...

    def find_subscriber(self, email: str) -> dict[str, Any] | None:
        """Return the subscriber record for an email, if any."""
        ...

    def add_subscriber(self, subscriber: Subscriber) -> str:
        """Store a subscriber and return its id."""
        ...


class RateLimiterPort(Protocol):
    """Tracks accepted submissions per client to enforce a cooldown."""

    def check_rate_limit(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        """Return (allowed, retry_after_seconds)."""
        ...

    def record_attempt(self, key: str) -> None:
        """Record an accepted attempt for a key."""
        ...


class ContactStatsPort(Protocol):
    """Counts over stored submissions."""

    def count_contacts(self) -> int:
        ...

    def count_subscribers(self) -> int:
        ...

    def count_newsletter_contacts(self) -> int:
        """Contacts submitted with the newsletter flag set."""
        ...
