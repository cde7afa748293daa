"""
Outbound email port.

The contact relay notifies the site owner of each stored contact message and
newsletter sign-up. DevEmailAdapter logs instead of sending; deployments plug
in an SMTP or provider adapter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class EmailStatus(Enum):
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"  # logged only


@dataclass(frozen=True)
class EmailResult:
    status: EmailStatus
    recipient: str
    message_id: str | None = None
    error: str | None = None

    @property
    def delivered(self) -> bool:
        """A skipped send counts as delivered so dev runs follow the happy path."""
        return self.status is not EmailStatus.FAILED

    @classmethod
    def failed(cls, recipient: str, error: str) -> EmailResult:
        return cls(status=EmailStatus.FAILED, recipient=recipient, error=error)


class EmailPort(Protocol):
    def send_email(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str | None = None,
        reply_to: str | None = None,
    ) -> EmailResult:
        """Send one message. Delivery problems come back as a FAILED result, never raised."""
        ...
