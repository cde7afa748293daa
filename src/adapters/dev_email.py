"""
Email adapter for development and tests.

Nothing leaves the process: each message is logged on one line and kept in
`outbox` so tests can inspect what the relay would have sent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from src.ports.email import EmailResult, EmailStatus

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 100


@dataclass(frozen=True)
class OutboxMessage:
    message_id: str
    recipient: str
    subject: str
    body_html: str
    body_text: str
    reply_to: str | None
    queued_at: datetime


@dataclass
class DevEmailAdapter:
    outbox: list[OutboxMessage] = field(default_factory=list)
    log_level: int = logging.INFO

    def send_email(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str | None = None,
        reply_to: str | None = None,
    ) -> EmailResult:
        message = OutboxMessage(
            message_id=f"dev-{uuid4().hex[:12]}",
            recipient=recipient,
            subject=subject,
            body_html=body_html,
            body_text=body_text or "",
            reply_to=reply_to,
            queued_at=datetime.now(UTC),
        )
        self.outbox.append(message)

        preview = body_html[:PREVIEW_CHARS] + ("..." if len(body_html) > PREVIEW_CHARS else "")
        logger.log(
            self.log_level,
            "EMAIL (dev) %s To=%s ReplyTo=%s Subject=%r Body=%s",
            message.message_id,
            recipient,
            reply_to or "-",
            subject,
            preview,
        )
        return EmailResult(status=EmailStatus.SKIPPED, recipient=recipient, message_id=message.message_id)

    def get_last_email(self) -> OutboxMessage | None:
        return self.outbox[-1] if self.outbox else None

    def clear(self) -> None:
        self.outbox.clear()

    @property
    def email_count(self) -> int:
        return len(self.outbox)
