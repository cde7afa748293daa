"""Unit tests for DevEmailAdapter."""

import logging

from src.adapters.dev_email import DevEmailAdapter
from src.ports.email import EmailResult, EmailStatus


def test_send_is_logged_not_sent(caplog):
    adapter = DevEmailAdapter()

    with caplog.at_level(logging.INFO, logger="src.adapters.dev_email"):
        result = adapter.send_email(
            recipient="office@example.org",
            subject="New contact form submission",
            body_html="<p>" + "x" * 200 + "</p>",
            reply_to="jane@example.org",
        )

    assert result.status == EmailStatus.SKIPPED
    assert result.delivered
    assert result.message_id.startswith("dev-")
    assert "To=office@example.org" in caplog.text
    assert "ReplyTo=jane@example.org" in caplog.text
    assert "..." in caplog.text


def test_outbox_helpers():
    adapter = DevEmailAdapter()
    assert adapter.get_last_email() is None

    adapter.send_email("a@example.org", "First", "<p>1</p>")
    adapter.send_email("b@example.org", "Second", "<p>2</p>", body_text="2")

    assert adapter.email_count == 2
    last = adapter.get_last_email()
    assert last.recipient == "b@example.org"
    assert last.body_text == "2"

    adapter.clear()
    assert adapter.email_count == 0


def test_failed_result_is_not_delivered():
    result = EmailResult.failed("a@example.org", "smtp down")
    assert not result.delivered
    assert result.error == "smtp down"
