"""Tests for the SMTP mail transport."""

import smtplib
from dataclasses import replace
from unittest.mock import MagicMock, patch

import pytest

from payslip_engine.config import Settings
from payslip_engine.notifications import MailTransport, SmtpMailTransport, StubMailTransport


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        engine_version="test",
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="INFO",
        institution_name="RCA",
        bootstrap_deductions=True,
        mail_from="payroll@rca.example",
        smtp_host="smtp.rca.example",
        smtp_port=587,
        smtp_username="payroll",
        smtp_password="secret",
        smtp_use_tls=True,
    )


@pytest.fixture
def mock_smtp():
    with patch("payslip_engine.notifications.smtp.smtplib.SMTP") as smtp_cls:
        server = MagicMock()
        smtp_cls.return_value.__enter__.return_value = server
        yield smtp_cls, server


def test_transports_satisfy_protocol(settings):
    assert isinstance(SmtpMailTransport(settings), MailTransport)
    assert isinstance(StubMailTransport(), MailTransport)


def test_build_message(settings):
    transport = SmtpMailTransport(settings)

    message = transport.build_message("alice@example.com", "Alice Mukamana", "Dear Alice")

    assert message["To"] == "Alice Mukamana <alice@example.com>"
    assert message["From"] == "RCA <payroll@rca.example>"
    assert message["Subject"] == "Salary payment notification"
    assert message.get_content().strip() == "Dear Alice"


async def test_send_success(settings, mock_smtp):
    smtp_cls, server = mock_smtp

    result = await SmtpMailTransport(settings).send("alice@example.com", "Alice", "Dear Alice")

    assert result.success is True
    assert result.provider_message_id
    smtp_cls.assert_called_once_with("smtp.rca.example", 587)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("payroll", "secret")
    server.send_message.assert_called_once()


async def test_send_without_tls_or_credentials(settings, mock_smtp):
    _, server = mock_smtp
    plain = replace(settings, smtp_use_tls=False, smtp_username="", smtp_password="")

    result = await SmtpMailTransport(plain).send("alice@example.com", "Alice", "Dear Alice")

    assert result
    server.starttls.assert_not_called()
    server.login.assert_not_called()


async def test_smtp_error_reported_as_failure(settings, mock_smtp):
    _, server = mock_smtp
    server.send_message.side_effect = smtplib.SMTPRecipientsRefused({})

    result = await SmtpMailTransport(settings).send("alice@example.com", "Alice", "Dear Alice")

    assert result.success is False
    assert not result


async def test_connection_error_reported_as_failure(settings, mock_smtp):
    smtp_cls, _ = mock_smtp
    smtp_cls.side_effect = ConnectionRefusedError("connection refused")

    result = await SmtpMailTransport(settings).send("alice@example.com", "Alice", "Dear Alice")

    assert result.success is False
    assert "refused" in result.message
