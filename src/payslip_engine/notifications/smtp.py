"""SMTP mail transport."""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

from payslip_engine.config import Settings, get_settings
from payslip_engine.notifications.base import SendResult

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Salary payment notification"


class SmtpMailTransport:
    """Sends payroll notifications through an SMTP relay.

    smtplib is blocking, so each send runs in a worker thread.
    """

    transport_name = "smtp"

    def __init__(self, settings: Settings | None = None, subject: str = DEFAULT_SUBJECT):
        settings = settings or get_settings()
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_username
        self.password = settings.smtp_password
        self.use_tls = settings.smtp_use_tls
        self.from_email = settings.mail_from
        self.from_name = settings.institution_name
        self.subject = subject

    def build_message(self, to_email: str, to_name: str, content: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = self.subject
        message["From"] = formataddr((self.from_name, self.from_email))
        message["To"] = formataddr((to_name, to_email))
        message["Message-ID"] = make_msgid()
        message.set_content(content)
        return message

    async def send(self, to_email: str, to_name: str, content: str) -> SendResult:
        message = self.build_message(to_email, to_name, content)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            return SendResult(success=False, message=str(e))

        return SendResult(
            success=True,
            message="delivered",
            provider_message_id=message["Message-ID"],
        )

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port) as server:
            if self.use_tls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.send_message(message)
