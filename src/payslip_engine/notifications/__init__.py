"""Mail transports for payroll notifications."""

from payslip_engine.notifications.base import MailTransport, SendResult
from payslip_engine.notifications.smtp import SmtpMailTransport
from payslip_engine.notifications.stub import OutboxEntry, StubMailTransport

__all__ = [
    "MailTransport",
    "OutboxEntry",
    "SendResult",
    "SmtpMailTransport",
    "StubMailTransport",
]
