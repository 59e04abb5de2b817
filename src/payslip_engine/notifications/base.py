"""Base protocol and types for mail transports.

The notification pipeline depends only on MailTransport; the SMTP and stub
implementations live beside it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class SendResult:
    """Result of handing one mail to a transport."""

    success: bool
    message: str = ""
    provider_message_id: str | None = None

    def __bool__(self) -> bool:
        return self.success


@runtime_checkable
class MailTransport(Protocol):
    """Protocol for payroll notification delivery.

    Implementations either return a failed SendResult or raise; the pipeline
    treats both as a failed delivery.
    """

    transport_name: str

    async def send(self, to_email: str, to_name: str, content: str) -> SendResult:
        """Deliver ``content`` to one employee."""
        ...
