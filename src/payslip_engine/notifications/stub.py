"""In-memory mail transport for local development and testing.

Replace with SmtpMailTransport (or another provider) for production.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import uuid4

from payslip_engine.notifications.base import SendResult


@dataclass(frozen=True)
class OutboxEntry:
    to_email: str
    to_name: str
    content: str
    provider_message_id: str


class StubMailTransport:
    """Records mail instead of sending it.

    Args:
        fail_for: Addresses whose sends report failure.
        raise_for: Addresses whose sends raise ConnectionError.
        fail_all: Every send reports failure.
    """

    transport_name = "stub"

    def __init__(
        self,
        fail_for: set[str] | None = None,
        raise_for: set[str] | None = None,
        fail_all: bool = False,
    ):
        self.fail_for = set(fail_for or ())
        self.raise_for = set(raise_for or ())
        self.fail_all = fail_all
        self.outbox: list[OutboxEntry] = []
        self.attempts = 0

    async def send(self, to_email: str, to_name: str, content: str) -> SendResult:
        self.attempts += 1
        if to_email in self.raise_for:
            raise ConnectionError(f"stub transport unreachable for {to_email}")
        if self.fail_all or to_email in self.fail_for:
            return SendResult(success=False, message="rejected by stub transport")

        provider_message_id = f"STUB-{uuid4().hex[:12].upper()}"
        self.outbox.append(OutboxEntry(to_email, to_name, content, provider_message_id))
        return SendResult(success=True, message="queued", provider_message_id=provider_message_id)
