"""Salary notification pipeline.

Two steps run by the caller after a bulk approval:

1. generate_messages(month, year) turns PAID payslips into PENDING messages
2. send_pending() delivers every PENDING message through the mail transport

Delivery failures are isolated per message: the message stays PENDING and is
picked up again by the next send_pending() run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from payslip_engine.config import get_settings
from payslip_engine.models import Employee, Message, MessageStatus, PaySlip, PayslipStatus
from payslip_engine.models.base import utcnow
from payslip_engine.notifications.base import MailTransport
from payslip_engine.services.payslip_service import PayslipService

logger = logging.getLogger(__name__)

MONTH_NAMES = (
    "JANUARY",
    "FEBRUARY",
    "MARCH",
    "APRIL",
    "MAY",
    "JUNE",
    "JULY",
    "AUGUST",
    "SEPTEMBER",
    "OCTOBER",
    "NOVEMBER",
    "DECEMBER",
)

MESSAGE_TEMPLATE = (
    "Dear {first_name}, Your salary of {month_name}/{year} from {institution} "
    "{net_salary:.2f} has been credited to your {employee_id} account successfully."
)


def month_name(month: int) -> str:
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    return MONTH_NAMES[month - 1]


def render_message(payslip: PaySlip, employee: Employee, institution: str) -> str:
    """Render the salary notification for one PAID payslip."""
    content = MESSAGE_TEMPLATE.format(
        first_name=employee.first_name,
        month_name=month_name(payslip.month),
        year=payslip.year,
        institution=institution,
        net_salary=payslip.net_salary,
        employee_id=employee.employee_id,
    )
    return content[: Message.CONTENT_MAX_LENGTH]


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of delivering one message."""

    message_id: UUID
    to_email: str
    sent: bool
    error: str | None = None


@dataclass
class DispatchReport:
    """Per-message results of one send_pending() run."""

    results: list[DispatchResult] = field(default_factory=list)

    @property
    def sent_count(self) -> int:
        return sum(1 for r in self.results if r.sent)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if not r.sent)

    @property
    def failed(self) -> list[DispatchResult]:
        return [r for r in self.results if not r.sent]


class NotificationService:
    """Creates and dispatches salary notifications for paid payslips."""

    def __init__(
        self,
        session: AsyncSession,
        transport: MailTransport | None = None,
        institution: str | None = None,
    ):
        self.session = session
        self.transport = transport
        self.institution = institution or get_settings().institution_name
        self.payslips = PayslipService(session)

    async def generate_messages(
        self,
        month: int,
        year: int,
        deduplicate: bool = False,
    ) -> list[Message]:
        """Create one PENDING message per PAID payslip of the period.

        Repeated calls create repeated messages unless ``deduplicate`` is set,
        in which case employees already messaged for the period are skipped.
        """
        logger.info(
            "Generating messages for approved pay slips for month: %s and year: %s", month, year
        )
        paid = await self.payslips.list_for_period(month, year, status=PayslipStatus.PAID)
        if not paid:
            logger.warning("No approved pay slips found for month: %s and year: %s", month, year)
            return []

        already_messaged: set[UUID] = set()
        if deduplicate:
            already_messaged = await self._messaged_employee_ids(month, year)

        messages: list[Message] = []
        for payslip in paid:
            employee = payslip.employee
            if employee.employee_id in already_messaged:
                logger.info(
                    "Message already exists for employee: %s, month: %s, year: %s",
                    employee.email,
                    month,
                    year,
                )
                continue

            message = Message(
                employee=employee,
                content=render_message(payslip, employee, self.institution),
                month=month,
                year=year,
                status=MessageStatus.PENDING,
            )
            self.session.add(message)
            messages.append(message)
            logger.info(
                "Generated message for employee: %s, month: %s, year: %s",
                employee.email,
                month,
                year,
            )

        await self.session.flush()
        return messages

    async def send_pending(self) -> DispatchReport:
        """Deliver every PENDING message, across all periods."""
        if self.transport is None:
            raise RuntimeError("NotificationService needs a mail transport to send messages")

        logger.info("Sending pending messages")
        pending = await self.list_pending()
        report = DispatchReport()
        if not pending:
            logger.info("No pending messages found")
            return report

        for message in pending:
            report.results.append(await self._dispatch(message))

        await self.session.flush()
        logger.info(
            "Dispatched %d messages: %d sent, %d failed",
            len(report.results),
            report.sent_count,
            report.failed_count,
        )
        return report

    async def list_pending(self) -> list[Message]:
        result = await self.session.execute(
            select(Message)
            .where(Message.status == MessageStatus.PENDING)
            .options(selectinload(Message.employee))
            .order_by(Message.created_at, Message.message_id)
        )
        return list(result.scalars().all())

    async def list_for_period(self, month: int, year: int) -> list[Message]:
        result = await self.session.execute(
            select(Message)
            .where(Message.month == month, Message.year == year)
            .options(selectinload(Message.employee))
            .order_by(Message.created_at, Message.message_id)
        )
        return list(result.scalars().all())

    async def _dispatch(self, message: Message) -> DispatchResult:
        employee = message.employee
        try:
            outcome = await self.transport.send(employee.email, employee.full_name, message.content)
        except Exception as e:
            logger.exception("Failed to send message to employee: %s", employee.email)
            return DispatchResult(message.message_id, employee.email, sent=False, error=str(e))

        if not outcome.success:
            logger.error(
                "Failed to send message to employee: %s: %s", employee.email, outcome.message
            )
            return DispatchResult(
                message.message_id, employee.email, sent=False, error=outcome.message
            )

        message.status = MessageStatus.SENT
        message.sent_at = utcnow()
        logger.info("Sent message to employee: %s", employee.email)
        return DispatchResult(message.message_id, employee.email, sent=True)

    async def _messaged_employee_ids(self, month: int, year: int) -> set[UUID]:
        result = await self.session.execute(
            select(Message.employee_id).where(Message.month == month, Message.year == year)
        )
        return set(result.scalars().all())
