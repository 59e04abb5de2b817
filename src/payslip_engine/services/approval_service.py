"""Payslip approval workflow."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.models import PaySlip, PayslipStatus
from payslip_engine.services.audit import record_audit
from payslip_engine.services.payslip_service import PayslipService
from payslip_engine.services.state_machine import PayslipStateMachine

logger = logging.getLogger(__name__)


class ApprovalService:
    """Moves payslips from PENDING to PAID.

    Approval is idempotent: approving a PAID payslip returns it unchanged.
    Notification of employees is left to the caller, which runs the
    notification pipeline after approve_all().
    """

    def __init__(self, session: AsyncSession, actor: str | None = None):
        self.session = session
        self.actor = actor
        self.payslips = PayslipService(session)

    async def approve_one(self, payslip_id: UUID) -> PaySlip:
        """Approve a single payslip.

        Raises:
            NotFoundError: If no payslip has this id
        """
        logger.info("Approving pay slip with id: %s", payslip_id)
        payslip = await self.payslips.get(payslip_id)
        self._approve(payslip)
        await self.session.flush()
        logger.info("Pay slip approved successfully with id: %s", payslip_id)
        return payslip

    async def approve_all(self, month: int, year: int) -> list[PaySlip]:
        """Approve every payslip of a period regardless of current status."""
        logger.info("Approving all pay slips for month: %s and year: %s", month, year)
        payslips = await self.payslips.list_for_period(month, year)
        if not payslips:
            logger.warning("No pay slips found for month: %s and year: %s", month, year)
            return []

        changed = sum(1 for payslip in payslips if self._approve(payslip))
        await self.session.flush()

        logger.info(
            "Approved %d pay slips for month: %s and year: %s (%d newly paid)",
            len(payslips),
            month,
            year,
            changed,
        )
        return payslips

    def _approve(self, payslip: PaySlip) -> bool:
        if not PayslipStateMachine.mark_paid(payslip):
            logger.debug("Pay slip %s already paid", payslip.payslip_id)
            return False

        record_audit(
            self.session,
            entity_type="pay_slip",
            entity_id=payslip.payslip_id,
            action=f"status_change:{PayslipStatus.PENDING.value}:{PayslipStatus.PAID.value}",
            actor=self.actor,
            after={"net_salary": str(payslip.net_salary)},
        )
        return True
