"""Payslip generation and ledger queries."""

from __future__ import annotations

import logging
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from payslip_engine.calculators.payslip_calculator import PayslipCalculator
from payslip_engine.calculators.types import PayslipAmounts
from payslip_engine.database import insert_ignore_conflicts
from payslip_engine.errors import NotFoundError
from payslip_engine.models import Employment, PaySlip, PayslipStatus
from payslip_engine.services.deduction_service import DeductionService
from payslip_engine.services.employment_service import EmploymentService

logger = logging.getLogger(__name__)


class PayslipService:
    """Service for generating and reading payslips.

    generate() is safe to re-run for the same period:
    1. Bootstraps the default deduction rules (unless disabled)
    2. Loads active employments; an empty directory yields no payslips
    3. Snapshots the rule set and checks the required rules before writing
    4. Inserts one payslip per (employee, month, year) with ON CONFLICT DO
       NOTHING, so existing or concurrently inserted rows are skipped
    """

    def __init__(self, session: AsyncSession, bootstrap_deductions: bool = True):
        self.session = session
        self.bootstrap_deductions = bootstrap_deductions
        self.deductions = DeductionService(session)
        self.employments = EmploymentService(session)

    async def generate(self, month: int, year: int) -> list[PaySlip]:
        """Generate PENDING payslips for every active employment.

        Returns only payslips created by this call, in employment order.

        Raises:
            InvalidStateError: If a required deduction rule is missing
        """
        logger.info("Generating pay slips for month: %s and year: %s", month, year)

        if self.bootstrap_deductions:
            await self.deductions.upsert_defaults()

        active = await self.employments.list_active()
        if not active:
            logger.warning("No active employments found")
            return []

        rules = await self.deductions.require_all()
        calculator = PayslipCalculator(rules)
        logger.debug("Using deduction rule set %s", rules.fingerprint)

        created: list[PaySlip] = []
        for employment in active:
            amounts = calculator.calculate(employment.base_salary)
            payslip = await self._insert_payslip(employment, amounts, month, year)
            if payslip is None:
                logger.warning(
                    "Pay slip already exists for employee: %s, month: %s, year: %s",
                    employment.employee.email,
                    month,
                    year,
                )
                continue

            created.append(payslip)
            logger.info(
                "Generated pay slip for employee: %s, month: %s, year: %s",
                employment.employee.email,
                month,
                year,
            )

        return created

    async def _insert_payslip(
        self,
        employment: Employment,
        amounts: PayslipAmounts,
        month: int,
        year: int,
    ) -> PaySlip | None:
        """Insert one payslip, returning None if the period key is taken."""
        payslip_id = uuid4()
        stmt = insert_ignore_conflicts(
            self.session, PaySlip, index_elements=["employee_id", "month", "year"]
        ).values(
            payslip_id=payslip_id,
            employee_id=employment.employee_id,
            housing_amount=amounts.housing,
            transport_amount=amounts.transport,
            employee_tax_amount=amounts.employee_tax,
            pension_amount=amounts.pension,
            medical_insurance_amount=amounts.medical_insurance,
            other_tax_amount=amounts.other,
            gross_salary=amounts.gross,
            net_salary=amounts.net,
            month=month,
            year=year,
            status=PayslipStatus.PENDING,
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get(payslip_id)

    async def get(self, payslip_id: UUID) -> PaySlip:
        result = await self.session.execute(
            select(PaySlip)
            .where(PaySlip.payslip_id == payslip_id)
            .options(selectinload(PaySlip.employee))
        )
        payslip = result.scalar_one_or_none()
        if payslip is None:
            logger.error("Pay slip not found with id: %s", payslip_id)
            raise NotFoundError("PaySlip", payslip_id)
        return payslip

    async def list_for_period(
        self,
        month: int,
        year: int,
        status: PayslipStatus | None = None,
    ) -> list[PaySlip]:
        logger.info("Fetching pay slips for month: %s and year: %s", month, year)
        query = (
            select(PaySlip)
            .where(PaySlip.month == month, PaySlip.year == year)
            .options(selectinload(PaySlip.employee))
            .order_by(PaySlip.created_at, PaySlip.payslip_id)
        )
        if status is not None:
            query = query.where(PaySlip.status == status)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_for_employee(self, email: str) -> list[PaySlip]:
        logger.info("Fetching pay slips for employee: %s", email)
        employee = await self.employments.get_employee_by_email(email)
        result = await self.session.execute(
            select(PaySlip)
            .where(PaySlip.employee_id == employee.employee_id)
            .options(selectinload(PaySlip.employee))
            .order_by(PaySlip.year, PaySlip.month)
        )
        return list(result.scalars().all())

    async def get_for_employee_period(self, email: str, month: int, year: int) -> PaySlip:
        logger.info("Fetching pay slip for employee: %s, month: %s, year: %s", email, month, year)
        employee = await self.employments.get_employee_by_email(email)
        result = await self.session.execute(
            select(PaySlip)
            .where(
                PaySlip.employee_id == employee.employee_id,
                PaySlip.month == month,
                PaySlip.year == year,
            )
            .options(selectinload(PaySlip.employee))
        )
        payslip = result.scalar_one_or_none()
        if payslip is None:
            logger.error(
                "Pay slip not found for employee: %s, month: %s, year: %s", email, month, year
            )
            raise NotFoundError("PaySlip", f"{email} {month}/{year}")
        return payslip
