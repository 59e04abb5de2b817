"""Employment directory: active contracts and employee lookup."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from payslip_engine.errors import ConflictError, NotFoundError
from payslip_engine.models import Employee, Employment, EmploymentStatus

logger = logging.getLogger(__name__)


def generate_employment_code() -> str:
    return "EMP-" + uuid4().hex[:8].upper()


class EmploymentService:
    """Service for employment records.

    One employment per employee, enforced at creation. Records are never
    deleted; DISABLED employments are simply left out of payroll.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_employee_by_email(self, email: str) -> Employee:
        result = await self.session.execute(select(Employee).where(Employee.email == email))
        employee = result.scalar_one_or_none()
        if employee is None:
            logger.error("Employee not found with email: %s", email)
            raise NotFoundError("Employee", email)
        return employee

    async def list_active(self) -> list[Employment]:
        """Active employments in stable creation order, employees loaded."""
        result = await self.session.execute(
            select(Employment)
            .where(Employment.status == EmploymentStatus.ACTIVE)
            .options(selectinload(Employment.employee))
            .order_by(Employment.created_at, Employment.employment_id)
        )
        return list(result.scalars().all())

    async def list_all(self) -> list[Employment]:
        result = await self.session.execute(
            select(Employment)
            .options(selectinload(Employment.employee))
            .order_by(Employment.created_at, Employment.employment_id)
        )
        return list(result.scalars().all())

    async def get_by_code(self, code: str) -> Employment:
        result = await self.session.execute(
            select(Employment)
            .where(Employment.code == code)
            .options(selectinload(Employment.employee))
            .execution_options(populate_existing=True)
        )
        employment = result.scalar_one_or_none()
        if employment is None:
            logger.error("Employment record not found with code: %s", code)
            raise NotFoundError("Employment", code)
        return employment

    async def get_by_employee_email(self, email: str) -> Employment:
        employee = await self.get_employee_by_email(email)
        result = await self.session.execute(
            select(Employment)
            .where(Employment.employee_id == employee.employee_id)
            .options(selectinload(Employment.employee))
        )
        employment = result.scalar_one_or_none()
        if employment is None:
            logger.error("Employment record not found for employee with email: %s", email)
            raise NotFoundError("Employment", email)
        return employment

    async def create(
        self,
        employee_email: str,
        department: str,
        position: str,
        base_salary: Decimal,
        joining_date: date,
    ) -> Employment:
        logger.info("Creating employment record for employee with email: %s", employee_email)
        employee = await self.get_employee_by_email(employee_email)

        existing = await self.session.execute(
            select(Employment.employment_id).where(Employment.employee_id == employee.employee_id)
        )
        if existing.first() is not None:
            logger.error("Employment record already exists for employee with email: %s", employee_email)
            raise ConflictError("Employment", employee_email)

        code = generate_employment_code()
        employment = Employment(
            code=code,
            employee_id=employee.employee_id,
            department=department,
            position=position,
            base_salary=Decimal(base_salary),
            joining_date=joining_date,
            status=EmploymentStatus.ACTIVE,
        )
        self.session.add(employment)
        await self.session.flush()
        return await self.get_by_code(code)

    async def update(
        self,
        code: str,
        department: str,
        position: str,
        base_salary: Decimal,
        joining_date: date,
    ) -> Employment:
        logger.info("Updating employment record with code: %s", code)
        employment = await self.get_by_code(code)
        employment.department = department
        employment.position = position
        employment.base_salary = Decimal(base_salary)
        employment.joining_date = joining_date
        await self.session.flush()
        return employment

    async def set_status(self, code: str, active: bool) -> Employment:
        status = EmploymentStatus.ACTIVE if active else EmploymentStatus.DISABLED
        logger.info("Setting employment record status with code: %s to %s", code, status.value)
        employment = await self.get_by_code(code)
        employment.status = status
        await self.session.flush()
        return employment
