"""Tests for the employment directory."""

import re
from datetime import date
from decimal import Decimal

import pytest

from payslip_engine.errors import ConflictError, NotFoundError
from payslip_engine.models import EmploymentStatus
from payslip_engine.services import EmploymentService


class TestLookup:
    async def test_employee_by_email(self, session, staff):
        employee = await EmploymentService(session).get_employee_by_email("alice@example.com")

        assert employee.employee_id == staff.alice.employee_id
        assert employee.full_name == "Alice Mukamana"

    async def test_unknown_email(self, session, staff):
        with pytest.raises(NotFoundError):
            await EmploymentService(session).get_employee_by_email("ghost@example.com")

    async def test_list_active_skips_disabled(self, session, staff):
        active = await EmploymentService(session).list_active()

        assert {e.employee.email for e in active} == {"alice@example.com", "bob@example.com"}
        assert all(e.is_active for e in active)

    async def test_list_all_includes_disabled(self, session, staff):
        assert len(await EmploymentService(session).list_all()) == 3

    async def test_employee_without_employment(self, session, staff):
        with pytest.raises(NotFoundError):
            await EmploymentService(session).get_by_employee_email("dave@example.com")


class TestWrites:
    async def test_create(self, session, staff):
        employment = await EmploymentService(session).create(
            employee_email="dave@example.com",
            department="Engineering",
            position="Developer",
            base_salary=Decimal("650000"),
            joining_date=date(2024, 2, 1),
        )

        assert re.fullmatch(r"EMP-[0-9A-F]{8}", employment.code)
        assert employment.status == EmploymentStatus.ACTIVE
        assert employment.employee.email == "dave@example.com"

    async def test_one_employment_per_employee(self, session, staff):
        with pytest.raises(ConflictError):
            await EmploymentService(session).create(
                employee_email="alice@example.com",
                department="Engineering",
                position="Developer",
                base_salary=Decimal("650000"),
                joining_date=date(2024, 2, 1),
            )

    async def test_update(self, session, staff):
        service = EmploymentService(session)
        bob = await service.get_by_employee_email("bob@example.com")

        updated = await service.update(
            bob.code,
            department="Operations",
            position="Manager",
            base_salary=Decimal("600000"),
            joining_date=date(2021, 2, 1),
        )

        assert updated.base_salary == Decimal("600000")
        assert updated.department == "Operations"

    async def test_disable_and_reactivate(self, session, staff):
        service = EmploymentService(session)
        alice = await service.get_by_employee_email("alice@example.com")

        await service.set_status(alice.code, active=False)
        assert {e.employee.email for e in await service.list_active()} == {"bob@example.com"}

        await service.set_status(alice.code, active=True)
        assert len(await service.list_active()) == 2

    async def test_unknown_code(self, session):
        with pytest.raises(NotFoundError):
            await EmploymentService(session).set_status("EMP-00000000", active=False)
