"""Pytest fixtures for payslip engine tests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from functools import partial
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from payslip_engine.database import create_all, make_session_factory
from payslip_engine.models import Employee, Employment, EmploymentStatus
from payslip_engine.notifications import StubMailTransport

# In-memory SQLite shared by every session of a test through StaticPool
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@dataclass
class Staff:
    """Seeded employees keyed by role in the tests."""

    alice: Employee
    bob: Employee
    carol: Employee
    dave: Employee


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh test database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    session_factory = make_session_factory(engine)

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def mail_transport() -> StubMailTransport:
    return StubMailTransport()


async def add_employee(
    session: AsyncSession,
    first_name: str,
    last_name: str,
    email: str,
    base_salary: Decimal | None = None,
    status: EmploymentStatus = EmploymentStatus.ACTIVE,
    code: str | None = None,
) -> Employee:
    """Insert an employee and, when a salary is given, its employment."""
    employee = Employee(first_name=first_name, last_name=last_name, email=email)
    session.add(employee)
    await session.flush()

    if base_salary is not None:
        session.add(
            Employment(
                code=code or f"EMP-{first_name.upper()[:8]}",
                employee_id=employee.employee_id,
                department="Finance",
                position="Analyst",
                base_salary=base_salary,
                joining_date=date(2020, 1, 6),
                status=status,
            )
        )
        await session.flush()
    return employee


@pytest.fixture
async def staff(session: AsyncSession) -> Staff:
    """Seed the directory.

    - alice: active, base 1,000,000
    - bob: active, base 500,000
    - carol: disabled employment
    - dave: no employment record
    """
    alice = await add_employee(session, "Alice", "Mukamana", "alice@example.com", Decimal("1000000"))
    bob = await add_employee(session, "Bob", "Habimana", "bob@example.com", Decimal("500000"))
    carol = await add_employee(
        session,
        "Carol",
        "Uwase",
        "carol@example.com",
        Decimal("750000"),
        status=EmploymentStatus.DISABLED,
    )
    dave = await add_employee(session, "Dave", "Nkusi", "dave@example.com")
    await session.commit()
    return Staff(alice=alice, bob=bob, carol=carol, dave=dave)


@pytest.fixture
def hire(session: AsyncSession):
    """Add one more employee (and employment) inside a test."""
    return partial(add_employee, session)
