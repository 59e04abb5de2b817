"""End-to-end tests for the command line interface."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from payslip_engine.cli import PayslipCli
from payslip_engine.config import get_settings
from payslip_engine.database import create_all, get_engine, make_session_factory
from payslip_engine.models import Employee, Employment, Message, MessageStatus, PaySlip


@pytest.fixture
def database_url(monkeypatch, tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


def run_sync(database_url, work):
    async def _run():
        engine = get_engine(database_url)
        try:
            await create_all(engine)
            async with make_session_factory(engine)() as session:
                result = await work(session)
                await session.commit()
                return result
        finally:
            await engine.dispose()

    return asyncio.run(_run())


@pytest.fixture
def seeded(database_url):
    async def seed(session):
        for first_name, email, base_salary in (
            ("Alice", "alice@example.com", "1000000"),
            ("Bob", "bob@example.com", "500000"),
        ):
            employee = Employee(first_name=first_name, last_name="Test", email=email)
            session.add(employee)
            await session.flush()
            session.add(
                Employment(
                    code=f"EMP-{first_name.upper()}",
                    employee_id=employee.employee_id,
                    department="Finance",
                    position="Analyst",
                    base_salary=Decimal(base_salary),
                    joining_date=date(2020, 1, 6),
                )
            )

    run_sync(database_url, seed)
    return database_url


def test_no_command_prints_help(capsys):
    assert PayslipCli().run([]) == 1
    assert "usage" in capsys.readouterr().out


@pytest.mark.parametrize("month", ["0", "13", "march"])
def test_month_validated(month):
    with pytest.raises(SystemExit):
        PayslipCli().run(["generate", "--month", month, "--year", "2024"])


def test_init_deductions(database_url, capsys):
    assert PayslipCli().run(["init-deductions"]) == 0
    assert PayslipCli().run(["init-deductions"]) == 0

    out = capsys.readouterr().out
    assert "Inserted 6 default deductions." in out
    assert "Inserted 0 default deductions." in out


def test_generate_then_approve_all(seeded, capsys):
    assert PayslipCli().run(["generate", "--month", "3", "--year", "2024"]) == 0
    assert "Generated 2 payslips for 3/2024" in capsys.readouterr().out

    exit_code = PayslipCli().run(
        ["approve-all", "--month", "3", "--year", "2024", "--stub-mail"]
    )

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Approved 2 payslips for 3/2024" in out
    assert "Created 2 messages" in out
    assert "Sent 2 messages, 0 failed" in out

    async def check(session):
        payslips = await session.scalar(select(func.count()).select_from(PaySlip))
        sent = await session.scalar(
            select(func.count())
            .select_from(Message)
            .where(Message.status == MessageStatus.SENT)
        )
        return payslips, sent

    assert run_sync(seeded, check) == (2, 2)


def test_send_pending_with_nothing_queued(database_url, capsys):
    assert PayslipCli().run(["send-pending", "--stub-mail"]) == 0
    assert "Sent 0 messages, 0 failed" in capsys.readouterr().out
