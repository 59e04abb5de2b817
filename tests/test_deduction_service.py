"""Tests for the deduction rule store."""

import re
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from payslip_engine.calculators.types import REQUIRED_DEDUCTIONS
from payslip_engine.errors import ConflictError, InvalidStateError, NotFoundError
from payslip_engine.models import AuditEvent, DeductionRule
from payslip_engine.services import DeductionService


async def count_rules(session) -> int:
    return await session.scalar(select(func.count()).select_from(DeductionRule))


class TestUpsertDefaults:
    async def test_inserts_all_defaults_on_empty_store(self, session):
        inserted = await DeductionService(session).upsert_defaults()

        assert inserted == 6
        rules = await DeductionService(session).snapshot()
        assert set(rules.percentages) == set(REQUIRED_DEDUCTIONS)
        assert rules.percentage("EmployeeTax") == Decimal("30")
        assert rules.percentage("Housing") == Decimal("14")

    async def test_second_run_inserts_nothing(self, session):
        service = DeductionService(session)
        await service.upsert_defaults()

        assert await service.upsert_defaults() == 0
        assert await count_rules(session) == 6

    async def test_existing_percentage_not_overwritten(self, session):
        service = DeductionService(session)
        await service.create("EmployeeTax", Decimal("25"))

        inserted = await service.upsert_defaults()

        assert inserted == 5
        rule = await service.get_by_name("EmployeeTax")
        assert rule.percentage == Decimal("25")

    async def test_default_codes_are_generated(self, session):
        service = DeductionService(session)
        await service.upsert_defaults()

        for rule in await service.list_all():
            assert re.fullmatch(r"DED-[0-9A-F]{8}", rule.code)


class TestCrud:
    async def test_create(self, session):
        rule = await DeductionService(session).create("Union", Decimal("1.5"))

        assert rule.name == "Union"
        assert rule.percentage == Decimal("1.5")
        assert re.fullmatch(r"DED-[0-9A-F]{8}", rule.code)

    async def test_create_duplicate_name_conflicts(self, session):
        service = DeductionService(session)
        await service.create("Union", Decimal("1.5"))

        with pytest.raises(ConflictError):
            await service.create("Union", Decimal("2"))

    async def test_lookup_unknown_rule(self, session):
        service = DeductionService(session)

        with pytest.raises(NotFoundError):
            await service.get_by_code("DED-00000000")
        with pytest.raises(NotFoundError):
            await service.get_by_name("Nope")

    async def test_update_percentage_keeps_name(self, session):
        service = DeductionService(session)
        rule = await service.create("Union", Decimal("1.5"))

        updated = await service.update(rule.code, "Union", Decimal("2.5"))

        assert updated.percentage == Decimal("2.5")
        assert (await service.get_by_name("Union")).code == rule.code

    async def test_rename_to_taken_name_conflicts(self, session):
        service = DeductionService(session)
        await service.create("Union", Decimal("1.5"))
        other = await service.create("Canteen", Decimal("3"))

        with pytest.raises(ConflictError):
            await service.update(other.code, "Union", Decimal("3"))

    async def test_delete(self, session):
        service = DeductionService(session)
        rule = await service.create("Union", Decimal("1.5"))

        await service.delete(rule.code)

        with pytest.raises(NotFoundError):
            await service.get_by_code(rule.code)

    async def test_writes_are_audited(self, session):
        service = DeductionService(session, actor="hr@example.com")
        rule = await service.create("Union", Decimal("1.5"))
        await service.update(rule.code, "Union", Decimal("2"))
        await service.delete(rule.code)
        await session.flush()

        events = (
            await session.execute(
                select(AuditEvent)
                .where(AuditEvent.entity_id == rule.deduction_rule_id)
                .order_by(AuditEvent.created_at)
            )
        ).scalars().all()

        assert [e.action for e in events] == ["created", "updated", "deleted"]
        assert all(e.actor == "hr@example.com" for e in events)
        assert events[1].before_json["percentage"] == "1.5"


class TestRequireAll:
    async def test_complete_rule_set(self, session):
        service = DeductionService(session)
        await service.upsert_defaults()

        rules = await service.require_all()

        assert len(rules) == 6

    async def test_missing_rule_named(self, session):
        service = DeductionService(session)
        await service.upsert_defaults()
        await service.delete((await service.get_by_name("Pension")).code)

        with pytest.raises(InvalidStateError) as exc_info:
            await service.require_all()

        assert exc_info.value.missing == "Pension"
