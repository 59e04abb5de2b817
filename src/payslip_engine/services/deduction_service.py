"""Deduction rule store."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.calculators.types import (
    DEFAULT_DEDUCTION_PERCENTAGES,
    REQUIRED_DEDUCTIONS,
    DeductionRuleSet,
)
from payslip_engine.database import insert_ignore_conflicts
from payslip_engine.errors import ConflictError, InvalidStateError, NotFoundError
from payslip_engine.models import DeductionRule
from payslip_engine.services.audit import record_audit

logger = logging.getLogger(__name__)


def generate_deduction_code() -> str:
    return "DED-" + uuid4().hex[:8].upper()


def _rule_json(rule: DeductionRule) -> dict[str, str]:
    return {"code": rule.code, "name": rule.name, "percentage": str(rule.percentage)}


class DeductionService:
    """Service for the named percentage rules used by payslip generation.

    Operations:
    - upsert_defaults: insert the six mandatory rules that are missing
    - create / update / delete: maintain individual rules
    - snapshot / require_all: read the whole rule set once for generation
    """

    def __init__(self, session: AsyncSession, actor: str | None = None):
        self.session = session
        self.actor = actor

    async def list_all(self) -> list[DeductionRule]:
        result = await self.session.execute(select(DeductionRule).order_by(DeductionRule.name))
        return list(result.scalars().all())

    async def get_by_code(self, code: str) -> DeductionRule:
        rule = await self._find_by_code(code)
        if rule is None:
            logger.error("Deduction not found with code: %s", code)
            raise NotFoundError("Deduction", code)
        return rule

    async def get_by_name(self, name: str) -> DeductionRule:
        rule = await self._find_by_name(name)
        if rule is None:
            logger.error("Deduction not found with name: %s", name)
            raise NotFoundError("Deduction", name)
        return rule

    async def create(self, name: str, percentage: Decimal) -> DeductionRule:
        """Create a rule; the name must not be taken."""
        logger.info("Creating deduction with name: %s", name)
        if await self._find_by_name(name) is not None:
            logger.error("Deduction already exists with name: %s", name)
            raise ConflictError("Deduction", name)

        rule = DeductionRule(
            code=generate_deduction_code(),
            name=name,
            percentage=Decimal(percentage),
        )
        self.session.add(rule)
        await self.session.flush()

        record_audit(
            self.session,
            entity_type="deduction_rule",
            entity_id=rule.deduction_rule_id,
            action="created",
            actor=self.actor,
            after=_rule_json(rule),
        )
        return rule

    async def update(self, code: str, name: str, percentage: Decimal) -> DeductionRule:
        """Update a rule's name and percentage.

        Renaming re-checks name uniqueness against the other rules.
        """
        logger.info("Updating deduction with code: %s", code)
        rule = await self.get_by_code(code)

        if rule.name != name:
            holder = await self._find_by_name(name)
            if holder is not None and holder.deduction_rule_id != rule.deduction_rule_id:
                logger.error("Deduction already exists with name: %s", name)
                raise ConflictError("Deduction", name)

        before = _rule_json(rule)
        rule.name = name
        rule.percentage = Decimal(percentage)
        await self.session.flush()

        record_audit(
            self.session,
            entity_type="deduction_rule",
            entity_id=rule.deduction_rule_id,
            action="updated",
            actor=self.actor,
            before=before,
            after=_rule_json(rule),
        )
        return rule

    async def delete(self, code: str) -> None:
        logger.info("Deleting deduction with code: %s", code)
        rule = await self.get_by_code(code)
        before = _rule_json(rule)
        await self.session.delete(rule)
        await self.session.flush()

        record_audit(
            self.session,
            entity_type="deduction_rule",
            entity_id=rule.deduction_rule_id,
            action="deleted",
            actor=self.actor,
            before=before,
        )

    async def upsert_defaults(self) -> int:
        """Insert each mandatory rule whose name is absent.

        Existing rules keep their percentage. Returns the number inserted.
        """
        inserted = 0
        for name, percentage in DEFAULT_DEDUCTION_PERCENTAGES.items():
            stmt = insert_ignore_conflicts(
                self.session, DeductionRule, index_elements=["name"]
            ).values(
                deduction_rule_id=uuid4(),
                code=generate_deduction_code(),
                name=name,
                percentage=percentage,
            )
            result = await self.session.execute(stmt)
            if result.rowcount:
                inserted += 1
                logger.info("Created default deduction: %s with percentage: %s", name, percentage)

        if inserted:
            logger.info("Initialized %d default deductions", inserted)
        return inserted

    async def snapshot(self) -> DeductionRuleSet:
        """Read the full rule set once into an immutable snapshot."""
        result = await self.session.execute(
            select(DeductionRule.name, DeductionRule.percentage)
        )
        return DeductionRuleSet.from_pairs(result.tuples().all())

    async def require_all(self, names: Iterable[str] = REQUIRED_DEDUCTIONS) -> DeductionRuleSet:
        """Snapshot the rules and fail on the first missing required name."""
        rules = await self.snapshot()
        try:
            rules.require(names)
        except InvalidStateError as exc:
            logger.error("Required deduction not found: %s", exc.missing)
            raise
        return rules

    async def _find_by_code(self, code: str) -> DeductionRule | None:
        result = await self.session.execute(
            select(DeductionRule).where(DeductionRule.code == code)
        )
        return result.scalar_one_or_none()

    async def _find_by_name(self, name: str) -> DeductionRule | None:
        result = await self.session.execute(
            select(DeductionRule).where(DeductionRule.name == name)
        )
        return result.scalar_one_or_none()
