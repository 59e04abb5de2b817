"""Deduction rule, payslip, message and audit models."""

from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payslip_engine.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from payslip_engine.models.employee import Employee


JsonType = JSON().with_variant(JSONB(), "postgresql")


class PayslipStatus(str, enum.Enum):
    """Payslip status values."""

    PENDING = "PENDING"
    PAID = "PAID"


class MessageStatus(str, enum.Enum):
    """Notification message status values."""

    PENDING = "PENDING"
    SENT = "SENT"


# ===== Deduction Rules =====


class DeductionRule(Base, TimestampMixin):
    """Named percentage applied to the base salary.

    Housing and Transport are additions to gross; the other rules are
    deductions from it. Both use the same percentage-of-base model.
    """

    __tablename__ = "deduction_rule"

    deduction_rule_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    code: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    percentage: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False)

    __table_args__ = (
        CheckConstraint("percentage > 0", name="deduction_rule_percentage_positive"),
    )


# ===== Payslips =====


class PaySlip(Base, TimestampMixin):
    """Computed salary breakdown for one employee and one month."""

    __tablename__ = "pay_slip"

    payslip_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="RESTRICT"),
        nullable=False,
    )

    # Additions
    housing_amount: Mapped[Decimal] = mapped_column(nullable=False)
    transport_amount: Mapped[Decimal] = mapped_column(nullable=False)

    # Deductions
    employee_tax_amount: Mapped[Decimal] = mapped_column(nullable=False)
    pension_amount: Mapped[Decimal] = mapped_column(nullable=False)
    medical_insurance_amount: Mapped[Decimal] = mapped_column(nullable=False)
    other_tax_amount: Mapped[Decimal] = mapped_column(nullable=False)

    gross_salary: Mapped[Decimal] = mapped_column(nullable=False)
    net_salary: Mapped[Decimal] = mapped_column(nullable=False)

    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[PayslipStatus] = mapped_column(
        Enum(PayslipStatus, name="payslip_status", native_enum=False, length=16),
        nullable=False,
        default=PayslipStatus.PENDING,
    )
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "month", "year", name="pay_slip_employee_period_unique"),
        CheckConstraint("month BETWEEN 1 AND 12", name="pay_slip_month_check"),
        CheckConstraint("year >= 2000", name="pay_slip_year_check"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="payslips")

    @property
    def total_deductions(self) -> Decimal:
        return (
            self.employee_tax_amount
            + self.pension_amount
            + self.medical_insurance_amount
            + self.other_tax_amount
        )


# ===== Notifications =====


class Message(Base, TimestampMixin):
    """Salary notification addressed to an employee."""

    __tablename__ = "message"

    CONTENT_MAX_LENGTH = 1000

    message_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="RESTRICT"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(String(CONTENT_MAX_LENGTH), nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[MessageStatus] = mapped_column(
        Enum(MessageStatus, name="message_status", native_enum=False, length=16),
        nullable=False,
        default=MessageStatus.PENDING,
    )
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="messages")


# ===== Audit =====


class AuditEvent(Base, TimestampMixin):
    """Audit trail entry."""

    __tablename__ = "audit_event"

    audit_event_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    actor: Mapped[str | None] = mapped_column(String, nullable=True)
    entity_type: Mapped[str] = mapped_column(String, nullable=False)
    entity_id: Mapped[UUID] = mapped_column(nullable=False)
    action: Mapped[str] = mapped_column(String, nullable=False)
    before_json: Mapped[dict[str, Any] | None] = mapped_column(JsonType, nullable=True)
    after_json: Mapped[dict[str, Any] | None] = mapped_column(JsonType, nullable=True)
