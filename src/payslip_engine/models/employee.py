"""Employee identity and employment models."""

from __future__ import annotations

import enum
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payslip_engine.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from payslip_engine.models.payroll import Message, PaySlip


class EmploymentStatus(str, enum.Enum):
    """Employment status values."""

    ACTIVE = "ACTIVE"
    DISABLED = "DISABLED"


class Employee(Base, TimestampMixin):
    """Person receiving payslips.

    Owned by the identity provider; the payroll engine only reads it.
    """

    __tablename__ = "employee"

    employee_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)

    # Relationships
    employment: Mapped[Employment | None] = relationship(back_populates="employee")
    payslips: Mapped[list[PaySlip]] = relationship(back_populates="employee")
    messages: Mapped[list[Message]] = relationship(back_populates="employee")

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"


class Employment(Base, TimestampMixin):
    """Employment contract carrying the base salary used for payslips."""

    __tablename__ = "employment"

    employment_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    code: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    )
    department: Mapped[str] = mapped_column(String, nullable=False)
    position: Mapped[str] = mapped_column(String, nullable=False)
    base_salary: Mapped[Decimal] = mapped_column(nullable=False)
    joining_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[EmploymentStatus] = mapped_column(
        Enum(EmploymentStatus, name="employment_status", native_enum=False, length=16),
        nullable=False,
        default=EmploymentStatus.ACTIVE,
    )

    __table_args__ = (
        CheckConstraint("base_salary > 0", name="employment_base_salary_positive"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="employment")

    @property
    def is_active(self) -> bool:
        return self.status == EmploymentStatus.ACTIVE
