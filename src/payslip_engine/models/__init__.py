"""ORM models."""

from payslip_engine.models.base import Base, TimestampMixin
from payslip_engine.models.employee import Employee, Employment, EmploymentStatus
from payslip_engine.models.payroll import (
    AuditEvent,
    DeductionRule,
    Message,
    MessageStatus,
    PaySlip,
    PayslipStatus,
)

__all__ = [
    "AuditEvent",
    "Base",
    "DeductionRule",
    "Employee",
    "Employment",
    "EmploymentStatus",
    "Message",
    "MessageStatus",
    "PaySlip",
    "PayslipStatus",
    "TimestampMixin",
]
