"""Payslip engine services."""

from payslip_engine.services.approval_service import ApprovalService
from payslip_engine.services.deduction_service import DeductionService
from payslip_engine.services.employment_service import EmploymentService
from payslip_engine.services.notification_service import (
    DispatchReport,
    DispatchResult,
    NotificationService,
)
from payslip_engine.services.payslip_service import PayslipService
from payslip_engine.services.state_machine import InvalidTransitionError, PayslipStateMachine

__all__ = [
    "ApprovalService",
    "DeductionService",
    "DispatchReport",
    "DispatchResult",
    "EmploymentService",
    "InvalidTransitionError",
    "NotificationService",
    "PayslipService",
    "PayslipStateMachine",
]
