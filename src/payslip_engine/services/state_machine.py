"""Payslip state machine with transition validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from payslip_engine.models.base import utcnow
from payslip_engine.models.payroll import PayslipStatus

if TYPE_CHECKING:
    from payslip_engine.models import PaySlip


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class PayslipStateMachine:
    """State machine for payslip status transitions.

    Allowed transitions:
    - PENDING → PAID

    PAID is terminal. Re-applying PAID to a PAID payslip is accepted as a
    no-op so approvals can be retried.
    """

    VALID_TRANSITIONS: dict[PayslipStatus, list[PayslipStatus]] = {
        PayslipStatus.PENDING: [PayslipStatus.PAID],
        PayslipStatus.PAID: [],  # Terminal state
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(PayslipStatus(from_status), [])
        return PayslipStatus(to_status) in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if from_status == to_status and cls.is_terminal(to_status):
            return
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.VALID_TRANSITIONS.get(PayslipStatus(status))

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[PayslipStatus]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(PayslipStatus(current_status), [])

    @classmethod
    def mark_paid(cls, payslip: PaySlip) -> bool:
        """Move a payslip to PAID.

        Returns True when the status changed, False when it was already PAID.
        """
        from_status = payslip.status
        cls.validate_transition(from_status, PayslipStatus.PAID)
        if from_status == PayslipStatus.PAID:
            return False

        payslip.status = PayslipStatus.PAID
        payslip.paid_at = utcnow()
        return True
