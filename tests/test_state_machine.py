"""Tests for payslip state machine."""

from types import SimpleNamespace

import pytest

from payslip_engine.models import PayslipStatus
from payslip_engine.services.state_machine import InvalidTransitionError, PayslipStateMachine


class TestPayslipStateMachine:
    """Test state machine transitions."""

    def test_valid_transitions(self):
        assert PayslipStateMachine.can_transition("PENDING", "PAID") is True

    def test_invalid_transitions(self):
        """PAID never goes back to PENDING."""
        assert PayslipStateMachine.can_transition("PAID", "PENDING") is False
        assert PayslipStateMachine.can_transition("PENDING", "PENDING") is False

    def test_validate_transition_raises(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            PayslipStateMachine.validate_transition("PAID", "PENDING")

        assert exc_info.value.from_status == "PAID"
        assert exc_info.value.to_status == "PENDING"

    def test_repeating_terminal_status_allowed(self):
        PayslipStateMachine.validate_transition("PAID", "PAID")

    def test_terminal_states(self):
        assert PayslipStateMachine.is_terminal("PAID") is True
        assert PayslipStateMachine.is_terminal("PENDING") is False

    def test_next_statuses(self):
        assert PayslipStateMachine.get_next_statuses("PENDING") == [PayslipStatus.PAID]
        assert PayslipStateMachine.get_next_statuses("PAID") == []

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            PayslipStateMachine.can_transition("DRAFT", "PAID")


class TestMarkPaid:
    def test_pending_becomes_paid(self):
        payslip = SimpleNamespace(status=PayslipStatus.PENDING, paid_at=None)

        assert PayslipStateMachine.mark_paid(payslip) is True
        assert payslip.status == PayslipStatus.PAID
        assert payslip.paid_at is not None

    def test_paid_is_left_alone(self):
        payslip = SimpleNamespace(status=PayslipStatus.PENDING, paid_at=None)
        PayslipStateMachine.mark_paid(payslip)
        paid_at = payslip.paid_at

        assert PayslipStateMachine.mark_paid(payslip) is False
        assert payslip.paid_at == paid_at
