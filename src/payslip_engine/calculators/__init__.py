"""Payslip calculation."""

from payslip_engine.calculators.payslip_calculator import PayslipCalculator, percentage_of
from payslip_engine.calculators.types import (
    DEFAULT_DEDUCTION_PERCENTAGES,
    REQUIRED_DEDUCTIONS,
    DeductionRuleSet,
    PayslipAmounts,
    RuleName,
)

__all__ = [
    "DEFAULT_DEDUCTION_PERCENTAGES",
    "REQUIRED_DEDUCTIONS",
    "DeductionRuleSet",
    "PayslipAmounts",
    "PayslipCalculator",
    "RuleName",
    "percentage_of",
]
