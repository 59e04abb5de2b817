"""Payslip arithmetic."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from payslip_engine.calculators.types import DeductionRuleSet, PayslipAmounts, RuleName

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def percentage_of(value: Decimal, percentage: Decimal) -> Decimal:
    """Return ``percentage`` percent of ``value`` rounded half-up to cents."""
    return (value * percentage / HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)


class PayslipCalculator:
    """Computes payslip amounts from a base salary and a rule snapshot.

    Every percentage is applied to the base salary. Additions (Housing,
    Transport) raise gross; deductions (EmployeeTax, Pension,
    MedicalInsurance, Others) are subtracted from gross. Neither side
    compounds on the other.
    """

    def __init__(self, rules: DeductionRuleSet):
        rules.require()
        self.rules = rules

    def calculate(self, base_salary: Decimal) -> PayslipAmounts:
        base = Decimal(base_salary)
        if base <= 0:
            raise ValueError(f"Base salary must be positive, got {base}")

        housing = percentage_of(base, self.rules.percentage(RuleName.HOUSING.value))
        transport = percentage_of(base, self.rules.percentage(RuleName.TRANSPORT.value))
        gross = base + housing + transport

        employee_tax = percentage_of(base, self.rules.percentage(RuleName.EMPLOYEE_TAX.value))
        pension = percentage_of(base, self.rules.percentage(RuleName.PENSION.value))
        medical_insurance = percentage_of(
            base, self.rules.percentage(RuleName.MEDICAL_INSURANCE.value)
        )
        other = percentage_of(base, self.rules.percentage(RuleName.OTHERS.value))

        total_deductions = employee_tax + pension + medical_insurance + other
        net = gross - total_deductions

        return PayslipAmounts(
            base_salary=base,
            housing=housing,
            transport=transport,
            employee_tax=employee_tax,
            pension=pension,
            medical_insurance=medical_insurance,
            other=other,
            gross=gross.quantize(CENT, rounding=ROUND_HALF_UP),
            net=net.quantize(CENT, rounding=ROUND_HALF_UP),
        )
