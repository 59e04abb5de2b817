"""Type definitions for payslip calculation."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from payslip_engine.errors import InvalidStateError


class RuleName(str, Enum):
    """Deduction rule names required for payslip generation."""

    EMPLOYEE_TAX = "EmployeeTax"
    PENSION = "Pension"
    MEDICAL_INSURANCE = "MedicalInsurance"
    OTHERS = "Others"
    HOUSING = "Housing"
    TRANSPORT = "Transport"


# Bootstrap percentages; order is the order checked at generation time.
DEFAULT_DEDUCTION_PERCENTAGES: dict[str, Decimal] = {
    RuleName.EMPLOYEE_TAX.value: Decimal("30"),
    RuleName.PENSION.value: Decimal("6"),
    RuleName.MEDICAL_INSURANCE.value: Decimal("5"),
    RuleName.OTHERS.value: Decimal("5"),
    RuleName.HOUSING.value: Decimal("14"),
    RuleName.TRANSPORT.value: Decimal("14"),
}

REQUIRED_DEDUCTIONS: tuple[str, ...] = tuple(DEFAULT_DEDUCTION_PERCENTAGES)


@dataclass(frozen=True)
class DeductionRuleSet:
    """Immutable name -> percentage snapshot of the deduction rules.

    Generation reads the rules once and computes every payslip of the run
    from the same snapshot.
    """

    percentages: Mapping[str, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "percentages", MappingProxyType(dict(self.percentages)))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, Decimal]]) -> DeductionRuleSet:
        return cls(dict(pairs))

    def __contains__(self, name: object) -> bool:
        return name in self.percentages

    def __len__(self) -> int:
        return len(self.percentages)

    def percentage(self, name: str) -> Decimal:
        """Percentage for a rule, raising InvalidStateError when absent."""
        try:
            return self.percentages[name]
        except KeyError:
            raise InvalidStateError(f"Required deduction not found: {name}", missing=name) from None

    def first_missing(self, names: Iterable[str]) -> str | None:
        for name in names:
            if name not in self.percentages:
                return name
        return None

    def require(self, names: Iterable[str] = REQUIRED_DEDUCTIONS) -> None:
        """Raise InvalidStateError naming the first missing rule."""
        missing = self.first_missing(names)
        if missing is not None:
            raise InvalidStateError(f"Required deduction not found: {missing}", missing=missing)

    @property
    def fingerprint(self) -> str:
        """Content hash identifying this version of the rule set."""
        payload = {name: str(pct) for name, pct in self.percentages.items()}
        json_str = json.dumps(payload, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]


@dataclass(frozen=True)
class PayslipAmounts:
    """Computed amounts for one payslip, rounded to cents."""

    base_salary: Decimal
    housing: Decimal
    transport: Decimal
    employee_tax: Decimal
    pension: Decimal
    medical_insurance: Decimal
    other: Decimal
    gross: Decimal
    net: Decimal

    @property
    def total_additions(self) -> Decimal:
        return self.housing + self.transport

    @property
    def total_deductions(self) -> Decimal:
        return self.employee_tax + self.pension + self.medical_insurance + self.other
