"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from payslip_engine.models import Employment, PaySlip

Month = Annotated[int, Field(ge=1, le=12, description="Month between 1 and 12")]
Year = Annotated[int, Field(ge=2000, description="Year 2000 or later")]


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str
    code: str


# ============================================================================
# Deduction schemas
# ============================================================================


class DeductionRequest(BaseModel):
    """Schema for creating or updating a deduction rule."""

    name: str = Field(min_length=1)
    percentage: Decimal = Field(gt=0)


class DeductionResponse(BaseModel):
    """Schema for deduction rule response."""

    model_config = ConfigDict(from_attributes=True)

    deduction_rule_id: UUID
    code: str
    name: str
    percentage: Decimal


class InitializeDeductionsResponse(BaseModel):
    """Schema for the default deduction bootstrap."""

    inserted: int
    deductions: list[DeductionResponse]


# ============================================================================
# Employment schemas
# ============================================================================


class EmploymentRequest(BaseModel):
    """Schema for creating an employment record."""

    employee_email: str = Field(min_length=1)
    department: str = Field(min_length=1)
    position: str = Field(min_length=1)
    base_salary: Decimal = Field(gt=0)
    joining_date: date


class EmploymentUpdate(BaseModel):
    """Schema for updating an employment record."""

    department: str = Field(min_length=1)
    position: str = Field(min_length=1)
    base_salary: Decimal = Field(gt=0)
    joining_date: date


class EmploymentStatusUpdate(BaseModel):
    """Schema for activating or disabling an employment record."""

    active: bool


class EmploymentResponse(BaseModel):
    """Schema for employment response."""

    employment_id: UUID
    code: str
    employee_email: str
    employee_name: str
    department: str
    position: str
    base_salary: Decimal
    joining_date: date
    status: str

    @classmethod
    def from_model(cls, employment: Employment) -> "EmploymentResponse":
        return cls(
            employment_id=employment.employment_id,
            code=employment.code,
            employee_email=employment.employee.email,
            employee_name=employment.employee.full_name,
            department=employment.department,
            position=employment.position,
            base_salary=employment.base_salary,
            joining_date=employment.joining_date,
            status=employment.status.value,
        )


# ============================================================================
# Payslip schemas
# ============================================================================


class PaySlipRequest(BaseModel):
    """Schema for a payslip generation request."""

    month: Month
    year: Year


class PaySlipResponse(BaseModel):
    """Schema for payslip response."""

    payslip_id: UUID
    employee_email: str
    employee_name: str
    housing_amount: Decimal
    transport_amount: Decimal
    employee_tax_amount: Decimal
    pension_amount: Decimal
    medical_insurance_amount: Decimal
    other_tax_amount: Decimal
    gross_salary: Decimal
    net_salary: Decimal
    month: int
    year: int
    status: str
    paid_at: datetime | None = None

    @classmethod
    def from_model(cls, payslip: PaySlip) -> "PaySlipResponse":
        return cls(
            payslip_id=payslip.payslip_id,
            employee_email=payslip.employee.email,
            employee_name=payslip.employee.full_name,
            housing_amount=payslip.housing_amount,
            transport_amount=payslip.transport_amount,
            employee_tax_amount=payslip.employee_tax_amount,
            pension_amount=payslip.pension_amount,
            medical_insurance_amount=payslip.medical_insurance_amount,
            other_tax_amount=payslip.other_tax_amount,
            gross_salary=payslip.gross_salary,
            net_salary=payslip.net_salary,
            month=payslip.month,
            year=payslip.year,
            status=payslip.status.value,
            paid_at=payslip.paid_at,
        )


class DispatchResultResponse(BaseModel):
    """Schema for one message delivery outcome."""

    model_config = ConfigDict(from_attributes=True)

    message_id: UUID
    to_email: str
    sent: bool
    error: str | None = None


class ApproveAllResponse(BaseModel):
    """Schema for bulk approval followed by notification dispatch."""

    payslips: list[PaySlipResponse]
    messages_created: int
    messages_sent: int
    messages_failed: int
    dispatch: list[DispatchResultResponse] = Field(default_factory=list)
