"""Payroll API endpoints: generation, lookup and approval."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from payslip_engine.api.dependencies import Actor, BootstrapDeductions, DbSession, MailTransportDep
from payslip_engine.api.schemas import (
    ApproveAllResponse,
    DispatchResultResponse,
    ErrorResponse,
    PaySlipRequest,
    PaySlipResponse,
)
from payslip_engine.services.approval_service import ApprovalService
from payslip_engine.services.notification_service import NotificationService
from payslip_engine.services.payslip_service import PayslipService

router = APIRouter(prefix="/payroll", tags=["payroll"])

MonthPath = Annotated[int, Path(ge=1, le=12)]
YearPath = Annotated[int, Path(ge=2000)]


# ============================================================================
# Generation
# ============================================================================


@router.post(
    "/generate",
    response_model=list[PaySlipResponse],
    status_code=status.HTTP_200_OK,
    responses={422: {"model": ErrorResponse}},
)
async def generate_payslips(
    db: DbSession,
    bootstrap: BootstrapDeductions,
    payload: PaySlipRequest,
) -> list[PaySlipResponse]:
    """Generate payslips for all active employments. Idempotent per period."""
    service = PayslipService(db, bootstrap_deductions=bootstrap)
    payslips = await service.generate(payload.month, payload.year)
    await db.commit()
    return [PaySlipResponse.from_model(p) for p in payslips]


# ============================================================================
# Lookup
# ============================================================================


@router.get(
    "/employee/{email}",
    response_model=list[PaySlipResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_employee_payslips(
    db: DbSession,
    email: Annotated[str, Path()],
) -> list[PaySlipResponse]:
    """List every payslip of one employee."""
    payslips = await PayslipService(db).list_for_employee(email)
    return [PaySlipResponse.from_model(p) for p in payslips]


@router.get(
    "/employee/{email}/{month}/{year}",
    response_model=PaySlipResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee_payslip(
    db: DbSession,
    email: Annotated[str, Path()],
    month: MonthPath,
    year: YearPath,
) -> PaySlipResponse:
    """Get one employee's payslip for a period."""
    payslip = await PayslipService(db).get_for_employee_period(email, month, year)
    return PaySlipResponse.from_model(payslip)


@router.get("/{month}/{year}", response_model=list[PaySlipResponse])
async def list_period_payslips(
    db: DbSession,
    month: MonthPath,
    year: YearPath,
) -> list[PaySlipResponse]:
    """List all payslips of a period."""
    payslips = await PayslipService(db).list_for_period(month, year)
    return [PaySlipResponse.from_model(p) for p in payslips]


# ============================================================================
# Approval
# ============================================================================


@router.patch(
    "/approve/{payslip_id}",
    response_model=PaySlipResponse,
    responses={404: {"model": ErrorResponse}},
)
async def approve_payslip(
    db: DbSession,
    actor: Actor,
    payslip_id: Annotated[UUID, Path()],
) -> PaySlipResponse:
    """Approve one payslip. Notifications are not sent for single approvals."""
    payslip = await ApprovalService(db, actor=actor).approve_one(payslip_id)
    await db.commit()
    return PaySlipResponse.from_model(payslip)


@router.patch("/approve/{month}/{year}", response_model=ApproveAllResponse)
async def approve_all_payslips(
    db: DbSession,
    actor: Actor,
    transport: MailTransportDep,
    month: MonthPath,
    year: YearPath,
) -> ApproveAllResponse:
    """Approve every payslip of a period, then notify the paid employees."""
    payslips = await ApprovalService(db, actor=actor).approve_all(month, year)
    await db.commit()

    notifications = NotificationService(db, transport=transport)
    messages = await notifications.generate_messages(month, year)
    await db.commit()

    report = await notifications.send_pending()
    await db.commit()

    return ApproveAllResponse(
        payslips=[PaySlipResponse.from_model(p) for p in payslips],
        messages_created=len(messages),
        messages_sent=report.sent_count,
        messages_failed=report.failed_count,
        dispatch=[DispatchResultResponse.model_validate(r) for r in report.results],
    )
