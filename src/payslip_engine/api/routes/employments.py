"""Employment API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from payslip_engine.api.dependencies import DbSession
from payslip_engine.api.schemas import (
    EmploymentRequest,
    EmploymentResponse,
    EmploymentStatusUpdate,
    EmploymentUpdate,
    ErrorResponse,
)
from payslip_engine.services.employment_service import EmploymentService

router = APIRouter(prefix="/employments", tags=["employments"])


@router.post(
    "",
    response_model=EmploymentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_employment(
    db: DbSession,
    payload: EmploymentRequest,
) -> EmploymentResponse:
    """Create the employment record of an existing employee."""
    employment = await EmploymentService(db).create(
        employee_email=payload.employee_email,
        department=payload.department,
        position=payload.position,
        base_salary=payload.base_salary,
        joining_date=payload.joining_date,
    )
    await db.commit()
    return EmploymentResponse.from_model(employment)


@router.get("", response_model=list[EmploymentResponse])
async def list_employments(db: DbSession) -> list[EmploymentResponse]:
    employments = await EmploymentService(db).list_all()
    return [EmploymentResponse.from_model(e) for e in employments]


@router.get("/active", response_model=list[EmploymentResponse])
async def list_active_employments(db: DbSession) -> list[EmploymentResponse]:
    """List the employments included in payroll runs."""
    employments = await EmploymentService(db).list_active()
    return [EmploymentResponse.from_model(e) for e in employments]


@router.get(
    "/employee/{email}",
    response_model=EmploymentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employment_by_employee(
    db: DbSession,
    email: Annotated[str, Path()],
) -> EmploymentResponse:
    employment = await EmploymentService(db).get_by_employee_email(email)
    return EmploymentResponse.from_model(employment)


@router.get(
    "/{code}",
    response_model=EmploymentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employment(
    db: DbSession,
    code: Annotated[str, Path()],
) -> EmploymentResponse:
    employment = await EmploymentService(db).get_by_code(code)
    return EmploymentResponse.from_model(employment)


@router.put(
    "/{code}",
    response_model=EmploymentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_employment(
    db: DbSession,
    code: Annotated[str, Path()],
    payload: EmploymentUpdate,
) -> EmploymentResponse:
    employment = await EmploymentService(db).update(
        code,
        department=payload.department,
        position=payload.position,
        base_salary=payload.base_salary,
        joining_date=payload.joining_date,
    )
    await db.commit()
    return EmploymentResponse.from_model(employment)


@router.patch(
    "/{code}/status",
    response_model=EmploymentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def set_employment_status(
    db: DbSession,
    code: Annotated[str, Path()],
    payload: EmploymentStatusUpdate,
) -> EmploymentResponse:
    """Activate or disable an employment. Disabled employments are skipped by payroll."""
    employment = await EmploymentService(db).set_status(code, payload.active)
    await db.commit()
    return EmploymentResponse.from_model(employment)
