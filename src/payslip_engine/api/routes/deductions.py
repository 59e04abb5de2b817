"""Deduction rule API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from payslip_engine.api.dependencies import Actor, DbSession
from payslip_engine.api.schemas import (
    DeductionRequest,
    DeductionResponse,
    ErrorResponse,
    InitializeDeductionsResponse,
)
from payslip_engine.services.deduction_service import DeductionService

router = APIRouter(prefix="/deductions", tags=["deductions"])


@router.post(
    "",
    response_model=DeductionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_deduction(
    db: DbSession,
    actor: Actor,
    payload: DeductionRequest,
) -> DeductionResponse:
    """Create a deduction rule with a unique name."""
    rule = await DeductionService(db, actor=actor).create(payload.name, payload.percentage)
    await db.commit()
    return DeductionResponse.model_validate(rule)


@router.get("", response_model=list[DeductionResponse])
async def list_deductions(db: DbSession) -> list[DeductionResponse]:
    rules = await DeductionService(db).list_all()
    return [DeductionResponse.model_validate(r) for r in rules]


@router.post("/initialize", response_model=InitializeDeductionsResponse)
async def initialize_deductions(db: DbSession) -> InitializeDeductionsResponse:
    """Insert the mandatory default rules that are missing.

    Rules that already exist keep their current percentage.
    """
    service = DeductionService(db)
    inserted = await service.upsert_defaults()
    await db.commit()
    rules = await service.list_all()
    return InitializeDeductionsResponse(
        inserted=inserted,
        deductions=[DeductionResponse.model_validate(r) for r in rules],
    )


@router.get(
    "/name/{name}",
    response_model=DeductionResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_deduction_by_name(
    db: DbSession,
    name: Annotated[str, Path()],
) -> DeductionResponse:
    rule = await DeductionService(db).get_by_name(name)
    return DeductionResponse.model_validate(rule)


@router.get(
    "/{code}",
    response_model=DeductionResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_deduction(
    db: DbSession,
    code: Annotated[str, Path()],
) -> DeductionResponse:
    rule = await DeductionService(db).get_by_code(code)
    return DeductionResponse.model_validate(rule)


@router.put(
    "/{code}",
    response_model=DeductionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_deduction(
    db: DbSession,
    actor: Actor,
    code: Annotated[str, Path()],
    payload: DeductionRequest,
) -> DeductionResponse:
    """Update a rule's name and percentage."""
    rule = await DeductionService(db, actor=actor).update(code, payload.name, payload.percentage)
    await db.commit()
    return DeductionResponse.model_validate(rule)


@router.delete(
    "/{code}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_deduction(
    db: DbSession,
    actor: Actor,
    code: Annotated[str, Path()],
) -> None:
    await DeductionService(db, actor=actor).delete(code)
    await db.commit()
