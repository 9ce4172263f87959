"""Endpoints for managing capstone periods."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from app.common.deps import CurrentUser, get_current_user, require_role

from .schemas import PeriodCompletion, PeriodCreate, PeriodResponse
from .service import PeriodService


router = APIRouter(prefix="/periods", tags=["Periods"])


@router.get("/", response_model=List[PeriodResponse])
def list_periods(current_user: CurrentUser = Depends(get_current_user)) -> List[PeriodResponse]:
    return PeriodService.list_periods()


@router.get("/active", response_model=List[PeriodResponse])
def active_periods(current_user: CurrentUser = Depends(get_current_user)) -> List[PeriodResponse]:
    return PeriodService.active_periods()


@router.post("/", response_model=PeriodResponse)
def create_period(
    period: PeriodCreate,
    current_user: CurrentUser = Depends(require_role("koordinator")),
) -> PeriodResponse:
    return PeriodService.create_period(period, created_by=current_user.id)


@router.post("/{period_id}/complete", response_model=PeriodCompletion)
def complete_period(
    period_id: int,
    current_user: CurrentUser = Depends(require_role("koordinator", "kaprodi")),
) -> PeriodCompletion:
    return PeriodService.complete_period(period_id)
