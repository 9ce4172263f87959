"""Periods and the cohort reset.

One active period per semester. Completing a period is the only operation
that deletes workflow rows: it clears the semester's cohort so the next
intake starts from a clean slate, and frees the semester's coordinator seat.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from app.common.errors import InvalidInputError, NotFoundError, PreconditionFailedError
from app.db.session import transaction
from app.features.roles.repository import RoleRepository
from app.features.students.tracks import SEMESTER_LABELS, validate_semester
from .models import PeriodStatus
from .repository import PeriodRepository
from .schemas import PeriodCompletion, PeriodCreate, PeriodResponse

logger = logging.getLogger(__name__)


class PeriodService:

    @staticmethod
    def create_period(payload: PeriodCreate, created_by: Optional[int] = None) -> PeriodResponse:
        validate_semester(payload.semester)
        if not payload.name.strip():
            raise InvalidInputError("name is required", {"field": "name"})
        if payload.end_date < payload.start_date:
            raise InvalidInputError("end_date must not be before start_date", {"field": "end_date"})

        with transaction() as db:
            if created_by is not None:
                seat = RoleRepository.coordinator_for_semester(db, payload.semester)
                if seat is None or seat.lecturer_id != created_by:
                    raise PreconditionFailedError(
                        f"Only the coordinator of {SEMESTER_LABELS[payload.semester]} can open its periods",
                        {"semester": payload.semester},
                    )
            active = PeriodRepository.active_for_semester(db, payload.semester)
            if active is not None:
                raise PreconditionFailedError(
                    f"Semester {payload.semester} already has an active period: {active.name}",
                    {"period_id": active.id, "semester": payload.semester},
                )
            period = PeriodRepository.create(
                db,
                name=payload.name.strip(),
                period_type=payload.period_type,
                semester=payload.semester,
                start_date=payload.start_date,
                end_date=payload.end_date,
                description=payload.description,
                status=PeriodStatus.active,
                created_by=created_by,
            )
            logger.info("period.created period_id=%s semester=%s by=%s", period.id, period.semester, created_by)
            return PeriodResponse.model_validate(period)

    @staticmethod
    def complete_period(period_id: int) -> PeriodCompletion:
        with transaction() as db:
            period = PeriodRepository.get(db, period_id, lock=True)
            if period is None:
                raise NotFoundError("Period", period_id)
            if period.status == PeriodStatus.completed:
                raise PreconditionFailedError(f"Period {period.name} is already completed", {"period_id": period.id})

            period.status = PeriodStatus.completed
            db.flush()
            removed = PeriodRepository.reset_cohort(db, period.semester)
            released = RoleRepository.release_coordinator(db, period.semester) > 0
            logger.info(
                "period.completed period_id=%s semester=%s removed=%s coordinator_released=%s",
                period.id, period.semester, removed, released,
            )
            return PeriodCompletion(
                period=PeriodResponse.model_validate(period),
                removed=removed,
                coordinator_released=released,
            )

    @staticmethod
    def list_periods() -> List[PeriodResponse]:
        with transaction() as db:
            return [PeriodResponse.model_validate(p) for p in PeriodRepository.list_periods(db)]

    @staticmethod
    def active_periods() -> List[PeriodResponse]:
        with transaction() as db:
            return [PeriodResponse.model_validate(p) for p in PeriodRepository.list_periods(db, PeriodStatus.active)]
