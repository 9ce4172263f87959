"""Read-only dashboard counters."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.features.exams.repository import ExamRepository
from app.features.groups.repository import GroupRepository
from app.features.guidance.models import GuidanceSession
from app.features.lecturers.models import Lecturer
from app.features.periods.models import Period, PeriodStatus
from app.features.students.models import Student
from app.features.students.repository import StudentRepository
from .schemas import OverviewOut

logger = logging.getLogger(__name__)


def _value(key) -> str:
    return getattr(key, "value", key) or "none"


def overview(db: Session) -> OverviewOut:
    per_track = db.execute(
        select(Student.track, func.count(Student.id)).where(Student.is_active.is_(True)).group_by(Student.track)
    ).all()
    sessions = db.execute(
        select(GuidanceSession.status, func.count(GuidanceSession.id)).group_by(GuidanceSession.status)
    ).all()
    return OverviewOut(
        students=db.scalar(select(func.count(Student.id)).where(Student.is_active.is_(True))) or 0,
        lecturers=db.scalar(select(func.count(Lecturer.id)).where(Lecturer.is_active.is_(True))) or 0,
        groups=GroupRepository.count(db),
        students_per_track={_value(track): n for track, n in per_track},
        proposals=StudentRepository.count_by_proposal_status(db),
        guidance_sessions={_value(status): n for status, n in sessions},
        reports=ExamRepository.count_reports_by_status(db),
        active_periods=db.scalar(select(func.count(Period.id)).where(Period.status == PeriodStatus.active)) or 0,
    )


def overview_service(db: Session) -> OverviewOut:
    """Counters for the dashboard; zeros when the database cannot answer."""
    try:
        return overview(db)
    except SQLAlchemyError:
        logger.exception("stats.overview_failed")
        db.rollback()
        return OverviewOut(
            students=0,
            lecturers=0,
            groups=0,
            students_per_track={},
            proposals={},
            guidance_sessions={},
            reports={},
            active_periods=0,
        )
