"""Guidance sessions.

Students log sessions with one of their supervisors; the supervisor approves
or rejects them. Each student may hold at most ``GUIDANCE_QUOTA`` sessions
of any status, and the approved count gates the exam report.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional

from app.common.errors import ForbiddenError, InvalidInputError, NotFoundError, PreconditionFailedError
from app.core.config import get_settings
from app.db.session import transaction
from app.features.students.repository import StudentRepository
from .models import SessionStatus
from .repository import GuidanceRepository
from .schemas import GuidanceProgress, GuidanceSessionResponse

logger = logging.getLogger(__name__)

_OVERSIGHT_ROLES = {"koordinator", "kaprodi"}


def guidance_quota() -> int:
    return get_settings().guidance_quota


def _iso_week(day: date):
    year, week, _ = day.isocalendar()
    return year, week


def _parse_decision(status) -> SessionStatus:
    try:
        parsed = SessionStatus(status)
    except ValueError:
        parsed = None
    if parsed not in (SessionStatus.approved, SessionStatus.rejected):
        raise InvalidInputError("status must be one of: approved, rejected", {"field": "status", "value": status})
    return parsed


def _progress(db, student_id: int) -> GuidanceProgress:
    sessions = [GuidanceSessionResponse.model_validate(s) for s in GuidanceRepository.for_student(db, student_id)]
    return GuidanceProgress(
        student_id=student_id,
        approved=sum(1 for s in sessions if s.status == SessionStatus.approved),
        total=len(sessions),
        quota=guidance_quota(),
        sessions=sessions,
    )


class GuidanceService:

    @staticmethod
    def create_session(
        student_id: int,
        supervisor_id: Optional[int],
        week_number: int,
        topic: str,
        session_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> GuidanceSessionResponse:
        if week_number is None or week_number < 1:
            raise InvalidInputError("week_number must be 1 or greater", {"field": "week_number"})
        if topic is None or not topic.strip():
            raise InvalidInputError("topic is required", {"field": "topic"})
        session_date = session_date or date.today()
        quota = guidance_quota()

        with transaction() as db:
            # the student row lock serialises quota checks for the same student
            student = StudentRepository.get(db, student_id, lock=True)
            if student is None:
                raise NotFoundError("Student", student_id)
            if student.supervisor_id is None:
                raise PreconditionFailedError(
                    f"{student.nama} has no supervisor assigned yet",
                    {"student_id": student.id},
                )
            supervisor_id = supervisor_id or student.supervisor_id
            if supervisor_id not in student.supervisor_ids():
                raise PreconditionFailedError(
                    f"Lecturer {supervisor_id} does not supervise {student.nama}",
                    {"supervisor_id": supervisor_id},
                )

            existing = GuidanceRepository.for_student(db, student.id)
            if len(existing) >= quota:
                raise PreconditionFailedError(
                    f"Guidance quota reached: {student.nama} already has {len(existing)}/{quota} sessions",
                    {"student_id": student.id, "count": len(existing), "quota": quota},
                )
            week = _iso_week(session_date)
            for other in existing:
                if other.status != SessionStatus.rejected and _iso_week(other.session_date) == week:
                    raise PreconditionFailedError(
                        f"A guidance session already exists in the week of {session_date.isoformat()}",
                        {"session_id": other.id},
                    )

            session = GuidanceRepository.create(
                db,
                student_id=student.id,
                supervisor_id=supervisor_id,
                week_number=week_number,
                session_date=session_date,
                topic=topic.strip(),
                notes=notes,
                status=SessionStatus.waiting,
            )
            logger.info(
                "guidance.created session_id=%s student_id=%s supervisor_id=%s week=%s",
                session.id, student.id, supervisor_id, week_number,
            )
            return GuidanceSessionResponse.model_validate(session)

    @staticmethod
    def set_session_status(session_id: int, supervisor_id: int, status) -> GuidanceSessionResponse:
        decision = _parse_decision(status)
        with transaction() as db:
            session = GuidanceRepository.get(db, session_id, lock=True)
            if session is None:
                raise NotFoundError("Guidance session", session_id)
            owner = StudentRepository.get(db, session.student_id)
            if owner is None or supervisor_id not in owner.supervisor_ids():
                raise PreconditionFailedError(
                    "Only a supervisor of the student can decide on this session",
                    {"session_id": session.id, "supervisor_id": supervisor_id},
                )
            if session.status == SessionStatus.approved:
                raise PreconditionFailedError(
                    "An approved session can no longer be changed",
                    {"session_id": session.id},
                )
            session.status = decision
            session.approved_at = datetime.now(timezone.utc) if decision == SessionStatus.approved else None
            db.flush()
            logger.info(
                "guidance.%s session_id=%s student_id=%s by=%s",
                decision.value, session.id, session.student_id, supervisor_id,
            )
            return GuidanceSessionResponse.model_validate(session)

    @staticmethod
    def approved_session_count(student_id: int) -> int:
        with transaction() as db:
            return GuidanceRepository.count(db, student_id, SessionStatus.approved)

    @staticmethod
    def list_sessions(student_id: int) -> GuidanceProgress:
        with transaction() as db:
            if StudentRepository.get(db, student_id) is None:
                raise NotFoundError("Student", student_id)
            return _progress(db, student_id)

    @staticmethod
    def progress_for_lecturer(student_id: int, lecturer_id: int, roles: Iterable[str] = ()) -> GuidanceProgress:
        """Guidance progress as seen by a lecturer.

        Only the student's own supervisors and koordinator / kaprodi holders
        may read it.
        """
        with transaction() as db:
            student = StudentRepository.get(db, student_id)
            if student is None:
                raise NotFoundError("Student", student_id)
            if lecturer_id not in student.supervisor_ids() and not _OVERSIGHT_ROLES.intersection(roles):
                raise ForbiddenError(
                    f"Lecturer {lecturer_id} does not supervise {student.nama}",
                    {"student_id": student.id, "lecturer_id": lecturer_id},
                )
            return _progress(db, student_id)

    @staticmethod
    def pending_for_supervisor(supervisor_id: int) -> List[GuidanceSessionResponse]:
        with transaction() as db:
            return [
                GuidanceSessionResponse.model_validate(s)
                for s in GuidanceRepository.pending_for_supervisor(db, supervisor_id)
            ]
