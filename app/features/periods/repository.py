from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session

from app.features.exams.models import ExamReport, ExamSchedule
from app.features.groups.models import Group
from app.features.guidance.models import GuidanceSession
from app.features.students.models import ProposalStatus, Student
from app.features.students.tracks import tracks_for_semester
from .models import Period, PeriodStatus


class PeriodRepository:

    @staticmethod
    def get(db: Session, period_id: int, lock: bool = False) -> Optional[Period]:
        stmt = select(Period).where(Period.id == period_id)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return db.scalars(stmt).first()

    @staticmethod
    def active_for_semester(db: Session, semester: int) -> Optional[Period]:
        return db.scalars(
            select(Period).where(Period.semester == semester, Period.status == PeriodStatus.active)
        ).first()

    @staticmethod
    def create(db: Session, **data) -> Period:
        period = Period(**data)
        db.add(period)
        db.flush()
        return period

    @staticmethod
    def list_periods(db: Session, status: Optional[PeriodStatus] = None) -> List[Period]:
        stmt = select(Period).order_by(Period.semester, Period.start_date.desc(), Period.id.desc())
        if status is not None:
            stmt = stmt.where(Period.status == status)
        return list(db.scalars(stmt).all())

    @staticmethod
    def reset_cohort(db: Session, semester: int) -> Dict[str, int]:
        """Wipe the workflow state of every student whose track belongs to ``semester``.

        Exam schedules, exam reports, guidance sessions and groups of the
        cohort are deleted; proposal, group and partner fields are reset.
        Tracks and supervisors are kept.
        """
        tracks = tracks_for_semester(semester)
        cohort = select(Student.id).where(Student.track.in_(tracks))
        cohort_groups = select(Group.id).where(Group.track.in_(tracks))

        removed = {
            "exam_schedules": db.execute(
                delete(ExamSchedule).where(ExamSchedule.student_id.in_(cohort))
                .execution_options(synchronize_session=False)
            ).rowcount,
            "exam_reports": db.execute(
                delete(ExamReport).where(ExamReport.student_id.in_(cohort))
                .execution_options(synchronize_session=False)
            ).rowcount,
            "guidance_sessions": db.execute(
                delete(GuidanceSession).where(GuidanceSession.student_id.in_(cohort))
                .execution_options(synchronize_session=False)
            ).rowcount,
        }
        removed["students_reset"] = db.execute(
            update(Student)
            .where(Student.track.in_(tracks))
            .values(
                group_id=None,
                desired_partner_npm=None,
                proposal_title=None,
                proposal_file_ref=None,
                proposal_status=ProposalStatus.none,
                proposed_supervisor_id=None,
            )
            .execution_options(synchronize_session=False)
        ).rowcount
        removed["groups"] = db.execute(
            delete(Group).where(Group.id.in_(cohort_groups)).execution_options(synchronize_session=False)
        ).rowcount
        return removed
