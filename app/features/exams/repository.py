from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from app.features.guidance.models import GuidanceSession, SessionStatus
from app.features.students.models import Student
from .models import ExamReport, ExamSchedule, ReportStatus


class ExamRepository:

    @staticmethod
    def get_report(db: Session, report_id: int, lock: bool = False) -> Optional[ExamReport]:
        stmt = select(ExamReport).where(ExamReport.id == report_id)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return db.scalars(stmt).first()

    @staticmethod
    def reports_for(db: Session, student_ids: Iterable[int]) -> Dict[int, ExamReport]:
        ids = list(student_ids)
        if not ids:
            return {}
        rows = db.scalars(select(ExamReport).where(ExamReport.student_id.in_(ids)).order_by(ExamReport.student_id))
        return {r.student_id: r for r in rows.all()}

    @staticmethod
    def upsert_report(db: Session, student_id: int, file_ref: str, existing: Optional[ExamReport] = None) -> ExamReport:
        report = existing
        if report is None:
            report = ExamReport(student_id=student_id)
            db.add(report)
        report.file_ref = file_ref
        report.status = ReportStatus.submitted
        report.note = None
        report.approved_by = None
        report.approved_at = None
        db.flush()
        return report

    @staticmethod
    def approved_counts(db: Session, student_ids: Iterable[int]) -> Dict[int, int]:
        ids = list(student_ids)
        counts = {sid: 0 for sid in ids}
        if not ids:
            return counts
        rows = db.execute(
            select(GuidanceSession.student_id, func.count(GuidanceSession.id))
            .where(
                GuidanceSession.student_id.in_(ids),
                GuidanceSession.status == SessionStatus.approved,
            )
            .group_by(GuidanceSession.student_id)
        ).all()
        counts.update({sid: n for sid, n in rows})
        return counts

    @staticmethod
    def create_schedule(db: Session, **data) -> ExamSchedule:
        schedule = ExamSchedule(**data)
        db.add(schedule)
        db.flush()
        return schedule

    @staticmethod
    def schedules_for(db: Session, student_id: int) -> List[ExamSchedule]:
        return list(
            db.scalars(
                select(ExamSchedule)
                .where(ExamSchedule.student_id == student_id)
                .order_by(ExamSchedule.exam_date, ExamSchedule.exam_time)
            ).all()
        )

    @staticmethod
    def reports_for_supervisor(db: Session, lecturer_id: int) -> List[Tuple[ExamReport, Student]]:
        """Reports of students the lecturer supervises, as primary or secondary."""
        rows = db.execute(
            select(ExamReport, Student)
            .join(Student, Student.id == ExamReport.student_id)
            .where(or_(Student.supervisor_id == lecturer_id, Student.secondary_supervisor_id == lecturer_id))
            .order_by(Student.npm)
        ).all()
        return [(report, student) for report, student in rows]

    @staticmethod
    def all_schedules(db: Session) -> List[ExamSchedule]:
        return list(
            db.scalars(
                select(ExamSchedule).order_by(ExamSchedule.exam_date, ExamSchedule.exam_time, ExamSchedule.id)
            ).all()
        )

    @staticmethod
    def count_reports_by_status(db: Session) -> Dict[str, int]:
        rows = db.execute(select(ExamReport.status, func.count(ExamReport.id)).group_by(ExamReport.status)).all()
        return {getattr(status, "value", status): n for status, n in rows}
