"""Exam report eligibility and group-wide report status.

A report is submitted on behalf of the whole group: every member must have
reached the approved guidance quota, and one report row per member is
written with the same file. The supervisor's decision is mirrored onto all
member rows.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import List, Optional

from app.common.errors import InvalidInputError, NotFoundError, PreconditionFailedError
from app.db.session import transaction
from app.features.groups.broadcast import broadcast_update, lock_members
from app.features.guidance.service import guidance_quota
from app.features.lecturers.repository import LecturerRepository
from app.features.students.models import ProposalStatus
from app.features.students.repository import StudentRepository
from .models import ExamReport, ReportStatus
from .repository import ExamRepository
from .schemas import ExamReportResponse, ExamScheduleResponse, StudentExamView, SupervisedReport

logger = logging.getLogger(__name__)


class ExamService:

    @staticmethod
    def submit_report(student_id: int, file_ref: str) -> List[ExamReportResponse]:
        if file_ref is None or not file_ref.strip():
            raise InvalidInputError("file_ref is required", {"field": "file_ref"})
        file_ref = file_ref.strip()
        quota = guidance_quota()

        with transaction() as db:
            student = StudentRepository.get(db, student_id)
            if student is None:
                raise NotFoundError("Student", student_id)
            members = lock_members(db, student)
            if student.supervisor_id is None:
                raise PreconditionFailedError(
                    f"{student.nama} has no supervisor assigned yet",
                    {"student_id": student.id},
                )
            if student.proposal_status != ProposalStatus.approved:
                raise PreconditionFailedError(
                    "The proposal must be approved before submitting the report",
                    {"proposal_status": student.proposal_status.value},
                )

            member_ids = [m.id for m in members]
            counts = ExamRepository.approved_counts(db, member_ids)
            for member in members:
                if counts[member.id] < quota:
                    raise PreconditionFailedError(
                        f"Guidance quota not met for {member.nama}: {counts[member.id]}/{quota} approved sessions",
                        {"student_id": member.id, "approved": counts[member.id], "quota": quota},
                    )

            existing = ExamRepository.reports_for(db, member_ids)
            for report in existing.values():
                if report.status == ReportStatus.approved:
                    raise PreconditionFailedError(
                        "The report has already been approved",
                        {"report_id": report.id},
                    )

            reports = [ExamRepository.upsert_report(db, sid, file_ref, existing.get(sid)) for sid in member_ids]
            logger.info("report.submitted student_id=%s members=%s", student.id, member_ids)
            return [ExamReportResponse.model_validate(r) for r in reports]

    @staticmethod
    def set_report_status(
        report_id: int,
        supervisor_id: int,
        status,
        note: Optional[str] = None,
    ) -> List[ExamReportResponse]:
        try:
            decision = ReportStatus(status)
        except ValueError:
            decision = None
        if decision not in (ReportStatus.approved, ReportStatus.rejected):
            raise InvalidInputError("status must be one of: approved, rejected", {"field": "status", "value": status})

        with transaction() as db:
            report = ExamRepository.get_report(db, report_id)
            if report is None:
                raise NotFoundError("Report", report_id)
            owner = StudentRepository.get(db, report.student_id)
            members = lock_members(db, owner)
            if supervisor_id not in owner.supervisor_ids():
                raise PreconditionFailedError(
                    f"Lecturer {supervisor_id} does not supervise {owner.nama}",
                    {"report_id": report.id, "supervisor_id": supervisor_id},
                )

            member_ids = [m.id for m in members]
            approved = decision == ReportStatus.approved
            broadcast_update(
                db,
                ExamReport,
                ExamReport.student_id,
                member_ids,
                {
                    "status": decision,
                    "note": note,
                    "approved_by": supervisor_id if approved else None,
                    "approved_at": datetime.now(timezone.utc) if approved else None,
                },
            )
            reports = ExamRepository.reports_for(db, member_ids)
            logger.info(
                "report.%s report_id=%s members=%s by=%s",
                decision.value, report.id, member_ids, supervisor_id,
            )
            return [ExamReportResponse.model_validate(r) for r in reports.values()]

    @staticmethod
    def schedule_exam(
        student_id: int,
        exam_date: date,
        exam_time: time,
        room: str,
        secondary_examiner_id: int,
    ) -> ExamScheduleResponse:
        if room is None or not room.strip():
            raise InvalidInputError("room is required", {"field": "room"})
        with transaction() as db:
            student = StudentRepository.get(db, student_id, lock=True)
            if student is None:
                raise NotFoundError("Student", student_id)
            if student.supervisor_id is None:
                raise PreconditionFailedError(
                    f"{student.nama} has no supervisor assigned yet",
                    {"student_id": student.id},
                )
            if LecturerRepository.get(db, secondary_examiner_id) is None:
                raise NotFoundError("Lecturer", secondary_examiner_id)
            if secondary_examiner_id == student.supervisor_id:
                raise InvalidInputError(
                    "The secondary examiner must differ from the supervisor",
                    {"field": "secondary_examiner_id"},
                )
            schedule = ExamRepository.create_schedule(
                db,
                student_id=student.id,
                exam_date=exam_date,
                exam_time=exam_time,
                room=room.strip(),
                first_examiner_id=student.supervisor_id,
                secondary_examiner_id=secondary_examiner_id,
            )
            logger.info(
                "exam.scheduled schedule_id=%s student_id=%s date=%s",
                schedule.id, student.id, exam_date.isoformat(),
            )
            return ExamScheduleResponse.model_validate(schedule)

    @staticmethod
    def get_reports(student_id: int) -> StudentExamView:
        with transaction() as db:
            student = StudentRepository.get(db, student_id)
            if student is None:
                raise NotFoundError("Student", student_id)
            own = [ExamReportResponse.model_validate(r) for r in ExamRepository.reports_for(db, [student.id]).values()]
            schedules = [ExamScheduleResponse.model_validate(s) for s in ExamRepository.schedules_for(db, student.id)]
        return StudentExamView(student_id=student_id, reports=own, schedules=schedules)

    @staticmethod
    def reports_for_supervisor(lecturer_id: int) -> List[SupervisedReport]:
        quota = guidance_quota()
        with transaction() as db:
            if LecturerRepository.get(db, lecturer_id) is None:
                raise NotFoundError("Lecturer", lecturer_id)
            rows = ExamRepository.reports_for_supervisor(db, lecturer_id)
            counts = ExamRepository.approved_counts(db, [student.id for _, student in rows])
            return [
                SupervisedReport(
                    **ExamReportResponse.model_validate(report).model_dump(),
                    npm=student.npm,
                    nama=student.nama,
                    approved_sessions=counts[student.id],
                    quota=quota,
                )
                for report, student in rows
            ]

    @staticmethod
    def list_schedules() -> List[ExamScheduleResponse]:
        with transaction() as db:
            return [ExamScheduleResponse.model_validate(s) for s in ExamRepository.all_schedules(db)]
