"""Supervisor decisions on guidance sessions and exam reports."""

from typing import List

from fastapi import APIRouter, Depends

from app.common.deps import CurrentUser, require_lecturer
from app.features.exams.schemas import ExamReportResponse, ReportDecision, SupervisedReport
from app.features.exams.service import ExamService
from app.features.guidance.schemas import GuidanceDecision, GuidanceProgress, GuidanceSessionResponse
from app.features.guidance.service import GuidanceService
from .schemas import LecturerProfile
from .service import LecturerService

router = APIRouter(prefix="/lecturers", tags=["Lecturers"])


@router.get("/me", response_model=LecturerProfile)
def lecturer_me(current: CurrentUser = Depends(require_lecturer())):
    return LecturerService.get_profile(current.id)


@router.get("/me/guidance/pending", response_model=List[GuidanceSessionResponse])
def pending_guidance(current: CurrentUser = Depends(require_lecturer())):
    return GuidanceService.pending_for_supervisor(current.id)


@router.get("/me/reports", response_model=List[SupervisedReport])
def supervised_reports(current: CurrentUser = Depends(require_lecturer())):
    return ExamService.reports_for_supervisor(current.id)


@router.get("/students/{student_id}/guidance", response_model=GuidanceProgress)
def student_guidance(student_id: int, current: CurrentUser = Depends(require_lecturer())):
    return GuidanceService.progress_for_lecturer(student_id, current.id, current.roles)


@router.patch("/guidance/{session_id}", response_model=GuidanceSessionResponse)
def decide_guidance(session_id: int, body: GuidanceDecision, current: CurrentUser = Depends(require_lecturer())):
    return GuidanceService.set_session_status(session_id, current.id, body.status)


@router.patch("/reports/{report_id}", response_model=List[ExamReportResponse])
def decide_report(report_id: int, body: ReportDecision, current: CurrentUser = Depends(require_lecturer())):
    return ExamService.set_report_status(report_id, current.id, body.status, body.note)
