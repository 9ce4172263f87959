"""Student-facing endpoints: track, proposal, guidance and report."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends

from app.common.deps import CurrentUser, require_student
from app.features.exams.schemas import ExamReportResponse, ReportSubmit, StudentExamView
from app.features.exams.service import ExamService
from app.features.groups.schemas import GroupResponse
from app.features.groups.service import GroupService
from app.features.guidance.schemas import GuidanceProgress, GuidanceSessionCreate, GuidanceSessionResponse
from app.features.guidance.service import GuidanceService
from app.features.matching.schemas import MatchResult, TrackSelectionRequest
from app.features.matching.service import MatchingService
from app.features.proposals.schemas import ProposalResponse, ProposalSubmit, ProposalSubmitResult
from app.features.proposals.service import ProposalService
from .schemas import StudentProfile
from .service import StudentService

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("/me", response_model=StudentProfile)
def student_me(current: CurrentUser = Depends(require_student())):
    return StudentService.get_profile(current.id)


@router.post("/me/track", response_model=MatchResult)
def select_track(body: TrackSelectionRequest, current: CurrentUser = Depends(require_student())):
    return MatchingService.select_track(current.id, body.track, body.partner_npm)


@router.get("/me/group", response_model=Optional[GroupResponse])
def my_group(current: CurrentUser = Depends(require_student())):
    return GroupService.group_of(current.id)


@router.get("/me/proposal", response_model=ProposalResponse)
def my_proposal(current: CurrentUser = Depends(require_student())):
    return ProposalService.get_proposal(current.id)


@router.post("/me/proposal", response_model=ProposalSubmitResult)
def submit_proposal(body: ProposalSubmit, current: CurrentUser = Depends(require_student())):
    return ProposalService.submit_proposal(current.id, body.title, body.file_ref, body.proposed_supervisor_id)


@router.get("/me/guidance", response_model=GuidanceProgress)
def my_guidance(current: CurrentUser = Depends(require_student())):
    return GuidanceService.list_sessions(current.id)


@router.post("/me/guidance", response_model=GuidanceSessionResponse)
def create_guidance(body: GuidanceSessionCreate, current: CurrentUser = Depends(require_student())):
    return GuidanceService.create_session(
        current.id,
        body.supervisor_id,
        body.week_number,
        body.topic,
        session_date=body.session_date,
        notes=body.notes,
    )


@router.get("/me/report", response_model=StudentExamView)
def my_report(current: CurrentUser = Depends(require_student())):
    return ExamService.get_reports(current.id)


@router.post("/me/report", response_model=List[ExamReportResponse])
def submit_report(body: ReportSubmit, current: CurrentUser = Depends(require_student())):
    return ExamService.submit_report(current.id, body.file_ref)
