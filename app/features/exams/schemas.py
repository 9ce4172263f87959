from datetime import date, datetime, time
from pydantic import BaseModel, Field
from typing import Optional, List

from .models import ReportStatus


class ReportSubmit(BaseModel):
    file_ref: str = Field(..., max_length=1024, description="URL of the already uploaded report")


class ReportDecision(BaseModel):
    status: ReportStatus
    note: Optional[str] = None


class ExamReportResponse(BaseModel):
    id: int
    student_id: int
    file_ref: str
    status: ReportStatus
    note: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class ExamScheduleCreate(BaseModel):
    student_id: int
    exam_date: date
    exam_time: time
    room: str = Field(..., max_length=100)
    secondary_examiner_id: int


class ExamScheduleResponse(BaseModel):
    id: int
    student_id: int
    exam_date: date
    exam_time: time
    room: str
    first_examiner_id: int
    secondary_examiner_id: int

    model_config = {
        "from_attributes": True
    }


class StudentExamView(BaseModel):
    student_id: int
    reports: List[ExamReportResponse]
    schedules: List[ExamScheduleResponse]


class SupervisedReport(ExamReportResponse):
    """A report in a supervisor's queue, with the student's guidance progress."""
    npm: str
    nama: str
    approved_sessions: int
    quota: int
