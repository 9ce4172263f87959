from typing import List

from fastapi import APIRouter, Depends

from app.common.deps import require_role
from .schemas import ExamScheduleCreate, ExamScheduleResponse, StudentExamView
from .service import ExamService

router = APIRouter(
    prefix="/coordinator",
    tags=["Coordinator"],
    dependencies=[Depends(require_role("koordinator"))],
)


@router.post("/exams", response_model=ExamScheduleResponse)
def schedule_exam(body: ExamScheduleCreate):
    return ExamService.schedule_exam(
        body.student_id,
        body.exam_date,
        body.exam_time,
        body.room,
        body.secondary_examiner_id,
    )


@router.get("/exams", response_model=List[ExamScheduleResponse])
def list_exams():
    return ExamService.list_schedules()


@router.get("/exams/{student_id}", response_model=StudentExamView)
def student_exam(student_id: int):
    return ExamService.get_reports(student_id)
