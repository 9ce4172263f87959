import enum

from sqlalchemy import Column, String, Integer, Date, Time, DateTime, Text, ForeignKey
from sqlalchemy import Enum
from sqlalchemy.sql import func

from app.db.base import Base


class ReportStatus(str, enum.Enum):
    submitted = "submitted"
    approved = "approved"
    rejected = "rejected"


class ExamReport(Base):
    """Final report, one row per student (upsert target)."""

    __tablename__ = "exam_reports"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    file_ref = Column(String(1024), nullable=False)
    status = Column(Enum(ReportStatus, native_enum=False, length=20), nullable=False, default=ReportStatus.submitted)
    note = Column(Text, nullable=True)
    approved_by = Column(Integer, ForeignKey("lecturers.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<ExamReport id={self.id} student_id={self.student_id} status={self.status}>"


class ExamSchedule(Base):
    __tablename__ = "exam_schedules"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    exam_date = Column(Date, nullable=False)
    exam_time = Column(Time, nullable=False)
    room = Column(String(100), nullable=False)
    first_examiner_id = Column(Integer, ForeignKey("lecturers.id"), nullable=False)
    secondary_examiner_id = Column(Integer, ForeignKey("lecturers.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
