import enum

from sqlalchemy import Column, String, Integer, Date, DateTime, Text, ForeignKey
from sqlalchemy import Enum
from sqlalchemy.sql import func

from app.db.base import Base


class SessionStatus(str, enum.Enum):
    waiting = "waiting"
    approved = "approved"
    rejected = "rejected"


class GuidanceSession(Base):
    """One supervised meeting. Counted per student, never per group."""

    __tablename__ = "guidance_sessions"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    supervisor_id = Column(Integer, ForeignKey("lecturers.id"), nullable=False, index=True)
    week_number = Column(Integer, nullable=False)
    session_date = Column(Date, nullable=False)
    topic = Column(String(500), nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(Enum(SessionStatus, native_enum=False, length=20), nullable=False, default=SessionStatus.waiting)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<GuidanceSession id={self.id} student_id={self.student_id} week={self.week_number} status={self.status}>"
