import enum

from sqlalchemy import Column, String, Integer, Date, DateTime, Text, ForeignKey, Index, text
from sqlalchemy import Enum
from sqlalchemy.sql import func

from app.db.base import Base


class PeriodStatus(str, enum.Enum):
    active = "active"
    completed = "completed"


class Period(Base):
    __tablename__ = "periods"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    period_type = Column(String(50), nullable=False)
    semester = Column(Integer, nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(Enum(PeriodStatus, native_enum=False, length=20), nullable=False, default=PeriodStatus.active)
    description = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("lecturers.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        # at most one active period per semester, even under racing inserts
        Index(
            "uq_periods_active_semester",
            "semester",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Period id={self.id} semester={self.semester} status={self.status}>"
