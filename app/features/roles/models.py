import enum

from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy import Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.db.base import Base


class RoleName(str, enum.Enum):
    dosen = "dosen"
    koordinator = "koordinator"
    kaprodi = "kaprodi"


class RoleAssignment(Base):
    """One administrative role held by a lecturer.

    ``assigned_semester`` is only meaningful for ``koordinator``; the
    (role, assigned_semester) uniqueness keeps one coordinator per semester.
    Other roles leave it NULL, and NULLs never collide.
    """

    __tablename__ = "role_assignments"

    id = Column(Integer, primary_key=True, index=True)
    lecturer_id = Column(Integer, ForeignKey("lecturers.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Enum(RoleName, native_enum=False, length=20), nullable=False)
    assigned_semester = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    lecturer = relationship("Lecturer", back_populates="roles")

    __table_args__ = (
        UniqueConstraint("lecturer_id", "role", name="uq_role_assignments_lecturer_role"),
        UniqueConstraint("role", "assigned_semester", name="uq_role_assignments_role_semester"),
        CheckConstraint(
            "assigned_semester IS NULL OR role = 'koordinator'",
            name="ck_role_assignments_semester_only_coordinator",
        ),
    )

    def __repr__(self) -> str:
        return f"<RoleAssignment lecturer_id={self.lecturer_id} role={self.role} semester={self.assigned_semester}>"
