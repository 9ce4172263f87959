import enum

from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy import Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.features.students.tracks import Track


class ProposalStatus(str, enum.Enum):
    none = "none"
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    npm = Column(String(32), unique=True, nullable=False, index=True)
    nama = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    angkatan = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    # Matching engine
    track = Column(Enum(Track, native_enum=False, length=20), nullable=True)
    desired_partner_npm = Column(String(32), nullable=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="SET NULL"), nullable=True, index=True)

    # Proposal (denormalised per member, identical across a group)
    proposal_title = Column(String(500), nullable=True)
    proposal_file_ref = Column(String(1024), nullable=True)
    proposal_status = Column(
        Enum(ProposalStatus, native_enum=False, length=20),
        nullable=False,
        default=ProposalStatus.none,
    )
    proposed_supervisor_id = Column(Integer, ForeignKey("lecturers.id"), nullable=True)

    # Supervisors
    supervisor_id = Column(Integer, ForeignKey("lecturers.id"), nullable=True)
    secondary_supervisor_id = Column(Integer, ForeignKey("lecturers.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    group = relationship("Group", back_populates="members")

    def supervisor_ids(self) -> set:
        return {sid for sid in (self.supervisor_id, self.secondary_supervisor_id) if sid is not None}

    def __repr__(self) -> str:
        return f"<Student id={self.id} npm={self.npm} track={self.track} group_id={self.group_id}>"
