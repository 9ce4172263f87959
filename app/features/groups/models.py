from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy import Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.features.students.tracks import Track


class Group(Base):
    """A two-person team on a ``proyek*`` track.

    Created only by the matching engine. Members are the students whose
    ``group_id`` points here; the track is fixed at creation.
    """

    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    track = Column(Enum(Track, native_enum=False, length=20), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    members = relationship("Student", back_populates="group", order_by="Student.id")

    def __repr__(self) -> str:
        return f"<Group id={self.id} name={self.name} track={self.track}>"
