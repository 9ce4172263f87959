from sqlalchemy import Column, String, Integer, Boolean, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.db.base import Base


class Lecturer(Base):
    __tablename__ = "lecturers"

    id = Column(Integer, primary_key=True, index=True)
    nidn = Column(String(32), unique=True, nullable=False, index=True)
    nama = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    roles = relationship("RoleAssignment", back_populates="lecturer", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Lecturer id={self.id} nidn={self.nidn} nama={self.nama}>"
