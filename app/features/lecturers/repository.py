from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import Lecturer


class LecturerRepository:

    @staticmethod
    def get_by_nidn(db: Session, nidn: str) -> Optional[Lecturer]:
        return db.scalars(select(Lecturer).where(Lecturer.nidn == nidn)).first()

    @staticmethod
    def get(db: Session, lecturer_id: int, lock: bool = False) -> Optional[Lecturer]:
        stmt = select(Lecturer).where(Lecturer.id == lecturer_id)
        if lock:
            stmt = stmt.with_for_update()
        return db.scalars(stmt).first()

    @staticmethod
    def create(db: Session, **data) -> Lecturer:
        lecturer = Lecturer(**data)
        db.add(lecturer)
        db.flush()
        return lecturer

    @staticmethod
    def list_lecturers(db: Session) -> List[Lecturer]:
        return list(db.scalars(select(Lecturer).where(Lecturer.is_active.is_(True)).order_by(Lecturer.nama)).all())
