from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from .models import GuidanceSession, SessionStatus


class GuidanceRepository:

    @staticmethod
    def get(db: Session, session_id: int, lock: bool = False) -> Optional[GuidanceSession]:
        stmt = select(GuidanceSession).where(GuidanceSession.id == session_id)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return db.scalars(stmt).first()

    @staticmethod
    def create(db: Session, **data) -> GuidanceSession:
        session = GuidanceSession(**data)
        db.add(session)
        db.flush()
        return session

    @staticmethod
    def for_student(db: Session, student_id: int) -> List[GuidanceSession]:
        return list(
            db.scalars(
                select(GuidanceSession)
                .where(GuidanceSession.student_id == student_id)
                .order_by(GuidanceSession.week_number, GuidanceSession.id)
            ).all()
        )

    @staticmethod
    def count(db: Session, student_id: int, status: Optional[SessionStatus] = None) -> int:
        stmt = select(func.count(GuidanceSession.id)).where(GuidanceSession.student_id == student_id)
        if status is not None:
            stmt = stmt.where(GuidanceSession.status == status)
        return db.scalar(stmt) or 0

    @staticmethod
    def pending_for_supervisor(db: Session, supervisor_id: int) -> List[GuidanceSession]:
        return list(
            db.scalars(
                select(GuidanceSession)
                .where(
                    GuidanceSession.supervisor_id == supervisor_id,
                    GuidanceSession.status == SessionStatus.waiting,
                )
                .order_by(GuidanceSession.session_date, GuidanceSession.id)
            ).all()
        )
