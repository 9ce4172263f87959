from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from .models import ProposalStatus, Student


class StudentRepository:

    @staticmethod
    def get(db: Session, student_id: int, lock: bool = False) -> Optional[Student]:
        stmt = select(Student).where(Student.id == student_id)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return db.scalars(stmt).first()

    @staticmethod
    def get_by_npm(db: Session, npm: str) -> Optional[Student]:
        return db.scalars(select(Student).where(Student.npm == npm)).first()

    @staticmethod
    def lock_many(db: Session, student_ids: Iterable[int]) -> Dict[int, Student]:
        """Row-lock several students, always in ascending id order.

        A fixed lock order means two requests touching the same pair can
        never deadlock; the later one simply waits.
        """
        ids = sorted(set(student_ids))
        stmt = (
            select(Student)
            .where(Student.id.in_(ids))
            .order_by(Student.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return {s.id: s for s in db.scalars(stmt).all()}

    @staticmethod
    def members_of(db: Session, group_id: int, lock: bool = False) -> List[Student]:
        stmt = select(Student).where(Student.group_id == group_id).order_by(Student.id)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return list(db.scalars(stmt).all())

    @staticmethod
    def create(db: Session, **data) -> Student:
        student = Student(**data)
        db.add(student)
        db.flush()
        return student

    @staticmethod
    def list_students(db: Session, track: Optional[str] = None, limit: int = 500) -> List[Student]:
        stmt = select(Student).where(Student.is_active.is_(True)).order_by(Student.npm).limit(limit)
        if track:
            stmt = stmt.where(Student.track == track)
        return list(db.scalars(stmt).all())

    @staticmethod
    def pending_proposals(db: Session) -> List[Student]:
        """Students whose proposal waits for a coordinator decision."""
        return list(
            db.scalars(
                select(Student)
                .where(Student.proposal_status == ProposalStatus.pending)
                .order_by(Student.npm)
            ).all()
        )

    @staticmethod
    def count_by_proposal_status(db: Session) -> Dict[str, int]:
        rows = db.execute(
            select(Student.proposal_status, func.count(Student.id)).group_by(Student.proposal_status)
        ).all()
        return {getattr(status, "value", status): count for status, count in rows}
