from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from app.features.students.models import Student
from app.features.students.tracks import Track
from .models import Group


class GroupRepository:

    @staticmethod
    def create(db: Session, name: str, track: Track) -> Group:
        group = Group(name=name, track=track)
        db.add(group)
        db.flush()
        return group

    @staticmethod
    def get(db: Session, group_id: int) -> Optional[Group]:
        return db.scalars(
            select(Group).options(selectinload(Group.members)).where(Group.id == group_id)
        ).first()

    @staticmethod
    def list_groups(db: Session, track: Optional[str] = None) -> List[Group]:
        stmt = select(Group).options(selectinload(Group.members)).order_by(Group.created_at.desc(), Group.id.desc())
        if track:
            stmt = stmt.where(Group.track == track)
        return list(db.scalars(stmt).all())

    @staticmethod
    def count(db: Session) -> int:
        return db.scalar(select(func.count(Group.id))) or 0

    @staticmethod
    def waiting_students(db: Session, track: Optional[str] = None) -> List[Student]:
        """Team-track students who declared intent but are not grouped yet."""
        stmt = (
            select(Student)
            .where(Student.group_id.is_(None))
            .where(Student.track.in_([Track.proyek1, Track.proyek2, Track.proyek3]))
            .order_by(Student.npm)
        )
        if track:
            stmt = stmt.where(Student.track == track)
        return list(db.scalars(stmt).all())
