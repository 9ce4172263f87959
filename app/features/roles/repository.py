from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from .models import RoleAssignment, RoleName


class RoleRepository:

    @staticmethod
    def roles_of(db: Session, lecturer_id: int) -> List[RoleAssignment]:
        return list(
            db.scalars(
                select(RoleAssignment).where(RoleAssignment.lecturer_id == lecturer_id).order_by(RoleAssignment.role)
            ).all()
        )

    @staticmethod
    def get(db: Session, lecturer_id: int, role: RoleName, lock: bool = False) -> Optional[RoleAssignment]:
        stmt = select(RoleAssignment).where(
            RoleAssignment.lecturer_id == lecturer_id,
            RoleAssignment.role == role,
        )
        if lock:
            stmt = stmt.with_for_update()
        return db.scalars(stmt).first()

    @staticmethod
    def coordinator_for_semester(db: Session, semester: int, lock: bool = False) -> Optional[RoleAssignment]:
        stmt = select(RoleAssignment).where(
            RoleAssignment.role == RoleName.koordinator,
            RoleAssignment.assigned_semester == semester,
        )
        if lock:
            stmt = stmt.with_for_update()
        return db.scalars(stmt).first()

    @staticmethod
    def add(db: Session, lecturer_id: int, role: RoleName, assigned_semester: Optional[int] = None) -> RoleAssignment:
        assignment = RoleAssignment(lecturer_id=lecturer_id, role=role, assigned_semester=assigned_semester)
        db.add(assignment)
        db.flush()
        return assignment

    @staticmethod
    def remove(db: Session, lecturer_id: int, role: RoleName) -> int:
        result = db.execute(
            delete(RoleAssignment).where(
                RoleAssignment.lecturer_id == lecturer_id,
                RoleAssignment.role == role,
            )
        )
        return result.rowcount

    @staticmethod
    def release_coordinator(db: Session, semester: int) -> int:
        result = db.execute(
            delete(RoleAssignment).where(
                RoleAssignment.role == RoleName.koordinator,
                RoleAssignment.assigned_semester == semester,
            )
        )
        return result.rowcount
