"""Group fan-out.

A proposal or a report decision belongs to the whole team, but it is stored
on one row per member. ``broadcast_update`` is the single place where such a
write is applied to every member; callers run it inside their own
transaction so the members can never disagree.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.common.errors import ConflictError
from app.features.students.models import Student
from app.features.students.repository import StudentRepository

logger = logging.getLogger(__name__)


def member_ids_for(db: Session, student: Student) -> List[int]:
    """Ids of every member of ``student``'s group, or just ``student`` when solo."""
    if student.group_id is None:
        return [student.id]
    return [m.id for m in StudentRepository.members_of(db, student.group_id)]


def lock_members(db: Session, student: Student) -> List[Student]:
    """Row-lock ``student`` and its group mates in ascending id order.

    Raises ConflictError when the group membership changed between the
    unlocked read and the lock (a partner match landed in between).
    """
    group_id = student.group_id
    locked = StudentRepository.lock_many(db, member_ids_for(db, student))
    if student.id not in locked or locked[student.id].group_id != group_id:
        raise ConflictError(
            "Group membership changed while processing the request, please retry",
            {"student_id": student.id},
        )
    return list(locked.values())


def broadcast_update(db: Session, model, key_column, member_ids: List[int], values: Dict[str, Any]) -> int:
    """Apply ``values`` to every ``model`` row whose ``key_column`` is a member id.

    Returns the number of rows written.
    """
    if not member_ids:
        return 0
    result = db.execute(
        update(model)
        .where(key_column.in_(member_ids))
        .values(**values)
        .execution_options(synchronize_session="fetch")
    )
    logger.debug("broadcast.update table=%s members=%s rows=%s", model.__tablename__, member_ids, result.rowcount)
    return result.rowcount


__all__ = ["member_ids_for", "lock_members", "broadcast_update"]
