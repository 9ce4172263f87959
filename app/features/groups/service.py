from __future__ import annotations

from typing import List, Optional

from app.common.errors import NotFoundError
from app.db.session import transaction
from app.features.students.repository import StudentRepository
from app.features.students.tracks import parse_track
from .repository import GroupRepository
from .schemas import GroupResponse, WaitingStudent


class GroupService:

    @staticmethod
    def get_group(group_id: int) -> GroupResponse:
        with transaction() as db:
            group = GroupRepository.get(db, group_id)
            if group is None:
                raise NotFoundError("Group", group_id)
            return GroupResponse.model_validate(group)

    @staticmethod
    def group_of(student_id: int) -> Optional[GroupResponse]:
        """The student's group, or None for solo and not-yet-matched students."""
        with transaction() as db:
            student = StudentRepository.get(db, student_id)
            if student is None:
                raise NotFoundError("Student", student_id)
            if student.group_id is None:
                return None
            return GroupResponse.model_validate(GroupRepository.get(db, student.group_id))

    @staticmethod
    def list_groups(track: Optional[str] = None) -> List[GroupResponse]:
        if track:
            track = parse_track(track).value
        with transaction() as db:
            return [GroupResponse.model_validate(g) for g in GroupRepository.list_groups(db, track)]

    @staticmethod
    def waiting_students(track: Optional[str] = None) -> List[WaitingStudent]:
        if track:
            track = parse_track(track).value
        with transaction() as db:
            return [WaitingStudent.model_validate(s) for s in GroupRepository.waiting_students(db, track)]
