"""Role assignment ledger.

Lecturers hold any subset of ``dosen``, ``koordinator`` and ``kaprodi``.
A coordinator assignment carries the semester it coordinates, and each
semester has at most one coordinator at a time.
"""

from __future__ import annotations

import logging
from typing import List

from app.common.errors import InvalidInputError, NotFoundError, PreconditionFailedError
from app.db.session import transaction
from app.features.lecturers.repository import LecturerRepository
from app.features.students.tracks import validate_semester
from .models import RoleName
from .repository import RoleRepository
from .schemas import LecturerRolesResponse, RoleAssignmentResponse

logger = logging.getLogger(__name__)


def _parse_role(role) -> RoleName:
    try:
        return RoleName(role)
    except ValueError:
        allowed = ", ".join(r.value for r in RoleName)
        raise InvalidInputError(f"role must be one of: {allowed}", {"field": "role", "value": role})


class RoleService:

    @staticmethod
    def assign_coordinator(lecturer_id: int, semester: int) -> RoleAssignmentResponse:
        validate_semester(semester)
        with transaction() as db:
            if LecturerRepository.get(db, lecturer_id, lock=True) is None:
                raise NotFoundError("Lecturer", lecturer_id)

            holder = RoleRepository.coordinator_for_semester(db, semester, lock=True)
            if holder is not None and holder.lecturer_id != lecturer_id:
                holder_lecturer = LecturerRepository.get(db, holder.lecturer_id)
                holder_name = holder_lecturer.nama if holder_lecturer else f"lecturer {holder.lecturer_id}"
                raise PreconditionFailedError(
                    f"Semester {semester} already has a coordinator: {holder_name}",
                    {"semester": semester, "lecturer_id": holder.lecturer_id},
                )

            # upsert keyed by (lecturer, role)
            assignment = RoleRepository.get(db, lecturer_id, RoleName.koordinator, lock=True)
            if assignment is None:
                assignment = RoleRepository.add(db, lecturer_id, RoleName.koordinator, semester)
            else:
                assignment.assigned_semester = semester
                db.flush()
            logger.info("role.coordinator_assigned lecturer_id=%s semester=%s", lecturer_id, semester)
            return RoleAssignmentResponse.model_validate(assignment)

    @staticmethod
    def grant_role(lecturer_id: int, role) -> RoleAssignmentResponse:
        role = _parse_role(role)
        if role is RoleName.koordinator:
            raise InvalidInputError("Use the coordinator assignment to grant koordinator (it needs a semester)")
        with transaction() as db:
            if LecturerRepository.get(db, lecturer_id, lock=True) is None:
                raise NotFoundError("Lecturer", lecturer_id)
            assignment = RoleRepository.get(db, lecturer_id, role)
            if assignment is None:
                assignment = RoleRepository.add(db, lecturer_id, role)
                logger.info("role.granted lecturer_id=%s role=%s", lecturer_id, role.value)
            return RoleAssignmentResponse.model_validate(assignment)

    @staticmethod
    def revoke_role(lecturer_id: int, role) -> bool:
        role = _parse_role(role)
        with transaction() as db:
            if LecturerRepository.get(db, lecturer_id, lock=True) is None:
                raise NotFoundError("Lecturer", lecturer_id)
            removed = RoleRepository.remove(db, lecturer_id, role) > 0
        if removed:
            logger.info("role.revoked lecturer_id=%s role=%s", lecturer_id, role.value)
        return removed

    @staticmethod
    def list_roles(lecturer_id: int) -> LecturerRolesResponse:
        with transaction() as db:
            if LecturerRepository.get(db, lecturer_id) is None:
                raise NotFoundError("Lecturer", lecturer_id)
            roles = [RoleAssignmentResponse.model_validate(r) for r in RoleRepository.roles_of(db, lecturer_id)]
        return LecturerRolesResponse(lecturer_id=lecturer_id, roles=roles)

    @staticmethod
    def role_names(lecturer_id: int) -> List[str]:
        with transaction() as db:
            return [r.role.value for r in RoleRepository.roles_of(db, lecturer_id)]

    @staticmethod
    def has_role(lecturer_id: int, role) -> bool:
        return _parse_role(role).value in RoleService.role_names(lecturer_id)
