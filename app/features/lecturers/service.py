from __future__ import annotations

import logging
from typing import List

from app.common.errors import ConflictError, InvalidInputError, NotFoundError
from app.db.session import transaction
from app.features.roles.repository import RoleRepository
from .repository import LecturerRepository
from .schemas import LecturerCreate, LecturerProfile, LecturerResponse

logger = logging.getLogger(__name__)


class LecturerService:

    @staticmethod
    def register_lecturer(payload: LecturerCreate) -> LecturerResponse:
        nidn = payload.nidn.strip()
        nama = payload.nama.strip()
        if not nidn or not nama:
            raise InvalidInputError("nidn and nama are required", {"fields": ["nidn", "nama"]})
        with transaction() as db:
            if LecturerRepository.get_by_nidn(db, nidn) is not None:
                raise ConflictError(f"A lecturer with nidn {nidn} already exists", {"nidn": nidn})
            lecturer = LecturerRepository.create(db, nidn=nidn, nama=nama, email=payload.email, is_active=True)
            logger.info("lecturer.registered lecturer_id=%s nidn=%s", lecturer.id, nidn)
            return LecturerResponse.model_validate(lecturer)

    @staticmethod
    def get_profile(lecturer_id: int) -> LecturerProfile:
        with transaction() as db:
            lecturer = LecturerRepository.get(db, lecturer_id)
            if lecturer is None:
                raise NotFoundError("Lecturer", lecturer_id)
            roles = [r.role.value for r in RoleRepository.roles_of(db, lecturer_id)]
            return LecturerProfile(**LecturerResponse.model_validate(lecturer).model_dump(), roles=roles)

    @staticmethod
    def list_lecturers() -> List[LecturerResponse]:
        with transaction() as db:
            return [LecturerResponse.model_validate(l) for l in LecturerRepository.list_lecturers(db)]
