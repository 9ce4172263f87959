from __future__ import annotations

import logging
from typing import List, Optional

from app.common.errors import ConflictError, InvalidInputError, NotFoundError
from app.db.session import transaction
from .repository import StudentRepository
from .schemas import StudentCreate, StudentProfile
from .tracks import parse_track

logger = logging.getLogger(__name__)


class StudentService:

    @staticmethod
    def register_student(payload: StudentCreate) -> StudentProfile:
        npm = payload.npm.strip()
        nama = payload.nama.strip()
        if not npm or not nama:
            raise InvalidInputError("npm and nama are required", {"fields": ["npm", "nama"]})
        with transaction() as db:
            if StudentRepository.get_by_npm(db, npm) is not None:
                raise ConflictError(f"A student with npm {npm} already exists", {"npm": npm})
            student = StudentRepository.create(
                db, npm=npm, nama=nama, email=payload.email, angkatan=payload.angkatan, is_active=True
            )
            logger.info("student.registered student_id=%s npm=%s", student.id, npm)
            return StudentProfile.model_validate(student)

    @staticmethod
    def get_profile(student_id: int) -> StudentProfile:
        with transaction() as db:
            student = StudentRepository.get(db, student_id)
            if student is None:
                raise NotFoundError("Student", student_id)
            return StudentProfile.model_validate(student)

    @staticmethod
    def list_students(track: Optional[str] = None) -> List[StudentProfile]:
        if track:
            track = parse_track(track).value
        with transaction() as db:
            return [StudentProfile.model_validate(s) for s in StudentRepository.list_students(db, track)]
