# Import all models here so Alembic and create_all can discover them
from app.db.base import Base

# Lecturers first (referenced by students, roles, guidance and exams)
from app.features.lecturers.models import Lecturer
from app.features.roles.models import RoleAssignment
from app.features.groups.models import Group
from app.features.students.models import Student
from app.features.guidance.models import GuidanceSession
from app.features.exams.models import ExamReport, ExamSchedule
from app.features.periods.models import Period

# This ensures all models are registered with SQLAlchemy
__all__ = [
    "Base",
    "Lecturer",
    "RoleAssignment",
    "Group",
    "Student",
    "GuidanceSession",
    "ExamReport",
    "ExamSchedule",
    "Period",
]
