import os
import sys
import tempfile
from datetime import date, timedelta

import pytest

# Ensure repo root on sys.path for imports like `app...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Point the app at a throwaway SQLite file before anything imports app.db.session
_DB_DIR = tempfile.mkdtemp(prefix="capstone-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_DB_DIR, "workflow.db")
os.environ["JWT_SECRET"] = "test-secret"
os.environ.setdefault("GUIDANCE_QUOTA", "8")

from jose import jwt  # noqa: E402

import app.db.models  # noqa: E402,F401
from app.db.base import Base  # noqa: E402
from app.db.session import engine, transaction  # noqa: E402
from app.features.guidance.service import GuidanceService  # noqa: E402
from app.features.lecturers.repository import LecturerRepository  # noqa: E402
from app.features.proposals.service import ProposalService  # noqa: E402
from app.features.roles.models import RoleName  # noqa: E402
from app.features.roles.repository import RoleRepository  # noqa: E402
from app.features.students.repository import StudentRepository  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield


@pytest.fixture
def make_student():
    counter = {"n": 0}

    def _make(nama=None, npm=None, **extra):
        counter["n"] += 1
        npm = npm or f"22010{counter['n']:02d}"
        with transaction() as db:
            student = StudentRepository.create(db, npm=npm, nama=nama or f"Student {npm}", is_active=True, **extra)
            return student.id

    return _make


@pytest.fixture
def make_lecturer():
    counter = {"n": 0}

    def _make(nama=None, roles=(), semester=None):
        counter["n"] += 1
        nidn = f"04100{counter['n']:02d}"
        with transaction() as db:
            lecturer = LecturerRepository.create(db, nidn=nidn, nama=nama or f"Lecturer {nidn}", is_active=True)
            for role in roles:
                role = RoleName(role)
                RoleRepository.add(db, lecturer.id, role, semester if role is RoleName.koordinator else None)
            return lecturer.id

    return _make


@pytest.fixture
def approve_sessions():
    """Log and approve ``count`` guidance sessions, one per ISO week."""

    def _approve(student_id, supervisor_id, count, start=date(2026, 2, 2)):
        for i in range(count):
            created = GuidanceService.create_session(
                student_id,
                supervisor_id,
                week_number=i + 1,
                topic=f"Bimbingan minggu {i + 1}",
                session_date=start + timedelta(weeks=i),
            )
            GuidanceService.set_session_status(created.id, supervisor_id, "approved")

    return _approve


@pytest.fixture
def ready_for_proposal_decision():
    def _submit(student_id, supervisor_id, approve=True):
        ProposalService.submit_proposal(student_id, "Sistem Informasi Akademik", "https://files.example/p.pdf")
        ProposalService.assign_supervisors(student_id, supervisor_id)
        if approve:
            ProposalService.set_proposal_status(student_id, "approved")

    return _submit


def make_token(kind, subject):
    return jwt.encode({"sub": str(subject), "kind": kind}, "test-secret", algorithm="HS256")


@pytest.fixture
def auth_headers():
    def _headers(kind, subject):
        return {"Authorization": f"Bearer {make_token(kind, subject)}"}

    return _headers
