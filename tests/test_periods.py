from datetime import date, time

import pytest
from sqlalchemy import func, select

from app.common.errors import InvalidInputError, NotFoundError, PreconditionFailedError
from app.db.session import SessionLocal
from app.features.exams.models import ExamReport, ExamSchedule
from app.features.exams.service import ExamService
from app.features.groups.models import Group
from app.features.guidance.models import GuidanceSession
from app.features.matching.service import MatchingService
from app.features.periods.schemas import PeriodCreate
from app.features.periods.service import PeriodService
from app.features.proposals.service import ProposalService
from app.features.roles.service import RoleService
from app.features.students.models import ProposalStatus, Student


def _payload(semester=2, **overrides):
    data = dict(
        name="Proyek 1 Genap 2026",
        period_type="proposal",
        semester=semester,
        start_date=date(2026, 2, 1),
        end_date=date(2026, 6, 30),
    )
    data.update(overrides)
    return PeriodCreate(**data)


def _count(model):
    with SessionLocal() as db:
        return db.scalar(select(func.count(model.id)))


def test_one_active_period_per_semester():
    created = PeriodService.create_period(_payload())

    with pytest.raises(PreconditionFailedError):
        PeriodService.create_period(_payload(name="Duplikat"))

    # other semesters are independent
    PeriodService.create_period(_payload(semester=3))
    assert [p.id for p in PeriodService.active_periods() if p.semester == 2] == [created.id]


def test_period_validation():
    with pytest.raises(InvalidInputError):
        PeriodService.create_period(_payload(semester=4))
    with pytest.raises(InvalidInputError):
        PeriodService.create_period(_payload(end_date=date(2026, 1, 1)))


def test_coordinator_created_period_requires_the_semester_seat(make_lecturer):
    coordinator = make_lecturer("Dr. Sari", roles=("koordinator",), semester=2)
    other = make_lecturer("Dr. Tono", roles=("koordinator",), semester=3)

    with pytest.raises(PreconditionFailedError):
        PeriodService.create_period(_payload(), created_by=other)

    period = PeriodService.create_period(_payload(), created_by=coordinator)
    assert period.created_by == coordinator


def test_complete_then_recreate():
    first = PeriodService.create_period(_payload())

    done = PeriodService.complete_period(first.id)
    again = PeriodService.create_period(_payload(name="Proyek 1 Ganjil"))

    assert done.period.status.value == "completed"
    assert again.status.value == "active"
    assert [p.id for p in PeriodService.active_periods()] == [again.id]
    with pytest.raises(PreconditionFailedError):
        PeriodService.complete_period(first.id)
    with pytest.raises(NotFoundError):
        PeriodService.complete_period(999)


def test_completion_resets_only_the_semester_cohort(make_student, make_lecturer, approve_sessions):
    supervisor = make_lecturer("Dr. Sari")
    examiner = make_lecturer("Dr. Tono")
    coordinator = make_lecturer("Dr. Wati", roles=("koordinator",), semester=2)

    a = make_student("Ayu", npm="2201001")
    b = make_student("Budi", npm="2201002")
    MatchingService.select_track(a, "proyek1", "2201002")
    MatchingService.select_track(b, "proyek1", "2201001")
    ProposalService.submit_proposal(a, "Sistem Antrian", "https://files.example/p.pdf")
    for sid in (a, b):
        ProposalService.assign_supervisors(sid, supervisor)
        ProposalService.set_proposal_status(sid, "approved")
        approve_sessions(sid, supervisor, 8)
    ExamService.submit_report(a, "https://files.example/laporan.pdf")
    ExamService.schedule_exam(a, date(2026, 7, 1), time(9, 0), "R. 1", examiner)

    # a student of another semester keeps everything
    c = make_student("Citra", npm="2201003")
    MatchingService.select_track(c, "internship1")
    ProposalService.submit_proposal(c, "Magang", "https://files.example/m.pdf")
    ProposalService.assign_supervisors(c, supervisor)
    approve_sessions(c, supervisor, 2)

    period = PeriodService.create_period(_payload(), created_by=coordinator)
    result = PeriodService.complete_period(period.id)

    assert result.coordinator_released is True
    assert result.removed["groups"] == 1
    assert _count(Group) == 0
    assert _count(ExamReport) == 0
    assert _count(ExamSchedule) == 0
    assert _count(GuidanceSession) == 2
    with SessionLocal() as db:
        for sid in (a, b):
            student = db.get(Student, sid)
            assert student.group_id is None
            assert student.proposal_status == ProposalStatus.none
            assert student.proposal_title is None
            assert student.track.value == "proyek1"
        untouched = db.get(Student, c)
        assert untouched.proposal_status == ProposalStatus.pending
    assert RoleService.role_names(coordinator) == []
