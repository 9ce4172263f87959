from datetime import date, time, timedelta

import pytest

from app.common.errors import InvalidInputError, NotFoundError, PreconditionFailedError
from app.features.exams.models import ReportStatus
from app.features.exams.service import ExamService
from app.features.guidance.service import GuidanceService
from app.features.matching.service import MatchingService
from app.features.proposals.service import ProposalService


@pytest.fixture
def team(make_student, make_lecturer):
    a = make_student("Ayu", npm="2201001")
    b = make_student("Budi", npm="2201002")
    supervisor = make_lecturer("Dr. Sari")
    MatchingService.select_track(a, "proyek2", "2201002")
    MatchingService.select_track(b, "proyek2", "2201001")
    ProposalService.submit_proposal(a, "Sistem Antrian", "https://files.example/p.pdf")
    for sid in (a, b):
        ProposalService.assign_supervisors(sid, supervisor)
        ProposalService.set_proposal_status(sid, "approved")
    return a, b, supervisor


def test_report_blocked_until_every_member_reaches_quota(team, approve_sessions):
    a, b, supervisor = team
    approve_sessions(a, supervisor, 8)
    approve_sessions(b, supervisor, 7)

    with pytest.raises(PreconditionFailedError) as excinfo:
        ExamService.submit_report(a, "https://files.example/laporan.pdf")

    assert "Budi" in excinfo.value.message
    assert "7/8" in excinfo.value.message
    assert ExamService.get_reports(a).reports == []
    assert ExamService.get_reports(b).reports == []


def test_report_written_for_every_member(team, approve_sessions):
    a, b, supervisor = team
    approve_sessions(a, supervisor, 8)
    approve_sessions(b, supervisor, 8)

    reports = ExamService.submit_report(b, "https://files.example/laporan.pdf")

    assert sorted(r.student_id for r in reports) == sorted([a, b])
    assert {r.file_ref for r in reports} == {"https://files.example/laporan.pdf"}
    assert {r.status for r in reports} == {ReportStatus.submitted}


def test_report_needs_supervisor_and_approved_proposal(make_student, make_lecturer):
    student = make_student("Ayu")
    with pytest.raises(PreconditionFailedError):
        ExamService.submit_report(student, "https://files.example/laporan.pdf")

    MatchingService.select_track(student, "internship1")
    ProposalService.submit_proposal(student, "Magang", "https://files.example/p.pdf")
    ProposalService.assign_supervisors(student, make_lecturer("Dr. Sari"))
    with pytest.raises(PreconditionFailedError):
        ExamService.submit_report(student, "https://files.example/laporan.pdf")
    with pytest.raises(InvalidInputError):
        ExamService.submit_report(student, "")


def test_report_decision_propagates_to_group(team, approve_sessions):
    a, b, supervisor = team
    approve_sessions(a, supervisor, 8)
    approve_sessions(b, supervisor, 8)
    reports = ExamService.submit_report(a, "https://files.example/laporan.pdf")
    own = next(r for r in reports if r.student_id == a)

    decided = ExamService.set_report_status(own.id, supervisor, "approved", note="Siap sidang")

    assert len(decided) == 2
    for report in decided:
        assert report.status == ReportStatus.approved
        assert report.note == "Siap sidang"
        assert report.approved_by == supervisor
        assert report.approved_at is not None
    assert ExamService.get_reports(b).reports[0].status == ReportStatus.approved

    with pytest.raises(PreconditionFailedError):
        ExamService.submit_report(b, "https://files.example/laporan-2.pdf")


def test_rejected_report_can_be_resubmitted(team, approve_sessions):
    a, b, supervisor = team
    approve_sessions(a, supervisor, 8)
    approve_sessions(b, supervisor, 8)
    reports = ExamService.submit_report(a, "https://files.example/v1.pdf")
    ExamService.set_report_status(reports[0].id, supervisor, "rejected", note="Lengkapi bab 4")

    again = ExamService.submit_report(a, "https://files.example/v2.pdf")

    assert {r.status for r in again} == {ReportStatus.submitted}
    assert {r.note for r in again} == {None}
    assert {r.id for r in again} == {r.id for r in reports}


def test_report_decision_requires_supervisor(team, approve_sessions, make_lecturer):
    a, b, supervisor = team
    approve_sessions(a, supervisor, 8)
    approve_sessions(b, supervisor, 8)
    reports = ExamService.submit_report(a, "https://files.example/laporan.pdf")

    with pytest.raises(PreconditionFailedError):
        ExamService.set_report_status(reports[0].id, make_lecturer("Dr. Lain"), "approved")
    with pytest.raises(InvalidInputError):
        ExamService.set_report_status(reports[0].id, supervisor, "submitted")
    with pytest.raises(NotFoundError):
        ExamService.set_report_status(999, supervisor, "approved")


def test_schedule_exam(team, make_lecturer):
    a, _, supervisor = team
    examiner = make_lecturer("Dr. Tono")

    schedule = ExamService.schedule_exam(a, date(2026, 7, 1), time(9, 30), "R. 301", examiner)

    assert schedule.first_examiner_id == supervisor
    assert schedule.secondary_examiner_id == examiner
    assert ExamService.get_reports(a).schedules[0].room == "R. 301"


def test_schedule_exam_validation(team, make_student):
    a, _, supervisor = team
    with pytest.raises(InvalidInputError):
        ExamService.schedule_exam(a, date(2026, 7, 1), time(9, 30), "R. 301", supervisor)
    with pytest.raises(NotFoundError):
        ExamService.schedule_exam(a, date(2026, 7, 1), time(9, 30), "R. 301", 999)
    with pytest.raises(PreconditionFailedError):
        ExamService.schedule_exam(make_student("Citra"), date(2026, 7, 1), time(9, 30), "R. 301", supervisor)


def test_waiting_session_does_not_count_toward_report_quota(make_student, make_lecturer, approve_sessions):
    student = make_student("Dewi", npm="2201009")
    supervisor = make_lecturer("Dr. Sari")
    MatchingService.select_track(student, "internship2")
    ProposalService.submit_proposal(student, "Magang Gudang Data", "https://files.example/p.pdf")
    ProposalService.assign_supervisors(student, supervisor)
    ProposalService.set_proposal_status(student, "approved")
    approve_sessions(student, supervisor, 7)
    GuidanceService.create_session(
        student, supervisor, week_number=8, topic="Bimbingan minggu 8",
        session_date=date(2026, 2, 2) + timedelta(weeks=7),
    )

    with pytest.raises(PreconditionFailedError) as excinfo:
        ExamService.submit_report(student, "https://files.example/laporan.pdf")

    assert "Dewi" in excinfo.value.message
    assert "7/8" in excinfo.value.message
    assert excinfo.value.details == {"student_id": student, "approved": 7, "quota": 8}
    assert ExamService.get_reports(student).reports == []


def test_supervisor_report_queue(team, approve_sessions, make_student, make_lecturer):
    a, b, supervisor = team
    co_supervisor = make_lecturer("Dr. Tono")
    other = make_lecturer("Dr. Lain")
    ProposalService.assign_supervisors(b, supervisor, co_supervisor)
    approve_sessions(a, supervisor, 8)
    approve_sessions(b, supervisor, 8)
    ExamService.submit_report(a, "https://files.example/laporan.pdf")
    make_student("Citra")

    queue = ExamService.reports_for_supervisor(supervisor)
    secondary = ExamService.reports_for_supervisor(co_supervisor)

    assert [(r.student_id, r.npm) for r in queue] == [(a, "2201001"), (b, "2201002")]
    assert {r.approved_sessions for r in queue} == {8}
    assert {r.quota for r in queue} == {8}
    assert {r.status for r in queue} == {ReportStatus.submitted}
    assert [(r.student_id, r.nama) for r in secondary] == [(b, "Budi")]
    assert ExamService.reports_for_supervisor(other) == []
    with pytest.raises(NotFoundError):
        ExamService.reports_for_supervisor(999)


def test_list_schedules_across_students(team, make_student, make_lecturer):
    a, b, supervisor = team
    examiner = make_lecturer("Dr. Tono")
    later = ExamService.schedule_exam(a, date(2026, 7, 2), time(9, 0), "R. 301", examiner)
    earlier = ExamService.schedule_exam(b, date(2026, 7, 1), time(13, 0), "R. 302", examiner)

    schedules = ExamService.list_schedules()

    assert [s.id for s in schedules] == [earlier.id, later.id]
    assert [s.student_id for s in schedules] == [b, a]
