import threading

import pytest
from sqlalchemy import func, select

from app.common.errors import ConflictError, InvalidInputError, NotFoundError, PreconditionFailedError
from app.db.session import SessionLocal
from app.features.groups.models import Group
from app.features.matching.service import MatchingService
from app.features.students.models import Student


def _student(student_id):
    with SessionLocal() as db:
        return db.get(Student, student_id)


def _group_count():
    with SessionLocal() as db:
        return db.scalar(select(func.count(Group.id)))


def test_internship_is_solo_and_ignores_partner(make_student):
    a = make_student("Ayu")
    make_student("Budi", npm="2201099")

    result = MatchingService.select_track(a, "internship1", "2201099")

    assert result.solo is True
    assert result.matched is False
    assert result.kelompok_id is None
    stored = _student(a)
    assert stored.track.value == "internship1"
    assert stored.desired_partner_npm is None
    assert stored.group_id is None


def test_one_sided_choice_waits(make_student):
    a = make_student("Ayu", npm="2201001")
    make_student("Budi", npm="2201002")

    result = MatchingService.select_track(a, "proyek1", "2201002")

    assert result.matched is False
    assert result.desired_partner_npm == "2201002"
    assert _student(a).group_id is None
    assert _group_count() == 0


def test_team_track_without_partner_is_saved(make_student):
    a = make_student("Ayu")
    result = MatchingService.select_track(a, "proyek2")
    assert result.matched is False
    assert result.solo is False
    assert _student(a).track.value == "proyek2"


def test_mutual_choice_creates_one_group(make_student):
    a = make_student("Ayu", npm="2201001")
    b = make_student("Budi", npm="2201002")

    first = MatchingService.select_track(a, "proyek1", "2201002")
    second = MatchingService.select_track(b, "proyek1", "2201001")

    assert first.matched is False
    assert second.matched is True
    assert second.kelompok_nama == "Ayu & Budi"
    sa, sb = _student(a), _student(b)
    assert sa.group_id == sb.group_id == second.kelompok_id
    assert sa.desired_partner_npm is None and sb.desired_partner_npm is None
    assert _group_count() == 1


def test_different_tracks_do_not_match(make_student):
    a = make_student("Ayu", npm="2201001")
    b = make_student("Budi", npm="2201002")

    MatchingService.select_track(a, "proyek1", "2201002")
    result = MatchingService.select_track(b, "proyek2", "2201001")

    assert result.matched is False
    assert _group_count() == 0


def test_reselecting_same_track_is_idempotent(make_student):
    a = make_student("Ayu", npm="2201001")
    b = make_student("Budi", npm="2201002")
    MatchingService.select_track(a, "proyek1", "2201002")
    matched = MatchingService.select_track(b, "proyek1", "2201001")

    again = MatchingService.select_track(a, "proyek1", "2201002")

    assert again.matched is True
    assert again.kelompok_id == matched.kelompok_id
    assert _group_count() == 1


def test_grouped_student_cannot_change_track(make_student):
    a = make_student("Ayu", npm="2201001")
    b = make_student("Budi", npm="2201002")
    MatchingService.select_track(a, "proyek1", "2201002")
    MatchingService.select_track(b, "proyek1", "2201001")

    with pytest.raises(PreconditionFailedError):
        MatchingService.select_track(a, "proyek2")
    assert _student(a).track.value == "proyek1"


def test_choosing_an_already_grouped_partner_conflicts(make_student):
    a = make_student("Ayu", npm="2201001")
    b = make_student("Budi", npm="2201002")
    c = make_student("Citra", npm="2201003")
    MatchingService.select_track(a, "proyek1", "2201002")
    MatchingService.select_track(b, "proyek1", "2201001")

    with pytest.raises(ConflictError) as excinfo:
        MatchingService.select_track(c, "proyek1", "2201001")

    assert "Ayu" in excinfo.value.message
    # nothing written for the caller
    assert _student(c).track is None


def test_partner_validation(make_student):
    a = make_student("Ayu", npm="2201001")

    with pytest.raises(InvalidInputError):
        MatchingService.select_track(a, "proyek1", "2201001")
    with pytest.raises(NotFoundError):
        MatchingService.select_track(a, "proyek1", "9999999")
    with pytest.raises(InvalidInputError):
        MatchingService.select_track(a, "proyek9")
    with pytest.raises(NotFoundError):
        MatchingService.select_track(12345, "proyek1")


def test_concurrent_reciprocal_choices_create_exactly_one_group(make_student):
    pairs = []
    for i in range(4):
        a = make_student(f"A{i}", npm=f"23000{i}1")
        b = make_student(f"B{i}", npm=f"23000{i}2")
        pairs.append(((a, f"23000{i}2"), (b, f"23000{i}1")))

    barrier = threading.Barrier(len(pairs) * 2)
    errors = []

    def choose(student_id, partner_npm):
        barrier.wait()
        try:
            MatchingService.select_track(student_id, "proyek3", partner_npm)
        except Exception as exc:  # noqa: BLE001
            errors.append(exc)

    threads = [
        threading.Thread(target=choose, args=side)
        for pair in pairs
        for side in pair
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)

    assert errors == []
    assert _group_count() == len(pairs)
    for (a, _), (b, _) in pairs:
        sa, sb = _student(a), _student(b)
        assert sa.group_id is not None
        assert sa.group_id == sb.group_id
