import pytest

from app.common.errors import ConflictError, InvalidInputError, NotFoundError
from app.features.groups.service import GroupService
from app.features.lecturers.service import LecturerService
from app.features.matching.service import MatchingService
from app.features.students.schemas import StudentCreate
from app.features.students.service import StudentService


def test_group_views(make_student):
    a = make_student("Ayu", npm="2201001")
    b = make_student("Budi", npm="2201002")
    c = make_student("Citra", npm="2201003")
    MatchingService.select_track(a, "proyek1", "2201002")
    matched = MatchingService.select_track(b, "proyek1", "2201001")
    MatchingService.select_track(c, "proyek1")

    group = GroupService.get_group(matched.kelompok_id)

    assert group.name == "Ayu & Budi"
    assert [m.id for m in group.members] == sorted([a, b])
    assert GroupService.group_of(a).id == group.id
    assert GroupService.group_of(c) is None
    assert [g.id for g in GroupService.list_groups("proyek1")] == [group.id]
    assert GroupService.list_groups("proyek2") == []
    assert [s.id for s in GroupService.waiting_students()] == [c]


def test_group_lookup_errors():
    with pytest.raises(NotFoundError):
        GroupService.get_group(404)
    with pytest.raises(InvalidInputError):
        GroupService.list_groups("skripsi")


def test_register_student_rejects_duplicate_npm():
    created = StudentService.register_student(StudentCreate(npm="2201001", nama="Ayu"))

    assert created.proposal_status.value == "none"
    assert created.track is None
    with pytest.raises(ConflictError):
        StudentService.register_student(StudentCreate(npm="2201001", nama="Ayu Lagi"))
    with pytest.raises(InvalidInputError):
        StudentService.register_student(StudentCreate(npm=" ", nama="Kosong"))


def test_student_and_lecturer_listings(make_student, make_lecturer):
    a = make_student("Ayu", npm="2201002")
    b = make_student("Budi", npm="2201001")
    MatchingService.select_track(a, "internship1")
    sari = make_lecturer("Dr. Sari")
    agus = make_lecturer("Dr. Agus")

    assert [s.id for s in StudentService.list_students()] == [b, a]
    assert [s.id for s in StudentService.list_students("internship1")] == [a]
    assert [l.id for l in LecturerService.list_lecturers()] == [agus, sari]
    with pytest.raises(InvalidInputError):
        StudentService.list_students("skripsi")
