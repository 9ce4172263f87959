from datetime import date, time

import httpx
import pytest
from fastapi.testclient import TestClient

from app.features.exams.service import ExamService
from app.features.matching.service import MatchingService
from app.features.proposals.service import ProposalService
from app.main import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def anyio_backend():
    return "asyncio"


def test_missing_token_is_rejected(client):
    response = client.get("/students/me")
    assert response.status_code in (401, 403)


def test_invalid_token_is_rejected(client):
    response = client.get("/students/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_student_track_selection_and_group(client, make_student, auth_headers):
    a = make_student("Ayu", npm="2201001")
    b = make_student("Budi", npm="2201002")

    first = client.post("/students/me/track", json={"track": "proyek1", "partner_npm": "2201002"}, headers=auth_headers("mahasiswa", a))
    second = client.post("/students/me/track", json={"track": "proyek1", "partner_npm": "2201001"}, headers=auth_headers("mahasiswa", b))

    assert first.status_code == 200
    assert first.json()["matched"] is False
    assert second.status_code == 200
    body = second.json()
    assert body["matched"] is True
    group = client.get("/students/me/group", headers=auth_headers("mahasiswa", a)).json()
    assert group["id"] == body["kelompok_id"]
    assert [m["npm"] for m in group["members"]] == ["2201001", "2201002"]


def test_workflow_errors_render_error_response(client, make_student, auth_headers):
    a = make_student("Ayu", npm="2201001")

    response = client.post("/students/me/track", json={"track": "proyek1", "partner_npm": "2201001"}, headers=auth_headers("mahasiswa", a))

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "invalid_input"
    assert body["message"]
    assert "timestamp" in body


def test_lecturer_cannot_use_student_routes(client, make_lecturer, auth_headers):
    lecturer = make_lecturer("Dr. Sari")
    response = client.get("/students/me", headers=auth_headers("dosen", lecturer))
    assert response.status_code == 403


def test_kaprodi_manages_coordinators(client, make_lecturer, auth_headers):
    kaprodi = make_lecturer("Dr. Kepala", roles=("kaprodi",))
    sari = make_lecturer("Dr. Sari")
    tono = make_lecturer("Dr. Tono")

    ok = client.post("/kaprodi/coordinators", json={"lecturer_id": sari, "semester": 2}, headers=auth_headers("dosen", kaprodi))
    taken = client.post("/kaprodi/coordinators", json={"lecturer_id": tono, "semester": 2}, headers=auth_headers("dosen", kaprodi))
    forbidden = client.post("/kaprodi/coordinators", json={"lecturer_id": tono, "semester": 3}, headers=auth_headers("dosen", sari))

    assert ok.status_code == 200
    assert ok.json()["assigned_semester"] == 2
    assert taken.status_code == 422
    assert taken.json()["error_code"] == "precondition_failed"
    assert forbidden.status_code == 403


def test_coordinator_opens_one_period_per_semester(client, make_lecturer, auth_headers):
    coordinator = make_lecturer("Dr. Sari", roles=("koordinator",), semester=3)
    payload = {
        "name": "Proyek 2 Ganjil",
        "period_type": "proposal",
        "semester": 3,
        "start_date": "2026-09-01",
        "end_date": "2026-12-31",
    }

    first = client.post("/periods/", json=payload, headers=auth_headers("dosen", coordinator))
    second = client.post("/periods/", json=payload, headers=auth_headers("dosen", coordinator))
    active = client.get("/periods/active", headers=auth_headers("dosen", coordinator))

    assert first.status_code == 200
    assert first.json()["created_by"] == coordinator
    assert second.status_code == 422
    assert [p["id"] for p in active.json()] == [first.json()["id"]]


def test_stats_overview(client, make_student, make_lecturer, auth_headers):
    kaprodi = make_lecturer("Dr. Kepala", roles=("kaprodi",))
    make_student("Ayu")

    response = client.get("/stats/overview", headers=auth_headers("dosen", kaprodi))

    assert response.status_code == 200
    body = response.json()
    assert body["students"] == 1
    assert body["lecturers"] == 1
    assert body["proposals"] == {"none": 1}



def test_student_guidance_visible_to_supervisors_and_oversight_roles(client, make_student, make_lecturer, auth_headers):
    student = make_student("Ayu")
    supervisor = make_lecturer("Dr. Sari")
    kaprodi = make_lecturer("Dr. Kepala", roles=("kaprodi",))
    stranger = make_lecturer("Dr. Lain")
    MatchingService.select_track(student, "internship1")
    ProposalService.submit_proposal(student, "Magang", "https://files.example/p.pdf")
    ProposalService.assign_supervisors(student, supervisor)
    path = f"/lecturers/students/{student}/guidance"

    denied = client.get(path, headers=auth_headers("dosen", stranger))
    own = client.get(path, headers=auth_headers("dosen", supervisor))
    oversight = client.get(path, headers=auth_headers("dosen", kaprodi))

    assert denied.status_code == 403
    assert denied.json()["error_code"] == "forbidden"
    assert own.status_code == 200
    assert own.json()["quota"] == 8
    assert oversight.status_code == 200
    assert client.get("/lecturers/students/999/guidance", headers=auth_headers("dosen", kaprodi)).status_code == 404


def test_review_queues(client, make_student, make_lecturer, auth_headers, approve_sessions):
    student = make_student("Ayu")
    waiting = make_student("Budi")
    supervisor = make_lecturer("Dr. Sari")
    examiner = make_lecturer("Dr. Tono")
    coordinator = make_lecturer("Dr. Koor", roles=("koordinator",), semester=7)
    for sid in (student, waiting):
        MatchingService.select_track(sid, "internship1")
        ProposalService.submit_proposal(sid, "Magang", "https://files.example/p.pdf")
        ProposalService.assign_supervisors(sid, supervisor)
    ProposalService.set_proposal_status(student, "approved")
    approve_sessions(student, supervisor, 8)
    ExamService.submit_report(student, "https://files.example/laporan.pdf")
    ExamService.schedule_exam(student, date(2026, 7, 1), time(9, 30), "R. 301", examiner)

    reports = client.get("/lecturers/me/reports", headers=auth_headers("dosen", supervisor))
    proposals = client.get("/coordinator/proposals", headers=auth_headers("dosen", coordinator))
    exams = client.get("/coordinator/exams", headers=auth_headers("dosen", coordinator))

    assert reports.status_code == 200
    assert [(r["student_id"], r["approved_sessions"]) for r in reports.json()] == [(student, 8)]
    assert [p["student_id"] for p in proposals.json()] == [waiting]
    assert [(e["student_id"], e["room"]) for e in exams.json()] == [(student, "R. 301")]
    assert client.get("/coordinator/exams", headers=auth_headers("dosen", supervisor)).status_code == 403


@pytest.mark.anyio
async def test_healthz_reports_database():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/healthz")
    assert response.status_code == 200
    assert response.json()["components"]["database"]["status"] == "ok"
    assert response.headers["X-Request-Id"]
