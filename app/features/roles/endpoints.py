"""Head-of-programme endpoints: role ledger, people and supervisor assignment."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends

from app.common.deps import require_kaprodi
from app.common.schemas import StatusResponse
from app.features.lecturers.schemas import LecturerCreate, LecturerResponse
from app.features.lecturers.service import LecturerService
from app.features.proposals.schemas import ProposalResponse, SupervisorAssignment
from app.features.proposals.service import ProposalService
from app.features.students.schemas import StudentCreate, StudentProfile
from app.features.students.service import StudentService
from .schemas import CoordinatorAssignRequest, LecturerRolesResponse, RoleAssignmentResponse, RoleGrantRequest
from .service import RoleService

router = APIRouter(prefix="/kaprodi", tags=["Kaprodi"], dependencies=[Depends(require_kaprodi())])


@router.post("/coordinators", response_model=RoleAssignmentResponse)
def assign_coordinator(body: CoordinatorAssignRequest):
    return RoleService.assign_coordinator(body.lecturer_id, body.semester)


@router.get("/lecturers", response_model=List[LecturerResponse])
def list_lecturers():
    return LecturerService.list_lecturers()


@router.post("/lecturers", response_model=LecturerResponse)
def register_lecturer(body: LecturerCreate):
    return LecturerService.register_lecturer(body)


@router.get("/lecturers/{lecturer_id}/roles", response_model=LecturerRolesResponse)
def lecturer_roles(lecturer_id: int):
    return RoleService.list_roles(lecturer_id)


@router.post("/lecturers/{lecturer_id}/roles", response_model=RoleAssignmentResponse)
def grant_role(lecturer_id: int, body: RoleGrantRequest):
    return RoleService.grant_role(lecturer_id, body.role)


@router.delete("/lecturers/{lecturer_id}/roles/{role}", response_model=StatusResponse)
def revoke_role(lecturer_id: int, role: str):
    removed = RoleService.revoke_role(lecturer_id, role)
    return StatusResponse(
        status="ok" if removed else "noop",
        message=f"Role {role} {'revoked' if removed else 'was not held'}",
        data={"lecturer_id": lecturer_id, "role": role},
    )


@router.get("/students", response_model=List[StudentProfile])
def list_students(track: Optional[str] = None):
    return StudentService.list_students(track)


@router.post("/students", response_model=StudentProfile)
def register_student(body: StudentCreate):
    return StudentService.register_student(body)


@router.put("/students/{student_id}/supervisors", response_model=ProposalResponse)
def assign_supervisors(student_id: int, body: SupervisorAssignment):
    return ProposalService.assign_supervisors(student_id, body.supervisor_id, body.secondary_supervisor_id)
