from pydantic import BaseModel, Field
from typing import Optional, List

from app.features.students.models import ProposalStatus


class ProposalSubmit(BaseModel):
    title: str = Field(..., max_length=500)
    file_ref: str = Field(..., max_length=1024, description="URL of the already uploaded proposal file")
    proposed_supervisor_id: Optional[int] = None


class ProposalDecision(BaseModel):
    status: ProposalStatus


class SupervisorAssignment(BaseModel):
    supervisor_id: int
    secondary_supervisor_id: Optional[int] = None


class ProposalResponse(BaseModel):
    student_id: int
    npm: str
    nama: str
    group_id: Optional[int] = None
    proposal_title: Optional[str] = None
    proposal_file_ref: Optional[str] = None
    proposal_status: ProposalStatus
    proposed_supervisor_id: Optional[int] = None
    supervisor_id: Optional[int] = None
    secondary_supervisor_id: Optional[int] = None

    model_config = {
        "from_attributes": True
    }

    @classmethod
    def from_student(cls, student) -> "ProposalResponse":
        return cls(
            student_id=student.id,
            npm=student.npm,
            nama=student.nama,
            group_id=student.group_id,
            proposal_title=student.proposal_title,
            proposal_file_ref=student.proposal_file_ref,
            proposal_status=student.proposal_status,
            proposed_supervisor_id=student.proposed_supervisor_id,
            supervisor_id=student.supervisor_id,
            secondary_supervisor_id=student.secondary_supervisor_id,
        )


class ProposalSubmitResult(BaseModel):
    proposal: ProposalResponse
    member_ids: List[int]
