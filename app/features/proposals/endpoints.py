from typing import List

from fastapi import APIRouter, Depends

from app.common.deps import require_role
from .schemas import ProposalDecision, ProposalResponse
from .service import ProposalService

router = APIRouter(
    prefix="/coordinator",
    tags=["Coordinator"],
    dependencies=[Depends(require_role("koordinator", "kaprodi"))],
)


@router.get("/proposals", response_model=List[ProposalResponse])
def pending_proposals():
    return ProposalService.pending_proposals()


@router.get("/proposals/{student_id}", response_model=ProposalResponse)
def get_proposal(student_id: int):
    return ProposalService.get_proposal(student_id)


@router.patch("/proposals/{student_id}", response_model=ProposalResponse)
def decide_proposal(student_id: int, body: ProposalDecision):
    return ProposalService.set_proposal_status(student_id, body.status)
