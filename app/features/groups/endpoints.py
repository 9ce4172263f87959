from typing import List, Optional

from fastapi import APIRouter, Depends

from app.common.deps import require_role
from .schemas import GroupResponse, WaitingStudent
from .service import GroupService

router = APIRouter(
    prefix="/groups",
    tags=["Groups"],
    dependencies=[Depends(require_role("koordinator", "kaprodi"))],
)


@router.get("/", response_model=List[GroupResponse])
def list_groups(track: Optional[str] = None):
    return GroupService.list_groups(track)


@router.get("/waiting", response_model=List[WaitingStudent])
def waiting_students(track: Optional[str] = None):
    """Team-track students still waiting for their partner to reciprocate."""
    return GroupService.waiting_students(track)


@router.get("/{group_id}", response_model=GroupResponse)
def get_group(group_id: int):
    return GroupService.get_group(group_id)
