from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional

from .models import ProposalStatus
from .tracks import Track


# -------------------
# Profile
# -------------------
class StudentCreate(BaseModel):
    npm: str = Field(..., max_length=32)
    nama: str = Field(..., max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    angkatan: Optional[int] = None


class StudentProfile(BaseModel):
    id: int
    npm: str
    nama: str
    email: Optional[str] = None
    angkatan: Optional[int] = None
    is_active: bool
    track: Optional[Track] = None
    desired_partner_npm: Optional[str] = None
    group_id: Optional[int] = None
    proposal_status: ProposalStatus
    supervisor_id: Optional[int] = None
    secondary_supervisor_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


# -------------------
# Group view
# -------------------
class GroupMember(BaseModel):
    id: int
    npm: str
    nama: str

    model_config = {
        "from_attributes": True
    }
