from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List

from app.features.students.schemas import GroupMember
from app.features.students.tracks import Track


class GroupResponse(BaseModel):
    id: int
    name: str
    track: Track
    created_at: Optional[datetime] = None
    members: List[GroupMember]

    model_config = {
        "from_attributes": True
    }


class WaitingStudent(BaseModel):
    id: int
    npm: str
    nama: str
    track: Track
    desired_partner_npm: Optional[str] = None

    model_config = {
        "from_attributes": True
    }
