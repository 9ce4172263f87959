from pydantic import BaseModel, Field
from typing import Optional, List

from .models import RoleName


class RoleAssignmentResponse(BaseModel):
    id: int
    lecturer_id: int
    role: RoleName
    assigned_semester: Optional[int] = None

    model_config = {
        "from_attributes": True
    }


class CoordinatorAssignRequest(BaseModel):
    lecturer_id: int
    semester: int = Field(..., examples=[2])


class RoleGrantRequest(BaseModel):
    role: RoleName


class LecturerRolesResponse(BaseModel):
    lecturer_id: int
    roles: List[RoleAssignmentResponse]
