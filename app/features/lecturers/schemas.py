from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional, List


class LecturerCreate(BaseModel):
    nidn: str = Field(..., max_length=32)
    nama: str = Field(..., max_length=255)
    email: Optional[str] = Field(None, max_length=255)


class LecturerResponse(BaseModel):
    id: int
    nidn: str
    nama: str
    email: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class LecturerProfile(LecturerResponse):
    roles: List[str] = []
