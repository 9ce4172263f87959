from datetime import date, datetime
from pydantic import BaseModel, Field
from typing import Optional, List

from .models import SessionStatus


class GuidanceSessionCreate(BaseModel):
    week_number: int = Field(..., examples=[1])
    topic: str = Field(..., max_length=500)
    supervisor_id: Optional[int] = Field(None, description="Defaults to the primary supervisor")
    session_date: Optional[date] = None
    notes: Optional[str] = None


class GuidanceDecision(BaseModel):
    status: SessionStatus


class GuidanceSessionResponse(BaseModel):
    id: int
    student_id: int
    supervisor_id: int
    week_number: int
    session_date: date
    topic: str
    notes: Optional[str] = None
    status: SessionStatus
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class GuidanceProgress(BaseModel):
    student_id: int
    approved: int
    total: int
    quota: int
    sessions: List[GuidanceSessionResponse]
