from pydantic import BaseModel, Field
from typing import Optional

from app.features.students.tracks import Track


class TrackSelectionRequest(BaseModel):
    track: Track
    partner_npm: Optional[str] = Field(None, examples=["2201001"])


class MatchResult(BaseModel):
    student_id: int
    npm: str
    track: Track
    matched: bool
    solo: bool = False
    kelompok_id: Optional[int] = None
    kelompok_nama: Optional[str] = None
    desired_partner_npm: Optional[str] = None
    message: str
