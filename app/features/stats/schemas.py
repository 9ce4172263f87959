from pydantic import BaseModel
from typing import Dict


class OverviewOut(BaseModel):
    students: int
    lecturers: int
    groups: int
    students_per_track: Dict[str, int]
    proposals: Dict[str, int]
    guidance_sessions: Dict[str, int]
    reports: Dict[str, int]
    active_periods: int
