from datetime import date, datetime
from pydantic import BaseModel, Field
from typing import Optional, Dict

from .models import PeriodStatus


class PeriodCreate(BaseModel):
    name: str = Field(..., max_length=255)
    period_type: str = Field(..., max_length=50, examples=["proposal", "bimbingan", "sidang"])
    semester: int = Field(..., examples=[2])
    start_date: date
    end_date: date
    description: Optional[str] = None


class PeriodResponse(BaseModel):
    id: int
    name: str
    period_type: str
    semester: int
    start_date: date
    end_date: date
    status: PeriodStatus
    description: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class PeriodCompletion(BaseModel):
    period: PeriodResponse
    removed: Dict[str, int]
    coordinator_released: bool
