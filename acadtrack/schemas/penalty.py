from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class PenaltyCreate(BaseModel):
    task_id: int
    student_id: int
    percent: int
    reason: Optional[str] = None


class PenaltyUpdate(BaseModel):
    percent: int
    reason: Optional[str] = None


class LatePenaltyAssess(BaseModel):
    task_id: int
    student_id: int


class PenaltyRead(BaseModel):
    id: int
    task_id: int
    student_id: int
    penalty_percent: int
    reason: Optional[str] = None
    applied_at: datetime

    class Config:
        from_attributes = True


class LateStatusRead(BaseModel):
    task_id: int
    student_id: int
    is_late: bool
    late_by_minutes: Optional[int] = None
    days_late: int
    penalty_percent: int
