from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

Strictness = Literal["loose", "medium", "hard"]


class AutoGradeRequest(BaseModel):
    task_id: int
    student_id: int
    strictness: Optional[Strictness] = None


class GradeReviewRequest(BaseModel):
    score: float
    feedback: Optional[str] = None


class GradeOverrideRequest(BaseModel):
    new_score: float
    reason: str


class GradeRead(BaseModel):
    id: int
    task_id: int
    student_id: int
    subject_id: int
    auto_score: Optional[float] = None
    final_score: Optional[float] = None
    feedback: Optional[str] = None
    strictness: str
    status: str  # "pending" | "reviewed" | "approved" | "overridden"
    graded_by: Optional[int] = None
    graded_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GradeOverrideRead(BaseModel):
    id: int
    grade_id: int
    faculty_id: int
    original_score: Optional[float] = None
    override_score: float
    reason: str
    created_at: datetime

    class Config:
        from_attributes = True
