from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class TaskAssignmentCreate(BaseModel):
    student_id: int


class SubmissionCreate(BaseModel):
    content: Optional[str] = None


class TaskAssignmentRead(BaseModel):
    id: int
    task_id: int
    student_id: int
    status: str  # "assigned" | "submitted"
    assigned_at: datetime
    submission_text: Optional[str] = None
    submitted_at: Optional[datetime] = None

    class Config:
        from_attributes = True
