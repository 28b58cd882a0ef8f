from typing import Optional

from fastapi import APIRouter, Depends, status

from acadtrack.core.deps import get_grading_workflow
from acadtrack.core.permissions import require_faculty
from acadtrack.models.user import User
from acadtrack.schemas.grade import (
    AutoGradeRequest,
    GradeOverrideRead,
    GradeOverrideRequest,
    GradeRead,
    GradeReviewRequest,
)
from acadtrack.services.grading_workflow import GradingWorkflow

router = APIRouter()


@router.get("", response_model=list[GradeRead])
def list_grades(
    task_id: Optional[int] = None,
    student_id: Optional[int] = None,
    subject_id: Optional[int] = None,
    status: Optional[str] = None,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    return workflow.list_grades(
        task_id=task_id,
        student_id=student_id,
        subject_id=subject_id,
        status=status,
        faculty_id=faculty.id,
    )


@router.post(
    "/auto-grade",
    response_model=GradeRead,
    status_code=status.HTTP_201_CREATED,
)
def auto_grade(
    payload: AutoGradeRequest,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    return workflow.auto_grade(
        payload.task_id,
        payload.student_id,
        faculty_id=faculty.id,
        strictness=payload.strictness,
    )


@router.get("/{grade_id}", response_model=GradeRead)
def get_grade(
    grade_id: int,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    return workflow.get_grade(grade_id, faculty_id=faculty.id)


@router.put("/{grade_id}/review", response_model=GradeRead)
def review_grade(
    grade_id: int,
    payload: GradeReviewRequest,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    return workflow.faculty_review(grade_id, payload.score, payload.feedback, faculty.id)


@router.post("/{grade_id}/approve", response_model=GradeRead)
def approve_grade(
    grade_id: int,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    return workflow.approve(grade_id, faculty.id)


@router.post("/{grade_id}/override")
def override_grade(
    grade_id: int,
    payload: GradeOverrideRequest,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    workflow.override(grade_id, payload.new_score, payload.reason, faculty.id)
    return {"message": "Grade overridden successfully"}


@router.get("/{grade_id}/overrides", response_model=list[GradeOverrideRead])
def list_overrides(
    grade_id: int,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    return workflow.list_overrides(grade_id, faculty_id=faculty.id)
