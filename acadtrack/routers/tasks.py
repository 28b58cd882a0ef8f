from fastapi import APIRouter, Depends, Response, status

from acadtrack.core.deps import get_grading_workflow
from acadtrack.core.permissions import require_faculty, require_student
from acadtrack.models.user import User
from acadtrack.schemas.penalty import LateStatusRead
from acadtrack.schemas.task_assignment import (
    SubmissionCreate,
    TaskAssignmentCreate,
    TaskAssignmentRead,
)
from acadtrack.services.grading_workflow import GradingWorkflow

router = APIRouter()


@router.post(
    "/{task_id}/assignments",
    response_model=TaskAssignmentRead,
    status_code=status.HTTP_201_CREATED,
)
def assign_task(
    task_id: int,
    payload: TaskAssignmentCreate,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    return workflow.assign_task(task_id, payload.student_id, faculty_id=faculty.id)


@router.post(
    "/{task_id}/submission",
    response_model=TaskAssignmentRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_task(
    task_id: int,
    payload: SubmissionCreate,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    me: User = Depends(require_student),
):
    return workflow.submit(task_id, me.id, payload.content)


@router.get("/{task_id}/late-status", response_model=LateStatusRead)
def late_status(
    task_id: int,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    me: User = Depends(require_student),
):
    late = workflow.late_status(task_id, me.id)
    return LateStatusRead(
        task_id=task_id,
        student_id=me.id,
        is_late=late.is_late,
        late_by_minutes=late.late_by_minutes,
        days_late=late.days_late,
        penalty_percent=late.percent,
    )


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    workflow.delete_task(task_id, faculty_id=faculty.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
