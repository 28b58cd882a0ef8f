from fastapi import APIRouter, Depends, Response, status

from acadtrack.core.deps import get_grading_workflow
from acadtrack.core.permissions import require_faculty
from acadtrack.models.user import User
from acadtrack.schemas.penalty import LatePenaltyAssess, PenaltyCreate, PenaltyRead, PenaltyUpdate
from acadtrack.services.grading_workflow import GradingWorkflow

router = APIRouter()


@router.post("", response_model=PenaltyRead, status_code=status.HTTP_201_CREATED)
def record_penalty(
    payload: PenaltyCreate,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    return workflow.record_penalty(
        payload.task_id,
        payload.student_id,
        payload.percent,
        payload.reason,
        faculty_id=faculty.id,
    )


@router.post("/assess-late", response_model=PenaltyRead | None)
def assess_late_penalty(
    payload: LatePenaltyAssess,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    # null when the submission was on time or within grace;
    # the already recorded row when lateness was assessed before
    return workflow.assess_late_penalty(
        payload.task_id, payload.student_id, faculty_id=faculty.id
    )


@router.get("", response_model=list[PenaltyRead])
def list_penalties(
    task_id: int,
    student_id: int,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    return workflow.list_penalties(task_id, student_id, faculty_id=faculty.id)


@router.get("/{penalty_id}", response_model=PenaltyRead)
def get_penalty(
    penalty_id: int,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    return workflow.get_penalty(penalty_id, faculty_id=faculty.id)


@router.put("/{penalty_id}", response_model=PenaltyRead)
def update_penalty(
    penalty_id: int,
    payload: PenaltyUpdate,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    return workflow.update_penalty(
        penalty_id, payload.percent, payload.reason, faculty_id=faculty.id
    )


@router.delete("/{penalty_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_penalty(
    penalty_id: int,
    workflow: GradingWorkflow = Depends(get_grading_workflow),
    faculty: User = Depends(require_faculty),
):
    workflow.delete_penalty(penalty_id, faculty_id=faculty.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
