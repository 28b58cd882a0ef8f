from sqlalchemy import select
from sqlalchemy.orm import Session

from acadtrack.models.grade import Grade
from acadtrack.models.grade_override import GradeOverride
from acadtrack.models.penalty import Penalty
from acadtrack.models.task import Task, TaskChecklistItem
from acadtrack.models.task_assignment import TaskAssignment


def delete_task(db: Session, task: Task) -> None:
    """Delete a task and everything hanging off it, children first.

    Runs in the caller's transaction; nothing is committed here.
    """
    grade_ids = select(Grade.id).where(Grade.task_id == task.id)

    db.query(GradeOverride).filter(GradeOverride.grade_id.in_(grade_ids)).delete(
        synchronize_session=False
    )
    db.query(Grade).filter(Grade.task_id == task.id).delete(synchronize_session=False)
    db.query(Penalty).filter(Penalty.task_id == task.id).delete(synchronize_session=False)
    db.query(TaskAssignment).filter(TaskAssignment.task_id == task.id).delete(
        synchronize_session=False
    )
    db.query(TaskChecklistItem).filter(TaskChecklistItem.task_id == task.id).delete(
        synchronize_session=False
    )
    db.delete(task)
    db.flush()
