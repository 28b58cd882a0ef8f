from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from acadtrack.core.errors import NotFoundError, PreconditionError
from acadtrack.models.task import Task
from acadtrack.models.task_assignment import SUBMITTED, TaskAssignment


class AssignmentSubmissions:
    """Looks up task assignments and moves them from assigned to submitted."""

    def __init__(self, db: Session):
        self.db = db

    def find(self, task_id: int, student_id: int) -> Optional[TaskAssignment]:
        return (
            self.db.query(TaskAssignment)
            .filter(
                TaskAssignment.task_id == task_id,
                TaskAssignment.student_id == student_id,
            )
            .first()
        )

    def require(self, task_id: int, student_id: int) -> TaskAssignment:
        assignment = self.find(task_id, student_id)
        if assignment is None:
            raise NotFoundError(
                f"task {task_id} is not assigned to student {student_id}"
            )
        return assignment

    def assign(self, task: Task, student_id: int) -> TaskAssignment:
        # (task, student) uniqueness is left to the storage constraint
        assignment = TaskAssignment(task_id=task.id, student_id=student_id)
        self.db.add(assignment)
        self.db.flush()
        return assignment

    def submit(
        self,
        task_id: int,
        student_id: int,
        text: Optional[str],
        submitted_at: datetime,
    ) -> TaskAssignment:
        assignment = self.require(task_id, student_id)
        if assignment.status == SUBMITTED:
            raise PreconditionError(
                f"task {task_id} was already submitted by student {student_id}"
            )

        assignment.submission_text = text
        assignment.submitted_at = submitted_at
        assignment.status = SUBMITTED
        self.db.flush()
        return assignment
