from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from acadtrack.core.errors import NotFoundError, PreconditionError
from acadtrack.models.grade import APPROVED, OVERRIDDEN, PENDING, REVIEWED, Grade
from acadtrack.models.subject import Subject
from acadtrack.models.task import Task
from acadtrack.models.task_assignment import SUBMITTED, TaskAssignment

# pending -> reviewed -> approved; overridden is reachable from all of them
# (see OverrideLedger) and nothing leaves it.
REVIEWABLE = (PENDING, REVIEWED)
APPROVABLE = (REVIEWED,)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class GradeRecords:
    """
    Owns the Grade lifecycle. Never commits: every call runs inside the
    caller's transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, grade_id: int) -> Optional[Grade]:
        return self.db.query(Grade).filter(Grade.id == grade_id).first()

    def require(self, grade_id: int) -> Grade:
        grade = self.get(grade_id)
        if grade is None:
            raise NotFoundError(f"grade {grade_id} not found")
        return grade

    def find_for_pair(self, task_id: int, student_id: int) -> Optional[Grade]:
        return (
            self.db.query(Grade)
            .filter(Grade.task_id == task_id, Grade.student_id == student_id)
            .first()
        )

    def list(
        self,
        *,
        task_id: Optional[int] = None,
        student_id: Optional[int] = None,
        subject_id: Optional[int] = None,
        status: Optional[str] = None,
        faculty_id: Optional[int] = None,
    ) -> List[Grade]:
        q = self.db.query(Grade)
        if task_id is not None:
            q = q.filter(Grade.task_id == task_id)
        if student_id is not None:
            q = q.filter(Grade.student_id == student_id)
        if subject_id is not None:
            q = q.filter(Grade.subject_id == subject_id)
        if status is not None:
            q = q.filter(Grade.status == status)
        if faculty_id is not None:
            owned = select(Subject.id).where(Subject.faculty_id == faculty_id)
            q = q.filter(Grade.subject_id.in_(owned))
        return q.order_by(Grade.id.asc()).all()

    def create_from_auto_grade(
        self,
        task: Task,
        assignment: Optional[TaskAssignment],
        score: float,
        feedback: str,
        strictness: str,
    ) -> Grade:
        if assignment is None or assignment.status != SUBMITTED:
            raise PreconditionError("task must be submitted before grading")

        if self.find_for_pair(task.id, assignment.student_id) is not None:
            raise PreconditionError(
                f"grade already exists for task {task.id} and student {assignment.student_id}"
            )

        now = _now()
        grade = Grade(
            task_id=task.id,
            student_id=assignment.student_id,
            subject_id=task.subject_id,
            auto_score=score,
            feedback=feedback,
            strictness=strictness,
            status=PENDING,
            graded_at=now,
        )
        self.db.add(grade)
        # a concurrent insert for the same pair fails here on the unique constraint
        self.db.flush()
        return grade

    def faculty_review(
        self, grade: Grade, score: float, feedback: Optional[str], faculty_id: int
    ) -> Grade:
        if grade.status not in REVIEWABLE:
            raise PreconditionError(
                f"grade {grade.id} is {grade.status} and can no longer be reviewed"
            )

        grade.final_score = score
        # a review without feedback keeps what the grade already says
        if feedback is not None:
            grade.feedback = feedback
        grade.status = REVIEWED
        grade.graded_by = faculty_id
        grade.graded_at = _now()
        self.db.flush()
        return grade

    def approve(self, grade: Grade, faculty_id: int) -> Grade:
        if grade.status not in APPROVABLE:
            raise PreconditionError(
                f"grade {grade.id} is {grade.status}; only reviewed grades can be approved"
            )

        grade.status = APPROVED
        grade.graded_by = faculty_id
        self.db.flush()
        return grade

    def apply_override(
        self, grade: Grade, new_score: float, reason: str, faculty_id: int
    ) -> Grade:
        note = f"[OVERRIDDEN: {reason}]"
        grade.final_score = new_score
        grade.feedback = f"{grade.feedback} {note}" if grade.feedback else note
        grade.status = OVERRIDDEN
        grade.graded_by = faculty_id
        grade.graded_at = _now()
        self.db.flush()
        return grade
