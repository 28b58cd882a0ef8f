"""
Grading workflow: the single entry point the HTTP layer calls for grading,
overrides and penalties.

Each public action runs in one transaction. On success it commits; on any
failure it rolls back, so a rejected action never leaves a partial Grade or
an unexplained score change behind. Storage uniqueness violations surface as
``ConflictError``.
"""
import logging
import math
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional, Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from acadtrack.core.config import Settings
from acadtrack.core.errors import (
    AuthorizationError,
    ConflictError,
    GradingError,
    NotFoundError,
    ValidationError,
)
from acadtrack.models.grade import Grade
from acadtrack.models.grade_override import GradeOverride
from acadtrack.models.penalty import Penalty
from acadtrack.models.task import Task
from acadtrack.models.task_assignment import TaskAssignment
from acadtrack.services.assignments import AssignmentSubmissions
from acadtrack.services.auto_grader import AutoGrader
from acadtrack.services.grade_records import GradeRecords
from acadtrack.services.override_ledger import OverrideLedger
from acadtrack.services.ownership import SubjectOwnership
from acadtrack.services.penalties import PenaltyBook
from acadtrack.services.penalty_calculator import LatePenalty, LatePolicy, compute_late_penalty
from acadtrack.services.task_cleanup import delete_task

logger = logging.getLogger(__name__)

LATE_PENALTY_REASON = "late submission"


class Ownership(Protocol):
    def is_owned_by_faculty(self, subject_id: int, faculty_id: int) -> bool: ...


def _validate_score(score: Optional[float], field: str = "score") -> float:
    if score is None:
        raise ValidationError(f"{field} is required")
    if not math.isfinite(score) or score < 0 or score > 100:
        raise ValidationError(f"{field} must be a number between 0 and 100")
    return float(score)


def _validate_percent(percent: Optional[int]) -> int:
    if percent is None or percent < 0 or percent > 100:
        raise ValidationError("penalty percent must be between 0 and 100")
    return percent


class GradingWorkflow:
    def __init__(
        self,
        db: Session,
        *,
        ownership: Ownership,
        assignments: AssignmentSubmissions,
        records: GradeRecords,
        ledger: OverrideLedger,
        penalties: PenaltyBook,
        grader: AutoGrader,
        late_policy: LatePolicy,
        default_strictness: str = "medium",
    ):
        self.db = db
        self.ownership = ownership
        self.assignments = assignments
        self.records = records
        self.ledger = ledger
        self.penalties = penalties
        self.grader = grader
        self.late_policy = late_policy
        self.default_strictness = default_strictness

    @contextmanager
    def _transaction(self, action: str) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("%s rejected: uniqueness violation", action)
            raise ConflictError(f"{action} conflicts with an existing record") from exc
        except GradingError as exc:
            self.db.rollback()
            logger.warning("%s rejected (%s): %s", action, exc.kind.value, exc.message)
            raise
        except Exception:
            self.db.rollback()
            raise

    # -- lookups -----------------------------------------------------------

    def _require_task(self, task_id: int) -> Task:
        task = self.db.query(Task).filter(Task.id == task_id).first()
        if task is None:
            raise NotFoundError(f"task {task_id} not found")
        return task

    def _authorize(self, subject_id: int, faculty_id: Optional[int], what: str) -> None:
        if faculty_id is None:
            return
        if not self.ownership.is_owned_by_faculty(subject_id, faculty_id):
            raise AuthorizationError(f"faculty can only {what} for their own subjects")

    def get_grade(self, grade_id: int, *, faculty_id: Optional[int] = None) -> Grade:
        grade = self.records.require(grade_id)
        self._authorize(grade.subject_id, faculty_id, "view grades")
        return grade

    def list_grades(self, *, faculty_id: Optional[int] = None, **filters) -> List[Grade]:
        # faculty callers only ever see grades of subjects they own
        return self.records.list(faculty_id=faculty_id, **filters)

    # -- grading -----------------------------------------------------------

    def auto_grade(
        self,
        task_id: int,
        student_id: int,
        *,
        faculty_id: Optional[int] = None,
        strictness: Optional[str] = None,
    ) -> Grade:
        tier = strictness or self.default_strictness
        with self._transaction("auto-grade"):
            task = self._require_task(task_id)
            self._authorize(task.subject_id, faculty_id, "grade tasks")

            assignment = self.assignments.find(task_id, student_id)
            text = assignment.submission_text if assignment is not None else None
            result = self.grader.grade(text, tier)

            grade = self.records.create_from_auto_grade(
                task, assignment, result.score, result.feedback, tier
            )

        logger.info(
            "Auto-graded task %s for student %s with score %s (%s)",
            task_id, student_id, grade.auto_score, tier,
        )
        return grade

    def faculty_review(
        self, grade_id: int, score: float, feedback: Optional[str], faculty_id: int
    ) -> Grade:
        with self._transaction("review"):
            grade = self.records.require(grade_id)
            self._authorize(grade.subject_id, faculty_id, "review grades")
            score = _validate_score(score)
            self.records.faculty_review(grade, score, feedback, faculty_id)

        logger.info("Faculty %s reviewed grade %s with score %s", faculty_id, grade_id, score)
        return grade

    def approve(self, grade_id: int, faculty_id: int) -> Grade:
        with self._transaction("approve"):
            grade = self.records.require(grade_id)
            self._authorize(grade.subject_id, faculty_id, "approve grades")
            self.records.approve(grade, faculty_id)

        logger.info("Faculty %s approved grade %s", faculty_id, grade_id)
        return grade

    def override(
        self, grade_id: int, new_score: float, reason: Optional[str], faculty_id: int
    ) -> None:
        with self._transaction("override"):
            grade = self.records.require(grade_id)
            self._authorize(grade.subject_id, faculty_id, "override grades")
            new_score = _validate_score(new_score, "new score")
            if reason is None or not reason.strip():
                raise ValidationError("an override reason is required")
            entry = self.ledger.override(grade, new_score, reason.strip(), faculty_id)

        logger.info(
            "Faculty %s overrode grade %s from %s to %s: %s",
            faculty_id, grade_id, entry.original_score, new_score, entry.reason,
        )

    def list_overrides(
        self, grade_id: int, *, faculty_id: Optional[int] = None
    ) -> List[GradeOverride]:
        self.get_grade(grade_id, faculty_id=faculty_id)
        return self.ledger.list_for(grade_id)

    # -- penalties ---------------------------------------------------------

    def record_penalty(
        self,
        task_id: int,
        student_id: int,
        percent: int,
        reason: Optional[str],
        *,
        faculty_id: Optional[int] = None,
    ) -> Penalty:
        with self._transaction("record penalty"):
            task = self._require_task(task_id)
            self._authorize(task.subject_id, faculty_id, "record penalties")
            percent = _validate_percent(percent)
            self.assignments.require(task_id, student_id)
            penalty = self.penalties.record(
                task_id, student_id, percent, reason, datetime.now(timezone.utc)
            )

        logger.info(
            "Recorded %s%% penalty on task %s for student %s: %s",
            percent, task_id, student_id, reason,
        )
        return penalty

    def late_status(
        self, task_id: int, student_id: int, as_of: Optional[datetime] = None
    ) -> LatePenalty:
        task = self._require_task(task_id)
        assignment = self.assignments.require(task_id, student_id)
        return self._late_penalty(task, assignment, as_of)

    def _late_penalty(
        self, task: Task, assignment: TaskAssignment, as_of: Optional[datetime]
    ) -> LatePenalty:
        return compute_late_penalty(
            task.due_at, assignment.submitted_at, policy=self.late_policy, as_of=as_of
        )

    def assess_late_penalty(
        self,
        task_id: int,
        student_id: int,
        *,
        faculty_id: Optional[int] = None,
        as_of: Optional[datetime] = None,
    ) -> Optional[Penalty]:
        """Record a lateness penalty when the calculator says one is due.

        A submission is late at most once: if a lateness penalty was already
        recorded for the pair, that row is returned and nothing is written.
        """
        with self._transaction("assess late penalty"):
            task = self._require_task(task_id)
            self._authorize(task.subject_id, faculty_id, "record penalties")
            assignment = self.assignments.require(task_id, student_id)
            existing = self.penalties.find_by_reason_prefix(
                task_id, student_id, LATE_PENALTY_REASON
            )
            if existing is not None:
                return existing
            late = self._late_penalty(task, assignment, as_of)
            if not late.is_late or late.percent <= 0:
                return None
            reason = f"{LATE_PENALTY_REASON} ({late.days_late} day(s))"
            penalty = self.penalties.record(
                task_id, student_id, late.percent, reason, datetime.now(timezone.utc)
            )

        logger.info(
            "Late penalty %s%% on task %s for student %s (%s min late)",
            late.percent, task_id, student_id, late.late_by_minutes,
        )
        return penalty

    def list_penalties(
        self, task_id: int, student_id: int, *, faculty_id: Optional[int] = None
    ) -> List[Penalty]:
        task = self._require_task(task_id)
        self._authorize(task.subject_id, faculty_id, "view penalties")
        return self.penalties.list_for(task_id, student_id)

    def _require_penalty(self, penalty_id: int, faculty_id: Optional[int], what: str) -> Penalty:
        penalty = self.penalties.get(penalty_id)
        if penalty is None:
            raise NotFoundError(f"penalty {penalty_id} not found")
        task = self._require_task(penalty.task_id)
        self._authorize(task.subject_id, faculty_id, what)
        return penalty

    def get_penalty(self, penalty_id: int, *, faculty_id: Optional[int] = None) -> Penalty:
        return self._require_penalty(penalty_id, faculty_id, "view penalties")

    def update_penalty(
        self,
        penalty_id: int,
        percent: int,
        reason: Optional[str],
        *,
        faculty_id: Optional[int] = None,
    ) -> Penalty:
        with self._transaction("update penalty"):
            penalty = self._require_penalty(penalty_id, faculty_id, "update penalties")
            percent = _validate_percent(percent)
            self.penalties.update(penalty, percent, reason)

        logger.info("Updated penalty %s to %s%%: %s", penalty_id, percent, reason)
        return penalty

    def delete_penalty(self, penalty_id: int, *, faculty_id: Optional[int] = None) -> None:
        with self._transaction("delete penalty"):
            penalty = self._require_penalty(penalty_id, faculty_id, "delete penalties")
            self.penalties.delete(penalty)

        logger.info("Deleted penalty %s", penalty_id)

    # -- assignment collaborator ------------------------------------------

    def assign_task(self, task_id: int, student_id: int, *, faculty_id: Optional[int] = None) -> TaskAssignment:
        with self._transaction("assign task"):
            task = self._require_task(task_id)
            self._authorize(task.subject_id, faculty_id, "assign tasks")
            assignment = self.assignments.assign(task, student_id)

        logger.info("Assigned task %s to student %s", task_id, student_id)
        return assignment

    def submit(
        self,
        task_id: int,
        student_id: int,
        text: Optional[str],
        submitted_at: Optional[datetime] = None,
    ) -> TaskAssignment:
        when = submitted_at or datetime.now(timezone.utc)
        with self._transaction("submit"):
            self._require_task(task_id)
            assignment = self.assignments.submit(task_id, student_id, text, when)

        logger.info("Student %s submitted task %s", student_id, task_id)
        return assignment

    def delete_task(self, task_id: int, *, faculty_id: Optional[int] = None) -> None:
        with self._transaction("delete task"):
            task = self._require_task(task_id)
            self._authorize(task.subject_id, faculty_id, "delete tasks")
            delete_task(self.db, task)

        logger.info("Deleted task %s", task_id)


def build_grading_workflow(db: Session, settings: Settings) -> GradingWorkflow:
    records = GradeRecords(db)
    return GradingWorkflow(
        db,
        ownership=SubjectOwnership(db),
        assignments=AssignmentSubmissions(db),
        records=records,
        ledger=OverrideLedger(db, records),
        penalties=PenaltyBook(db),
        grader=AutoGrader(),
        late_policy=LatePolicy(
            grace_period_minutes=settings.GRACE_PERIOD_MINUTES,
            percent_per_day=settings.LATE_PENALTY_PER_DAY_PERCENT,
            max_percent=settings.LATE_PENALTY_MAX_PERCENT,
        ),
        default_strictness=settings.DEFAULT_STRICTNESS,
    )
