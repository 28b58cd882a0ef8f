from datetime import datetime, timezone
from typing import List

from sqlalchemy.orm import Session

from acadtrack.models.grade import Grade
from acadtrack.models.grade_override import GradeOverride
from acadtrack.services.grade_records import GradeRecords


class OverrideLedger:
    """
    Append-only trail of faculty score corrections.

    ``original_score`` is the score the grade held immediately before each
    override (final if set, else auto), so a second override records the
    first override's score rather than the auto-graded one.
    """

    def __init__(self, db: Session, records: GradeRecords):
        self.db = db
        self.records = records

    def override(
        self, grade: Grade, new_score: float, reason: str, faculty_id: int
    ) -> GradeOverride:
        original = grade.final_score if grade.final_score is not None else grade.auto_score

        entry = GradeOverride(
            grade_id=grade.id,
            faculty_id=faculty_id,
            original_score=original,
            override_score=new_score,
            reason=reason,
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(entry)
        self.records.apply_override(grade, new_score, reason, faculty_id)
        return entry

    def list_for(self, grade_id: int) -> List[GradeOverride]:
        return (
            self.db.query(GradeOverride)
            .filter(GradeOverride.grade_id == grade_id)
            .order_by(GradeOverride.created_at.desc(), GradeOverride.id.desc())
            .all()
        )
