from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from acadtrack.models.penalty import Penalty


class PenaltyBook:
    def __init__(self, db: Session):
        self.db = db

    def get(self, penalty_id: int) -> Optional[Penalty]:
        return self.db.query(Penalty).filter(Penalty.id == penalty_id).first()

    def record(
        self,
        task_id: int,
        student_id: int,
        percent: int,
        reason: Optional[str],
        applied_at: datetime,
    ) -> Penalty:
        penalty = Penalty(
            task_id=task_id,
            student_id=student_id,
            penalty_percent=percent,
            reason=reason,
            applied_at=applied_at,
        )
        self.db.add(penalty)
        self.db.flush()
        return penalty

    def update(self, penalty: Penalty, percent: int, reason: Optional[str]) -> Penalty:
        penalty.penalty_percent = percent
        penalty.reason = reason
        self.db.flush()
        return penalty

    def delete(self, penalty: Penalty) -> None:
        self.db.delete(penalty)
        self.db.flush()

    def find_by_reason_prefix(
        self, task_id: int, student_id: int, prefix: str
    ) -> Optional[Penalty]:
        return (
            self.db.query(Penalty)
            .filter(
                Penalty.task_id == task_id,
                Penalty.student_id == student_id,
                Penalty.reason.startswith(prefix, autoescape=True),
            )
            .order_by(Penalty.id.asc())
            .first()
        )

    def list_for(self, task_id: int, student_id: int) -> List[Penalty]:
        return (
            self.db.query(Penalty)
            .filter(Penalty.task_id == task_id, Penalty.student_id == student_id)
            .order_by(Penalty.applied_at.asc(), Penalty.id.asc())
            .all()
        )
