from sqlalchemy.orm import Session

from acadtrack.models.subject import Subject


class SubjectOwnership:
    def __init__(self, db: Session):
        self.db = db

    def is_owned_by_faculty(self, subject_id: int, faculty_id: int) -> bool:
        return (
            self.db.query(Subject.id)
            .filter(Subject.id == subject_id, Subject.faculty_id == faculty_id)
            .first()
            is not None
        )
