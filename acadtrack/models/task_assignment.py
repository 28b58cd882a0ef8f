from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func

from acadtrack.db.base_class import Base

ASSIGNED = "assigned"
SUBMITTED = "submitted"


class TaskAssignment(Base):
    __tablename__ = "task_assignments"

    id = Column(Integer, primary_key=True, index=True)

    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=ASSIGNED)
    assigned_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # set once, when the student submits
    submission_text = Column(Text, nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("task_id", "student_id", name="uq_task_assignment_task_student"),
    )
