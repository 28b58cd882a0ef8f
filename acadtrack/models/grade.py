from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint, func

from acadtrack.db.base_class import Base

PENDING = "pending"
REVIEWED = "reviewed"
APPROVED = "approved"
OVERRIDDEN = "overridden"

STATUSES = (PENDING, REVIEWED, APPROVED, OVERRIDDEN)


class Grade(Base):
    __tablename__ = "grades"

    id = Column(Integer, primary_key=True, index=True)

    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False, index=True)

    # Scores are percentages, nullable until the matching step has run
    auto_score = Column(Float, nullable=True)
    final_score = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)

    strictness = Column(String(20), nullable=False, default="medium")
    status = Column(String(20), nullable=False, default=PENDING, index=True)

    graded_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    graded_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("task_id", "student_id", name="uq_grade_task_student"),
    )
