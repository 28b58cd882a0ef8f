from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, Text, func

from acadtrack.db.base_class import Base


class GradeOverride(Base):
    """Append-only audit row: one per faculty override of a grade."""

    __tablename__ = "grade_overrides"

    id = Column(Integer, primary_key=True, index=True)

    grade_id = Column(Integer, ForeignKey("grades.id"), nullable=False, index=True)
    faculty_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    original_score = Column(Float, nullable=True)
    override_score = Column(Float, nullable=False)
    reason = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
