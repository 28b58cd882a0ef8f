from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from acadtrack.db.base_class import Base


class Penalty(Base):
    __tablename__ = "penalties"

    id = Column(Integer, primary_key=True, index=True)

    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    penalty_percent = Column(Integer, nullable=False)
    reason = Column(String(255), nullable=True)

    applied_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
