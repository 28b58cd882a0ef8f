from fastapi import Depends
from sqlalchemy.orm import Session

from acadtrack.core.config import settings
from acadtrack.db.session import SessionLocal
from acadtrack.services.grading_workflow import GradingWorkflow, build_grading_workflow


# every request that needs DB will get a fresh session, and it will always close.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_grading_workflow(db: Session = Depends(get_db)) -> GradingWorkflow:
    return build_grading_workflow(db, settings)
