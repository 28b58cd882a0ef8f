# import models so Base.metadata knows every table
from acadtrack.db.base_class import Base  # noqa: F401
from acadtrack.models.grade import Grade  # noqa: F401
from acadtrack.models.grade_override import GradeOverride  # noqa: F401
from acadtrack.models.penalty import Penalty  # noqa: F401
from acadtrack.models.subject import Subject  # noqa: F401
from acadtrack.models.task import Task, TaskChecklistItem  # noqa: F401
from acadtrack.models.task_assignment import TaskAssignment  # noqa: F401
from acadtrack.models.user import User  # noqa: F401
