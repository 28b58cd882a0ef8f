import os
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

TEST_DB_FILE = "test_acadtrack.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"

# point the app's own engine (used on startup) at the test database too
os.environ["DATABASE_URL"] = TEST_DB_URL

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from acadtrack.core.config import settings  # noqa: E402
from acadtrack.core.deps import get_db  # noqa: E402
from acadtrack.core.security import hash_password  # noqa: E402
from acadtrack.db.base import Base  # noqa: E402
from acadtrack.main import app  # noqa: E402
from acadtrack.models.grade import Grade  # noqa: E402
from acadtrack.models.grade_override import GradeOverride  # noqa: E402
from acadtrack.models.penalty import Penalty  # noqa: E402
from acadtrack.models.subject import Subject  # noqa: E402
from acadtrack.models.task import Task, TaskChecklistItem  # noqa: E402
from acadtrack.models.task_assignment import TaskAssignment  # noqa: E402
from acadtrack.models.user import User  # noqa: E402
from acadtrack.services.grading_workflow import build_grading_workflow  # noqa: E402

PASSWORD = "password123"
# bcrypt is slow on purpose; hash once for every seeded user
PASSWORD_HASH = hash_password(PASSWORD)

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def seed():
    """Seed a clean minimal dataset for each test and return its ids."""
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        for model in (
            GradeOverride,
            Penalty,
            Grade,
            TaskAssignment,
            TaskChecklistItem,
            Task,
            Subject,
            User,
        ):
            db.query(model).delete()
        db.commit()

        # Users
        student = User(email="student1@example.com", full_name="Student One", role="student", hashed_password=PASSWORD_HASH)
        other_student = User(email="student2@example.com", full_name="Student Two", role="student", hashed_password=PASSWORD_HASH)
        faculty = User(email="faculty1@example.com", full_name="Faculty One", role="faculty", hashed_password=PASSWORD_HASH)
        other_faculty = User(email="faculty2@example.com", full_name="Faculty Two", role="faculty", hashed_password=PASSWORD_HASH)
        db.add_all([student, other_student, faculty, other_faculty])
        db.commit()

        # Subjects: one per faculty member
        subject = Subject(name="Data Structures", code="CS201", faculty_id=faculty.id)
        other_subject = Subject(name="Compilers", code="CS420", faculty_id=other_faculty.id)
        db.add_all([subject, other_subject])
        db.commit()

        # Task (future due date so submissions are on time)
        task = Task(
            subject_id=subject.id,
            title="Linked lists",
            description="Implement a doubly linked list",
            due_at=datetime.now(timezone.utc) + timedelta(days=1),
            weight=10,
            max_score=100,
        )
        db.add(task)
        db.commit()

        db.add_all(
            [
                TaskChecklistItem(task_id=task.id, position=1, requirement="insert and delete"),
                TaskChecklistItem(task_id=task.id, position=2, requirement="unit tests"),
                TaskAssignment(task_id=task.id, student_id=student.id),
            ]
        )
        db.commit()

        ids = SimpleNamespace(
            student_id=student.id,
            other_student_id=other_student.id,
            faculty_id=faculty.id,
            other_faculty_id=other_faculty.id,
            subject_id=subject.id,
            other_subject_id=other_subject.id,
            task_id=task.id,
        )
        yield ids
    finally:
        db.close()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def workflow(db):
    return build_grading_workflow(db, settings)


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def login(client, email: str, password: str = PASSWORD) -> str:
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def student_headers(client):
    return auth_header(login(client, "student1@example.com"))


@pytest.fixture()
def faculty_headers(client):
    return auth_header(login(client, "faculty1@example.com"))


@pytest.fixture()
def other_faculty_headers(client):
    return auth_header(login(client, "faculty2@example.com"))
