import os
# Override DATABASE_URL before any app imports to avoid PostgreSQL driver requirement
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ.pop("DATABASE_PUBLIC_URL", None)
os.environ.pop("TASK_SAMPLER_SEED", None)
os.environ["LOG_JSON"] = "true"

import uuid
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from classwork.platform.database import Base, get_db
from classwork.main import app
from classwork.platform.middleware import _rate_limit_store
from classwork.components.assignments.sampler import reset_task_rng
from classwork.models import (
    Assignment,
    AssignmentProgress,
    CurrentTask,
    StudentTask,
    Task,
    TaskCategory,
)

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Enable foreign key support for SQLite
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    reset_task_rng()
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    Base.metadata.create_all(bind=engine)
    # Clear in-memory rate limit state between tests to prevent 429 bleed-through
    _rate_limit_store.clear()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    _rate_limit_store.clear()
    Base.metadata.drop_all(bind=engine)


# ---------------------------------------------------------------------------
# Factory helpers: create test entities quickly and consistently
# ---------------------------------------------------------------------------

_counter = 0

def _unique_id() -> str:
    global _counter
    _counter += 1
    return f"{_counter}-{uuid.uuid4().hex[:8]}"


def student_id() -> str:
    return f"student-{_unique_id()}"


def create_category(db, tasks_per_category=1, name=None):
    category = TaskCategory(name=name or f"Category-{_unique_id()}", tasks_per_category=tasks_per_category)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def create_assignment(db, active=True, name=None, points=10, challenge_pts=5):
    assignment = Assignment(
        name=name or f"Assignment-{_unique_id()}",
        active=active,
        points=points,
        challenge_pts=challenge_pts,
    )
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    return assignment


def create_tasks(db, assignment, category, count):
    tasks = [
        Task(task_name=f"Task-{_unique_id()}", category_id=category.id, assignment_id=assignment.id)
        for _ in range(count)
    ]
    db.add_all(tasks)
    db.commit()
    for task in tasks:
        db.refresh(task)
    return tasks


def setup_assignment(db, quotas, active=True):
    """Create categories and one assignment with tasks.

    ``quotas`` is a list of (tasks_per_category, pool_size) pairs, one per category,
    in category id order. Returns (assignment, categories, pools) where ``pools``
    maps category id to the set of that category's task ids.
    """
    assignment = create_assignment(db, active=active)
    categories = []
    pools = {}
    for required, pool_size in quotas:
        category = create_category(db, tasks_per_category=required)
        categories.append(category)
        pools[category.id] = {t.id for t in create_tasks(db, assignment, category, pool_size)}
    return assignment, categories, pools


def row_counts(db, assignment_id, student=None):
    """Rows written by the start workflow for an assignment (optionally one student)."""
    counts = {}
    for model in (AssignmentProgress, StudentTask, CurrentTask):
        query = db.query(model).filter(model.assignment_id == assignment_id)
        if student is not None:
            query = query.filter(model.student == student)
        counts[model.__tablename__] = query.count()
    return counts
