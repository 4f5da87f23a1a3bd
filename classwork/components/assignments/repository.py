"""Assignment DB helpers: listing, CRUD and read-back of started assignments."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models.assignment import Assignment
from ...models.progress import AssignmentProgress, CurrentTask, StudentTask
from ...models.task import Task
from ...platform.database import transaction_scope
from ...schemas.assignment import AssignmentPayload
from .eligibility import find_progress, parse_assignment_id
from .errors import AssignmentInUse, AssignmentNotFound, AssignmentNotStarted, StorageError

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(action: str, *args):
    """Log database failures and re-raise them as an opaque StorageError."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Failed to " + action, *args)
        raise StorageError() from exc


# ---------------------------------------------------------------------------
# Query helpers
# ---------------------------------------------------------------------------

def list_assignments(db: Session) -> List[Assignment]:
    with _storage_errors("list assignments"):
        return db.query(Assignment).order_by(Assignment.id.asc()).all()


def get_assignment(db: Session, assignment_id) -> Assignment:
    parsed = parse_assignment_id(assignment_id)
    assignment = None
    if parsed is not None:
        with _storage_errors("load assignment id=%s", assignment_id):
            assignment = db.query(Assignment).filter(Assignment.id == parsed).first()
    if not assignment:
        raise AssignmentNotFound(assignment_id)
    return assignment


def list_assignment_tasks(db: Session, assignment_id) -> List[Task]:
    parsed = parse_assignment_id(assignment_id)
    if parsed is None:
        return []
    with _storage_errors("list tasks for assignment id=%s", assignment_id):
        return db.query(Task).filter(Task.assignment_id == parsed).order_by(Task.id.asc()).all()


def _progress_or_raise(db: Session, assignment_id, student: str) -> int:
    parsed = parse_assignment_id(assignment_id)
    if parsed is None:
        raise AssignmentNotStarted(assignment_id, student)
    with _storage_errors("load progress assignment=%s student=%s", assignment_id, student):
        progress = find_progress(db, parsed, student)
    if progress is None:
        raise AssignmentNotStarted(assignment_id, student)
    return parsed


def list_student_tasks(db: Session, assignment_id, student: str) -> List[StudentTask]:
    """The student's task sequence, ordered by task_number."""
    parsed = _progress_or_raise(db, assignment_id, student)
    with _storage_errors("list student tasks assignment=%s student=%s", assignment_id, student):
        return (
            db.query(StudentTask)
            .filter(StudentTask.student == student, StudentTask.assignment_id == parsed)
            .order_by(StudentTask.task_number.asc())
            .all()
        )


def get_current_task(db: Session, assignment_id, student: str) -> CurrentTask:
    parsed = _progress_or_raise(db, assignment_id, student)
    with _storage_errors("load current task assignment=%s student=%s", assignment_id, student):
        current = (
            db.query(CurrentTask)
            .filter(CurrentTask.student == student, CurrentTask.assignment_id == parsed)
            .first()
        )
    if not current:
        raise AssignmentNotStarted(assignment_id, student)
    return current


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def create_assignment(db: Session, payload: AssignmentPayload) -> Assignment:
    assignment = Assignment(**payload.model_dump())
    with _storage_errors("create assignment"):
        with transaction_scope(db):
            db.add(assignment)
        db.refresh(assignment)
    return assignment


def update_assignment(db: Session, assignment_id, payload: AssignmentPayload) -> Assignment:
    assignment = get_assignment(db, assignment_id)
    with _storage_errors("update assignment id=%s", assignment_id):
        with transaction_scope(db):
            for key, value in payload.model_dump().items():
                setattr(assignment, key, value)
    return assignment


def delete_assignment(db: Session, assignment_id) -> None:
    assignment = get_assignment(db, assignment_id)
    with _storage_errors("delete assignment id=%s", assignment_id):
        has_tasks = db.query(Task.id).filter(Task.assignment_id == assignment.id).first()
        has_progress = (
            db.query(AssignmentProgress.id)
            .filter(AssignmentProgress.assignment_id == assignment.id)
            .first()
        )
    if has_tasks or has_progress:
        raise AssignmentInUse(assignment_id)
    with _storage_errors("delete assignment id=%s", assignment_id):
        with transaction_scope(db):
            db.delete(assignment)
