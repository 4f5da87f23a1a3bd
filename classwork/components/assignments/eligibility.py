"""Checks that decide whether a student may start an assignment."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from ...models.assignment import Assignment
from ...models.progress import AssignmentProgress
from .errors import AlreadyStarted, AssignmentNotActive, AssignmentNotFound

# Largest value the Integer primary key columns hold
MAX_ASSIGNMENT_ID = 2**31 - 1


def parse_assignment_id(raw_id) -> Optional[int]:
    """Path ids are opaque; anything that is not a positive integer names no assignment."""
    if isinstance(raw_id, bool):
        return None
    if isinstance(raw_id, int):
        value = raw_id
    else:
        text = str(raw_id or "").strip()
        if not (text.isascii() and text.isdecimal()):
            return None
        value = int(text)
    return value if 0 < value <= MAX_ASSIGNMENT_ID else None


def ensure_assignment_startable(db: Session, assignment_id) -> Assignment:
    parsed = parse_assignment_id(assignment_id)
    if parsed is None:
        raise AssignmentNotFound(assignment_id)
    assignment = db.query(Assignment).filter(Assignment.id == parsed).first()
    if not assignment:
        raise AssignmentNotFound(assignment_id)
    if not assignment.active:
        raise AssignmentNotActive(assignment_id)
    return assignment


def find_progress(db: Session, assignment_id: int, student: str) -> Optional[AssignmentProgress]:
    return (
        db.query(AssignmentProgress)
        .filter(
            AssignmentProgress.student == student,
            AssignmentProgress.assignment_id == assignment_id,
        )
        .first()
    )


def ensure_not_started(db: Session, assignment_id: int, student: str) -> None:
    if find_progress(db, assignment_id, student) is not None:
        raise AlreadyStarted(assignment_id, student)


def check_eligibility(db: Session, assignment_id, student: str) -> Assignment:
    """Existence, active flag and no prior start, in that order."""
    assignment = ensure_assignment_startable(db, assignment_id)
    ensure_not_started(db, assignment.id, student)
    return assignment
