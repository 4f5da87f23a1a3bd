"""Assignment start workflow: eligibility, task sampling, atomic persistence."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...models.progress import IN_PROGRESS, AssignmentProgress, CurrentTask, StudentTask
from ...platform.database import transaction_scope
from .catalog import CatalogTask, read_task_catalog
from .eligibility import check_eligibility, ensure_assignment_startable, ensure_not_started
from .errors import AlreadyStarted, AssignmentError, NoTasksForAssignment, StorageError
from .sampler import sample_tasks, tasks_per_category

logger = logging.getLogger(__name__)

_PROGRESS_UNIQUE_MARKERS = (
    "uq_assignment_progress_student_assignment",
    "assignment_progress.student",
)


@dataclass(frozen=True)
class StartResult:
    assignment_id: int
    student: str
    task_count: int
    current_task: CatalogTask


def _is_progress_conflict(exc: IntegrityError) -> bool:
    text = str(getattr(exc, "orig", None) or exc)
    return any(marker in text for marker in _PROGRESS_UNIQUE_MARKERS)


def _insert_progress(db: Session, assignment_id: int, student: str) -> AssignmentProgress:
    progress = AssignmentProgress(
        student=student,
        assignment_id=assignment_id,
        status=IN_PROGRESS,
    )
    db.add(progress)
    db.flush()
    return progress


def _insert_student_tasks(db: Session, assignment_id: int, student: str, tasks: List[CatalogTask]) -> None:
    db.add_all(
        StudentTask(
            student=student,
            assignment_id=assignment_id,
            task_id=task.task_id,
            task_number=number,
            task_name=task.task_name,
        )
        for number, task in enumerate(tasks, start=1)
    )
    db.flush()


def _insert_current_task(db: Session, assignment_id: int, student: str, first: CatalogTask) -> None:
    db.add(
        CurrentTask(
            student=student,
            assignment_id=assignment_id,
            task_id=first.task_id,
            task_name=first.task_name,
        )
    )
    db.flush()


def start_assignment(
    db: Session,
    assignment_id,
    student: str,
    rng: Optional[random.Random] = None,
) -> StartResult:
    """Start ``assignment_id`` for ``student`` exactly once.

    Reads and sampling happen first so a refusal never touches the progress
    tables. The writes run in one transaction that re-checks eligibility; the
    (student, assignment) unique constraint catches a concurrent start that
    slips past the re-check, and it is reported as AlreadyStarted.
    """
    try:
        assignment_pk = check_eligibility(db, assignment_id, student).id
        catalog = read_task_catalog(db, assignment_pk)
        selected = sample_tasks(catalog.categories, catalog.tasks_by_category, rng=rng)
        if not selected:
            raise NoTasksForAssignment(assignment_pk)

        with transaction_scope(db):
            ensure_assignment_startable(db, assignment_pk)
            ensure_not_started(db, assignment_pk, student)
            _insert_progress(db, assignment_pk, student)
            _insert_student_tasks(db, assignment_pk, student, selected)
            _insert_current_task(db, assignment_pk, student, selected[0])
    except AssignmentError as exc:
        # transaction_scope already rolled back writes; this ends the read phase
        try:
            db.rollback()
        except SQLAlchemyError as rollback_exc:
            logger.exception("Rollback failed after refused start assignment=%s student=%s", assignment_id, student)
            raise StorageError() from rollback_exc
        logger.warning(
            "Assignment start refused assignment=%s student=%s reason=%s",
            assignment_id,
            student,
            exc.reason,
        )
        raise
    except IntegrityError as exc:
        if _is_progress_conflict(exc):
            logger.warning(
                "Concurrent start rejected by unique constraint assignment=%s student=%s",
                assignment_id,
                student,
            )
            raise AlreadyStarted(assignment_id, student) from exc
        logger.exception("Integrity failure starting assignment=%s student=%s", assignment_id, student)
        raise StorageError() from exc
    except SQLAlchemyError as exc:
        logger.exception("Database failure starting assignment=%s student=%s", assignment_id, student)
        raise StorageError() from exc

    logger.info(
        "Assignment started assignment=%s student=%s tasks=%d per_category=%s",
        assignment_pk,
        student,
        len(selected),
        tasks_per_category(selected),
    )
    return StartResult(
        assignment_id=assignment_pk,
        student=student,
        task_count=len(selected),
        current_task=selected[0],
    )
