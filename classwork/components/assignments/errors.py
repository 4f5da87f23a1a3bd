"""Assignment error taxonomy.

Every failure the assignment workflows can report is one of the classes below.
Callers branch on the class (or its ``reason`` tag), never on message text.
``context`` holds the identifiers of the offending entity and is safe to return
to clients; ``StorageError`` deliberately carries none.
"""

from __future__ import annotations

from typing import Any, Dict


class AssignmentError(Exception):
    status_code: int = 500
    reason: str = "assignment_error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def to_payload(self) -> Dict[str, Any]:
        return {"reason": self.reason, **self.context}


class AssignmentNotFound(AssignmentError):
    status_code = 404
    reason = "assignment_not_found"

    def __init__(self, assignment_id: Any) -> None:
        super().__init__("Assignment with given ID does not exist.", assignment_id=str(assignment_id))


class AssignmentNotActive(AssignmentError):
    status_code = 409
    reason = "assignment_not_active"

    def __init__(self, assignment_id: Any) -> None:
        super().__init__("Assignment with given ID is not active yet.", assignment_id=str(assignment_id))


class AlreadyStarted(AssignmentError):
    status_code = 409
    reason = "already_started"

    def __init__(self, assignment_id: Any, student: str) -> None:
        super().__init__(
            f"Student {student} has already started this assignment.",
            assignment_id=str(assignment_id),
            student=student,
        )


class NoCategoriesDefined(AssignmentError):
    status_code = 500
    reason = "no_categories_defined"

    def __init__(self) -> None:
        super().__init__("Task categories are not defined.")


class NoTasksForAssignment(AssignmentError):
    status_code = 422
    reason = "no_tasks_for_assignment"

    def __init__(self, assignment_id: Any) -> None:
        super().__init__("There are no tasks defined in given assignment.", assignment_id=str(assignment_id))


class InsufficientTasksInCategory(AssignmentError):
    status_code = 422
    reason = "insufficient_tasks_in_category"

    def __init__(self, category_id: int, required: int, available: int) -> None:
        super().__init__(
            f"Task category {category_id} needs {required} task(s) but only {available} are available.",
            category_id=category_id,
            required=required,
            available=available,
        )


class AssignmentNotStarted(AssignmentError):
    status_code = 404
    reason = "assignment_not_started"

    def __init__(self, assignment_id: Any, student: str) -> None:
        super().__init__(
            f"Student {student} has not started this assignment.",
            assignment_id=str(assignment_id),
            student=student,
        )


class AssignmentInUse(AssignmentError):
    status_code = 400
    reason = "assignment_in_use"

    def __init__(self, assignment_id: Any) -> None:
        super().__init__(
            "Cannot delete assignment: it has tasks or student progress.",
            assignment_id=str(assignment_id),
        )


class StorageError(AssignmentError):
    """Infrastructure failure. The cause is logged server-side, never returned."""

    status_code = 500
    reason = "internal_error"

    def __init__(self) -> None:
        super().__init__("Internal database error.")
