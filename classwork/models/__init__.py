from .assignment import Assignment
from .task import Task, TaskCategory
from .progress import AssignmentProgress, CurrentTask, StudentTask, IN_PROGRESS

__all__ = [
    "Assignment",
    "Task",
    "TaskCategory",
    "AssignmentProgress",
    "CurrentTask",
    "StudentTask",
    "IN_PROGRESS",
]
