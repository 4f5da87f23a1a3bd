"""Read-only view of task categories and an assignment's tasks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from sqlalchemy.orm import Session

from ...models.task import Task, TaskCategory
from .errors import NoCategoriesDefined, NoTasksForAssignment


@dataclass(frozen=True)
class CategoryQuota:
    category_id: int
    required_count: int


@dataclass(frozen=True)
class CatalogTask:
    task_id: int
    task_name: str
    category_id: int


@dataclass(frozen=True)
class TaskCatalog:
    categories: List[CategoryQuota]
    tasks_by_category: Dict[int, List[CatalogTask]] = field(default_factory=dict)


def group_tasks_by_category(tasks: List[CatalogTask]) -> Dict[int, List[CatalogTask]]:
    grouped: Dict[int, List[CatalogTask]] = {}
    for task in tasks:
        grouped.setdefault(task.category_id, []).append(task)
    return grouped


def read_task_catalog(db: Session, assignment_id: int) -> TaskCatalog:
    """Load category quotas (id order) and the assignment's tasks grouped by category.

    Raises NoCategoriesDefined when the category table is empty and
    NoTasksForAssignment when the assignment has no tasks at all.
    """
    category_rows = db.query(TaskCategory).order_by(TaskCategory.id.asc()).all()
    if not category_rows:
        raise NoCategoriesDefined()
    categories = [
        CategoryQuota(category_id=row.id, required_count=int(row.tasks_per_category or 0))
        for row in category_rows
    ]

    task_rows = (
        db.query(Task.id, Task.task_name, Task.category_id)
        .filter(Task.assignment_id == assignment_id)
        .order_by(Task.id.asc())
        .all()
    )
    if not task_rows:
        raise NoTasksForAssignment(assignment_id)

    tasks = [
        CatalogTask(task_id=row.id, task_name=row.task_name, category_id=row.category_id)
        for row in task_rows
    ]
    return TaskCatalog(categories=categories, tasks_by_category=group_tasks_by_category(tasks))
