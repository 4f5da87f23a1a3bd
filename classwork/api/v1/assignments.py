"""Assignment API routes: thin handlers that delegate to the component layer."""

from typing import List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...platform.database import get_db
from ...components.assignments.errors import AssignmentError
from ...components.assignments.repository import (
    create_assignment as _create_assignment,
    delete_assignment as _delete_assignment,
    get_assignment as _get_assignment,
    get_current_task as _get_current_task,
    list_assignment_tasks,
    list_assignments,
    list_student_tasks,
    update_assignment as _update_assignment,
)
from ...components.assignments.service import start_assignment as _start_assignment
from ...schemas.assignment import (
    AssignmentCreated,
    AssignmentPayload,
    AssignmentResponse,
    AssignmentStartResponse,
    CurrentTaskResponse,
    MessageResponse,
    StudentTaskResponse,
    TaskResponse,
)

router = APIRouter(prefix="/assignments", tags=["Assignments"])


def error_response(exc: AssignmentError, message: Optional[str] = None) -> JSONResponse:
    """Render a domain error as ``{message, reason, ...context}``.

    When ``message`` is given (route-level summary) the error's own text moves to ``detail``.
    """
    content = {"message": message or exc.message, **exc.to_payload()}
    if message:
        content["detail"] = exc.message
    return JSONResponse(status_code=exc.status_code, content=content)


@router.get("/all", response_model=List[AssignmentResponse])
def get_all_assignments(db: Session = Depends(get_db)):
    return list_assignments(db)


@router.post("/create", response_model=AssignmentCreated)
def create_assignment(data: AssignmentPayload, db: Session = Depends(get_db)):
    assignment = _create_assignment(db, data)
    return {"message": "Assignment successfully created", "id": assignment.id}


@router.get("/{assignment_id}/tasks", response_model=List[TaskResponse])
def get_assignment_tasks(assignment_id: str, db: Session = Depends(get_db)):
    return list_assignment_tasks(db, assignment_id)


@router.get("/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(assignment_id: str, db: Session = Depends(get_db)):
    return _get_assignment(db, assignment_id)


@router.put("/{assignment_id}", response_model=MessageResponse)
def update_assignment(assignment_id: str, data: AssignmentPayload, db: Session = Depends(get_db)):
    _update_assignment(db, assignment_id, data)
    return {"message": "Assignment successfully updated."}


@router.delete("/{assignment_id}", response_model=MessageResponse)
def delete_assignment(assignment_id: str, db: Session = Depends(get_db)):
    _delete_assignment(db, assignment_id)
    return {"message": "Assignment successfully deleted."}


@router.post("/{assignment_id}/{student}/start", response_model=AssignmentStartResponse)
def start_assignment(assignment_id: str, student: str, db: Session = Depends(get_db)):
    """Begin an assignment for a student: sample their tasks and set the current task."""
    try:
        result = _start_assignment(db, assignment_id, student)
    except AssignmentError as exc:
        return error_response(exc, message=f"Starting assignment for student {student} failed.")
    return {"message": "Assignment successfully started.", "task_count": result.task_count}


@router.get("/{assignment_id}/{student}/tasks", response_model=List[StudentTaskResponse])
def get_student_tasks(assignment_id: str, student: str, db: Session = Depends(get_db)):
    return list_student_tasks(db, assignment_id, student)


@router.get("/{assignment_id}/{student}/current-task", response_model=CurrentTaskResponse)
def get_current_task(assignment_id: str, student: str, db: Session = Depends(get_db)):
    return _get_current_task(db, assignment_id, student)
