from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from ..platform.database import Base

IN_PROGRESS = "In Progress"


class AssignmentProgress(Base):
    __tablename__ = "assignment_progress"
    # One start per student and assignment
    __table_args__ = (
        UniqueConstraint("student", "assignment_id", name="uq_assignment_progress_student_assignment"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student = Column(String, nullable=False, index=True)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), index=True, nullable=False)
    status = Column(String, nullable=False, default=IN_PROGRESS)
    started_at = Column(DateTime(timezone=True), server_default=func.now())


class StudentTask(Base):
    __tablename__ = "student_tasks"
    __table_args__ = (
        UniqueConstraint("student", "assignment_id", "task_number", name="uq_student_tasks_sequence"),
        UniqueConstraint("student", "assignment_id", "task_id", name="uq_student_tasks_task"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student = Column(String, nullable=False)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), index=True, nullable=False)
    task_id = Column(Integer, ForeignKey("tasks.id"), index=True, nullable=False)
    task_number = Column(Integer, nullable=False)  # 1-based position in the student's sequence
    task_name = Column(String, nullable=False)     # copied from tasks.task_name at start time


class CurrentTask(Base):
    __tablename__ = "current_tasks"
    __table_args__ = (
        UniqueConstraint("student", "assignment_id", name="uq_current_tasks_student_assignment"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student = Column(String, nullable=False)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), index=True, nullable=False)
    task_id = Column(Integer, ForeignKey("tasks.id"), index=True, nullable=False)
    task_name = Column(String, nullable=False)
