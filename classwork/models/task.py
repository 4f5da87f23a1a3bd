from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..platform.database import Base


class TaskCategory(Base):
    __tablename__ = "task_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=True)
    # How many tasks of this category every student gets when starting an assignment
    tasks_per_category = Column(Integer, nullable=False, default=1)

    tasks = relationship("Task", back_populates="category")


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    task_name = Column(String, nullable=False)
    category_id = Column(Integer, ForeignKey("task_categories.id"), index=True, nullable=False)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), index=True, nullable=False)

    category = relationship("TaskCategory", back_populates="tasks")
    assignment = relationship("Assignment", back_populates="tasks")
