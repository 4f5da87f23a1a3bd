"""Create assignment, task catalog and student progress tables.

Revision ID: 001_create_assignment_tables
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa


revision = "001_create_assignment_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "assignments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("points", sa.Float(), nullable=False, server_default="0"),
        sa.Column("challenge_pts", sa.Float(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_assignments_id", "assignments", ["id"])

    op.create_table(
        "task_categories",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("tasks_per_category", sa.Integer(), nullable=False, server_default="1"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_task_categories_id", "task_categories", ["id"])

    op.create_table(
        "tasks",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("task_name", sa.String(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("assignment_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["category_id"], ["task_categories.id"]),
        sa.ForeignKeyConstraint(["assignment_id"], ["assignments.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tasks_id", "tasks", ["id"])
    op.create_index("ix_tasks_category_id", "tasks", ["category_id"])
    op.create_index("ix_tasks_assignment_id", "tasks", ["assignment_id"])

    op.create_table(
        "assignment_progress",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("student", sa.String(), nullable=False),
        sa.Column("assignment_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="In Progress"),
        sa.Column("started_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["assignment_id"], ["assignments.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("student", "assignment_id", name="uq_assignment_progress_student_assignment"),
    )
    op.create_index("ix_assignment_progress_id", "assignment_progress", ["id"])
    op.create_index("ix_assignment_progress_student", "assignment_progress", ["student"])
    op.create_index("ix_assignment_progress_assignment_id", "assignment_progress", ["assignment_id"])

    op.create_table(
        "student_tasks",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("student", sa.String(), nullable=False),
        sa.Column("assignment_id", sa.Integer(), nullable=False),
        sa.Column("task_id", sa.Integer(), nullable=False),
        sa.Column("task_number", sa.Integer(), nullable=False),
        sa.Column("task_name", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(["assignment_id"], ["assignments.id"]),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("student", "assignment_id", "task_number", name="uq_student_tasks_sequence"),
        sa.UniqueConstraint("student", "assignment_id", "task_id", name="uq_student_tasks_task"),
    )
    op.create_index("ix_student_tasks_id", "student_tasks", ["id"])
    op.create_index("ix_student_tasks_assignment_id", "student_tasks", ["assignment_id"])
    op.create_index("ix_student_tasks_task_id", "student_tasks", ["task_id"])

    op.create_table(
        "current_tasks",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("student", sa.String(), nullable=False),
        sa.Column("assignment_id", sa.Integer(), nullable=False),
        sa.Column("task_id", sa.Integer(), nullable=False),
        sa.Column("task_name", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(["assignment_id"], ["assignments.id"]),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("student", "assignment_id", name="uq_current_tasks_student_assignment"),
    )
    op.create_index("ix_current_tasks_id", "current_tasks", ["id"])
    op.create_index("ix_current_tasks_assignment_id", "current_tasks", ["assignment_id"])
    op.create_index("ix_current_tasks_task_id", "current_tasks", ["task_id"])


def downgrade() -> None:
    op.drop_table("current_tasks")
    op.drop_table("student_tasks")
    op.drop_table("assignment_progress")
    op.drop_table("tasks")
    op.drop_table("task_categories")
    op.drop_table("assignments")
