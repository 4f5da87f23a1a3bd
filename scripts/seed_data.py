"""Seed the classwork database with demo assignments.

Usage:
    python -m scripts.seed_data
    python -m scripts.seed_data --create-tables
"""
import argparse
import logging

from classwork.models import Assignment, Task, TaskCategory
from classwork.platform.database import Base, SessionLocal, engine, transaction_scope
from classwork.platform.logging import setup_logging

logger = logging.getLogger("classwork.seed")

CATEGORIES = [
    ("Warm-up", 2),
    ("Core", 1),
]

ASSIGNMENTS = [
    {
        "name": "Intro to SQL",
        "active": True,
        "points": 10,
        "challenge_pts": 5,
        "tasks": {
            "Warm-up": [
                "Select every column from a table",
                "Filter rows with WHERE",
                "Sort results with ORDER BY",
                "Limit the number of rows",
                "Rename a column with AS",
            ],
            "Core": [
                "Join two tables",
                "Aggregate with GROUP BY",
                "Filter groups with HAVING",
            ],
        },
    },
    {
        "name": "Transactions",
        "active": False,
        "points": 15,
        "challenge_pts": 10,
        "tasks": {
            "Warm-up": [
                "Begin and commit a transaction",
                "Roll back a failed insert",
            ],
            "Core": [
                "Prevent a lost update",
            ],
        },
    },
]


def seed(create_tables: bool = False) -> None:
    if create_tables:
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        # Check if already seeded
        if db.query(Assignment).first():
            logger.info("Database already seeded. Skipping.")
            return

        with transaction_scope(db):
            categories = {}
            for name, per_assignment in CATEGORIES:
                category = TaskCategory(name=name, tasks_per_category=per_assignment)
                db.add(category)
                categories[name] = category
            db.flush()

            for entry in ASSIGNMENTS:
                assignment = Assignment(
                    name=entry["name"],
                    active=entry["active"],
                    points=entry["points"],
                    challenge_pts=entry["challenge_pts"],
                )
                db.add(assignment)
                db.flush()
                for category_name, task_names in entry["tasks"].items():
                    for task_name in task_names:
                        db.add(
                            Task(
                                task_name=task_name,
                                category_id=categories[category_name].id,
                                assignment_id=assignment.id,
                            )
                        )
        logger.info("Seeded %d categories and %d assignments", len(CATEGORIES), len(ASSIGNMENTS))
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo assignments")
    parser.add_argument("--create-tables", action="store_true", help="create tables without running migrations")
    args = parser.parse_args()
    setup_logging()
    seed(create_tables=args.create_tables)


if __name__ == "__main__":
    main()
