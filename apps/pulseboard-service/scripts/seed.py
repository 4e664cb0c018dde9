"""Seed the database with the sample users, task categories and tasks."""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import suppress
from datetime import timedelta

from pulseboard.db import database, models
from pulseboard.db.repositories import categories as category_repo
from pulseboard.db.repositories import users as user_repo

logger = logging.getLogger("pulseboard.scripts.seed")

# Access SessionLocal dynamically so tests that rebind the sessionmaker are respected.
SessionLocal = lambda: database.SessionLocal()

TABLES = ("users", "categories", "tasks")

SAMPLE_USERS = [
    {"name": "John Smith", "email": "john.smith@company.com", "position": "Project Manager"},
    {"name": "Sarah Johnson", "email": "sarah.johnson@company.com", "position": "Developer"},
    {"name": "Mike Chen", "email": "mike.chen@company.com", "position": "QA Engineer"},
]

SAMPLE_CATEGORIES = [
    {"name": "UAT", "color": "#E6E6FA"},
    {"name": "Datafix", "color": "#ADD8E6"},
    {"name": "Training", "color": "#FFB6C1"},
    {"name": "Task Force", "color": "#FFDAB9"},
    {"name": "Other", "color": "#DDA0DD"},
]

# Offsets are in days relative to the seeding time; assignees are user emails.
SAMPLE_TASKS = [
    {
        "title": "Complete UAT testing for login module",
        "description": "Test all login scenarios including edge cases and security features",
        "status": "in-progress",
        "priority": "high",
        "category": "UAT",
        "points": 8,
        "assignees": ["mike.chen@company.com"],
        "created": -3,
        "updated": -1,
        "due": 2,
    },
    {
        "title": "Fix customer data inconsistencies in production",
        "description": "Resolve data sync issues between customer and order tables",
        "status": "todo",
        "priority": "high",
        "category": "Datafix",
        "points": 5,
        "assignees": ["sarah.johnson@company.com"],
        "created": -2,
        "updated": -2,
        "due": 5,
    },
    {
        "title": "Conduct training session on new dashboard features",
        "description": "Train team members on the new productivity management dashboard",
        "status": "completed",
        "priority": "medium",
        "category": "Training",
        "points": 3,
        "assignees": ["john.smith@company.com", "sarah.johnson@company.com"],
        "created": -7,
        "updated": -1,
        "due": -1,
    },
]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Insert sample users, task categories and tasks")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete existing rows of the seeded tables before inserting",
    )
    parser.add_argument(
        "--only",
        choices=TABLES,
        help="Seed a single table instead of all three",
    )
    return parser.parse_args(argv)


def reset_tables(session, tables) -> None:
    # tasks reference categories, so they are cleared first
    if "tasks" in tables:
        session.query(models.Task).delete()
    if "categories" in tables:
        session.query(models.Task).update({models.Task.category_id: None}, synchronize_session=False)
        session.query(models.TaskCategory).delete()
    if "users" in tables:
        session.query(models.User).delete()
    session.commit()
    logger.info("seed_reset: tables=%s", ",".join(tables))


def seed_users(session) -> int:
    inserted = 0
    for row in SAMPLE_USERS:
        if user_repo.get_user_by_email(session, row["email"]):
            continue
        session.add(models.User(status="active", role="member", join_date=models.now_utc(), **row))
        inserted += 1
    session.commit()
    return inserted


def seed_categories(session) -> int:
    inserted = 0
    for row in SAMPLE_CATEGORIES:
        if category_repo.get_category_by_name(session, row["name"]):
            continue
        session.add(models.TaskCategory(task_count=0, **row))
        inserted += 1
    session.commit()
    return inserted


def seed_tasks(session) -> int:
    now = models.now_utc()
    inserted = 0
    for row in SAMPLE_TASKS:
        if session.query(models.Task).filter(models.Task.title == row["title"]).first():
            continue
        category = category_repo.get_category_by_name(session, row["category"])
        if category is None:
            logger.warning("seed_missing_category: %s (task %r left uncategorized)", row["category"], row["title"])
        assignee_ids = []
        for email in row["assignees"]:
            user = user_repo.get_user_by_email(session, email)
            if user is None:
                logger.warning("seed_missing_user: %s", email)
                continue
            assignee_ids.append(str(user.id))
        session.add(
            models.Task(
                title=row["title"],
                description=row["description"],
                status=row["status"],
                priority=row["priority"],
                category_id=category.id if category else None,
                points=row["points"],
                assignee_ids=",".join(assignee_ids) or None,
                created_at=now + timedelta(days=row["created"]),
                updated_at=now + timedelta(days=row["updated"]),
                due_date=now + timedelta(days=row["due"]),
            )
        )
        inserted += 1
    session.commit()
    category_repo.refresh_task_counts(session, [c.id for c in category_repo.get_all_categories(session)])
    return inserted


SEEDERS = {
    "users": seed_users,
    "categories": seed_categories,
    "tasks": seed_tasks,
}


def seed(only: str | None = None, reset: bool = False) -> dict:
    tables = (only,) if only else TABLES
    session = SessionLocal()
    try:
        database._ensure_sqlite_schema()
        if reset:
            reset_tables(session, tables)
        counts = {}
        for table in tables:
            counts[table] = SEEDERS[table](session)
            logger.info("seed_table: table=%s inserted=%d", table, counts[table])
        return counts
    finally:
        with suppress(Exception):
            session.close()


def main(argv: list[str] | None = None) -> int:
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    counts = seed(only=args.only, reset=args.reset)
    for table, inserted in counts.items():
        print(f"{table}: {inserted} inserted")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution path
    sys.exit(main())
