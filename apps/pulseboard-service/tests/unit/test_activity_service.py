from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from pulseboard.services.activity_service import build_activity, get_recent_activity

NOW = datetime(2026, 3, 10, 15, 0, tzinfo=timezone.utc)


def test_build_activity_merges_by_timestamp_and_limits():
    tasks = [
        SimpleNamespace(id=1, title="Done thing", status="completed", assignee_ids="2",
                        updated_at=NOW - timedelta(minutes=5)),
        SimpleNamespace(id=2, title="Open thing", status="todo", assignee_ids=None,
                        updated_at=NOW - timedelta(days=3)),
        SimpleNamespace(id=3, title="Ghost", status="in-progress", assignee_ids="42",
                        updated_at=NOW - timedelta(hours=1)),
    ]
    users = [SimpleNamespace(id=2, name="Bob", updated_at=NOW - timedelta(hours=2))]
    cats = [SimpleNamespace(id=7, name="UAT", updated_at=NOW - timedelta(seconds=10))]

    items = build_activity(tasks, users, cats, user_names={2: "Bob"}, limit=4, now=NOW)

    assert [i["id"] for i in items] == ["category-7", "task-1", "task-3", "user-2"]
    assert items[0]["action"] == "updated category" and items[0]["time"] == "just now"
    assert items[1]["user"] == "Bob" and items[1]["action"] == "completed task"
    assert items[1]["time"] == "5 minutes ago"
    assert items[2]["user"] == "Unknown User" and items[2]["action"] == "updated task"
    assert items[3]["action"] == "joined the team"


def test_unassigned_task_is_attributed_to_system():
    task = SimpleNamespace(id=9, title="T", status="todo", assignee_ids="", updated_at=NOW)
    items = build_activity([task], [], [], user_names={}, now=NOW)
    assert items[0]["user"] == "System"


def test_recent_activity_caps_each_source(db_session, make_user, make_category, make_task):
    for i in range(3):
        make_user(name=f"U{i}")
        make_category(name=f"C{i}")
    for i in range(6):
        make_task(title=f"T{i}")
    items = get_recent_activity(db_session, limit=20)
    kinds = [i["id"].split("-")[0] for i in items]
    assert kinds.count("task") == 4
    assert kinds.count("user") == 2
    assert kinds.count("category") == 2
