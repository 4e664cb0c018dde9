from datetime import timedelta

import pytest

from pulseboard.db import models

pytestmark = pytest.mark.integration


def test_metrics_on_empty_database(client):
    r = client.get("/api/dashboard/metrics")
    assert r.status_code == 200
    assert r.json() == {
        "totalTasks": 0,
        "activeTasks": 0,
        "completedTasks": 0,
        "completionRate": 0,
        "totalPoints": 0,
        "activeUsers": 0,
        "avgTimePerTask": "0h",
    }


def test_metrics_summarize_tasks_and_users(client, make_user, make_task):
    make_user()
    make_user(status="inactive")
    start = models.now_utc() - timedelta(hours=10)
    make_task(status="completed", points=5, created_at=start, updated_at=start + timedelta(hours=4))
    make_task(status="in-progress", points=3)
    make_task(status="todo", points=2)
    make_task(status="cancelled", points=1)

    body = client.get("/api/dashboard/metrics").json()
    assert body["totalTasks"] == 4
    assert body["activeTasks"] == 2
    assert body["completedTasks"] == 1
    assert body["completionRate"] == 25
    assert body["totalPoints"] == 11
    assert body["activeUsers"] == 1
    assert body["avgTimePerTask"] == "4.0h"


def test_charts_are_zero_filled(client, make_category):
    design = make_category(name="Design")
    body = client.get("/api/dashboard/charts").json()
    assert body["topAssignees"] == []
    assert body["tasksByCategory"] == [
        {"categoryId": design.id, "category": "Design", "color": "#E6E6FA", "count": 0}
    ]
    assert [s["status"] for s in body["tasksByStatus"]] == ["todo", "in-progress", "completed", "cancelled"]
    assert all(s["count"] == 0 for s in body["tasksByStatus"])


def test_charts_rank_assignees_by_completed_points(client, make_user, make_task):
    ann = make_user(name="Ann")
    bob = make_user(name="Bob")
    make_task(status="completed", points=8, assignee_ids=f"{ann.id},{bob.id}")
    make_task(status="completed", points=3, assignee_ids=str(bob.id))
    make_task(status="todo", points=13, assignee_ids=str(ann.id))

    body = client.get("/api/dashboard/charts").json()
    assert [(a["name"], a["points"], a["taskCount"]) for a in body["topAssignees"]] == [
        ("Bob", 11, 2),
        ("Ann", 8, 1),
    ]
    uncategorized = body["tasksByCategory"][-1]
    assert uncategorized["category"] == "Uncategorized" and uncategorized["count"] == 3


def test_activity_feed(client, make_user, make_category, make_task):
    ann = make_user(name="Ann")
    make_category(name="Design")
    make_task(title="Ship it", status="completed", assignee_ids=str(ann.id))
    make_task(title="Orphan", assignee_ids="9999")

    r = client.get("/api/dashboard/activity")
    assert r.status_code == 200
    items = r.json()
    by_id = {i["id"]: i for i in items}
    shipped = next(i for i in items if i["task"] == "Ship it")
    assert shipped["type"] == "completed" and shipped["user"] == "Ann"
    assert shipped["action"] == "completed task"
    assert next(i for i in items if i["task"] == "Orphan")["user"] == "Unknown User"
    assert by_id[f"user-{ann.id}"]["action"] == "joined the team"
    assert all(i["time"] for i in items)

    stamps = [i["timestamp"] for i in items]
    assert stamps == sorted(stamps, reverse=True)

    assert len(client.get("/api/dashboard/activity", params={"limit": 2}).json()) == 2
    assert client.get("/api/dashboard/activity", params={"limit": 0}).status_code == 422
    assert client.get("/api/dashboard/activity", params={"limit": 51}).status_code == 422
