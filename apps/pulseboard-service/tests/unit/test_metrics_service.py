from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from pulseboard.services import metrics_service

NOW = datetime(2026, 3, 10, 15, 0, tzinfo=timezone.utc)


def _task(**kw):
    data = dict(
        id=1,
        status="todo",
        priority="medium",
        points=0,
        category_id=None,
        assignee_ids=None,
        created_at=NOW - timedelta(days=1),
        updated_at=NOW - timedelta(days=1),
        due_date=None,
    )
    data.update(kw)
    return SimpleNamespace(**data)


def _user(id, name, status="active"):
    return SimpleNamespace(id=id, name=name, status=status)


def test_dashboard_metrics():
    tasks = [
        _task(status="completed", points=5, created_at=NOW - timedelta(hours=10), updated_at=NOW - timedelta(hours=6)),
        _task(status="completed", points=3, created_at=NOW - timedelta(hours=4), updated_at=NOW - timedelta(hours=2)),
        _task(status="in-progress", points=2),
        _task(status="cancelled", points=1),
    ]
    users = [_user(1, "A"), _user(2, "B", status="inactive")]
    m = metrics_service.compute_dashboard_metrics(tasks, users)
    assert m["total_tasks"] == 4
    assert m["active_tasks"] == 1
    assert m["completed_tasks"] == 2
    assert m["completion_rate"] == 50
    assert m["total_points"] == 11
    assert m["active_users"] == 1
    assert m["avg_time_per_task"] == "3.0h"


def test_dashboard_metrics_empty():
    m = metrics_service.compute_dashboard_metrics([], [])
    assert m["completion_rate"] == 0
    assert m["avg_time_per_task"] == "0h"


def test_top_assignees_credit_every_assignee_and_skip_unknown_users():
    tasks = [
        _task(status="completed", points=8, assignee_ids="1,2"),
        _task(status="completed", points=3, assignee_ids="2,99"),
        _task(status="todo", points=50, assignee_ids="1"),
    ]
    users = [_user(1, "Ann"), _user(2, "Bob")]
    ranking = metrics_service.compute_top_assignees(tasks, users)
    assert [(r["name"], r["points"], r["task_count"]) for r in ranking] == [("Bob", 11, 2), ("Ann", 8, 1)]


def test_tasks_by_status_is_zero_filled():
    rows = metrics_service.compute_tasks_by_status([_task(status="todo"), _task(status="todo")])
    assert rows == [
        {"status": "todo", "count": 2},
        {"status": "in-progress", "count": 0},
        {"status": "completed", "count": 0},
        {"status": "cancelled", "count": 0},
    ]


def test_tasks_by_category_includes_uncategorized_bucket():
    cats = [SimpleNamespace(id=1, name="UAT", color="#E6E6FA")]
    rows = metrics_service.compute_tasks_by_category([_task(category_id=1), _task(category_id=None)], cats)
    assert rows[0]["count"] == 1
    assert rows[1]["category"] == "Uncategorized"


def test_productivity_trend_buckets_completed_tasks_by_update_day():
    tasks = [
        _task(status="completed", points=4, updated_at=NOW - timedelta(hours=1)),
        _task(status="completed", points=2, updated_at=NOW - timedelta(hours=2)),
        _task(status="completed", points=6, updated_at=NOW - timedelta(days=2)),
        _task(status="completed", points=9, updated_at=NOW - timedelta(days=30)),
        _task(status="todo", points=7, updated_at=NOW),
    ]
    trend = metrics_service.compute_productivity_trend(tasks, "7days", now=NOW)
    assert len(trend["labels"]) == 7
    assert trend["labels"][-1] == "Tue 03/10"
    assert trend["total_points_completed"][-1] == 6
    assert trend["tasks_completed"][-1] == 2
    assert trend["avg_points_per_task"][-1] == 3.0
    assert trend["total_points_completed"][-3] == 6
    assert sum(trend["tasks_completed"]) == 3


def test_trend_length_follows_range():
    assert len(metrics_service.compute_productivity_trend([], "30days", now=NOW)["labels"]) == 30
    assert len(metrics_service.compute_productivity_trend([], "90days", now=NOW)["labels"]) == 90
    assert len(metrics_service.compute_productivity_trend([], "all", now=NOW)["labels"]) == 7


def test_category_breakdown_and_priority_distribution():
    cats = [SimpleNamespace(id=1, name="UAT", color="#E6E6FA"), SimpleNamespace(id=2, name="Other", color=None)]
    tasks = [
        _task(category_id=1, points=3, status="completed", priority="high"),
        _task(category_id=1, points=4, priority="low"),
        _task(category_id=None, points=1, priority="high"),
    ]
    rows = metrics_service.compute_category_breakdown(tasks, cats)
    assert rows[0] == {
        "id": 1,
        "name": "UAT",
        "color": "#E6E6FA",
        "task_count": 2,
        "total_points": 7,
        "avg_points": 3.5,
        "completion_rate": 50,
    }
    assert rows[1]["task_count"] == 0 and rows[1]["avg_points"] == 0.0
    assert metrics_service.compute_priority_distribution(tasks) == {"low": 1, "medium": 0, "high": 2, "urgent": 0}


def test_performance_metrics():
    tasks = [
        _task(status="completed", points=6, assignee_ids="1,2",
              updated_at=NOW - timedelta(days=2), due_date=NOW - timedelta(days=1)),
        _task(status="completed", points=2, assignee_ids="1",
              updated_at=NOW, due_date=NOW - timedelta(days=1)),
        _task(status="cancelled", points=1),
        _task(status="todo", points=1),
    ]
    perf = metrics_service.compute_performance_metrics(tasks)
    assert perf == {
        "task_completion": 50,
        "on_time_delivery": 50,
        "quality_score": 67,
        "collaboration": 25,
        "points_average": 2.5,
        "efficiency": 80,
    }


def test_performance_metrics_empty():
    perf = metrics_service.compute_performance_metrics([])
    assert set(perf.values()) == {0}
