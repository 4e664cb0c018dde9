import pytest

from pulseboard.services import chart_service
from pulseboard.services.chart_service import CHART_NAMES, ChartService, UnknownChartError

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

ANALYTICS = {
    "range": "7days",
    "productivity_trend": {
        "labels": ["Wed 03/04", "Thu 03/05", "Fri 03/06", "Sat 03/07", "Sun 03/08", "Mon 03/09", "Tue 03/10"],
        "total_points_completed": [0, 3, 0, 5, 0, 0, 8],
        "avg_points_per_task": [0.0, 3.0, 0.0, 5.0, 0.0, 0.0, 4.0],
        "tasks_completed": [0, 1, 0, 1, 0, 0, 2],
    },
    "category_breakdown": [
        {"id": 1, "name": "UAT", "color": "#E6E6FA", "task_count": 2, "total_points": 9,
         "avg_points": 4.5, "completion_rate": 50},
        {"id": 2, "name": "Other", "color": None, "task_count": 0, "total_points": 0,
         "avg_points": 0.0, "completion_rate": 0},
    ],
    "priority_distribution": {"low": 1, "medium": 2, "high": 1, "urgent": 0},
    "performance_metrics": {
        "task_completion": 50,
        "on_time_delivery": 100,
        "quality_score": 100,
        "collaboration": 25,
        "points_average": 4.5,
        "efficiency": 60,
    },
}
CHARTS = {
    "top_assignees": [{"id": 1, "name": "Ann", "points": 8, "task_count": 2}],
    "tasks_by_category": [],
    "tasks_by_status": [
        {"status": "todo", "count": 1},
        {"status": "in-progress", "count": 1},
        {"status": "completed", "count": 2},
        {"status": "cancelled", "count": 0},
    ],
}


@pytest.mark.parametrize("name", CHART_NAMES)
def test_every_chart_renders_png(name):
    buf = ChartService(ANALYTICS, CHARTS).render(name)
    assert buf.getvalue().startswith(PNG_SIGNATURE)


def test_charts_render_without_data():
    empty_analytics = dict(
        ANALYTICS,
        category_breakdown=[],
        priority_distribution={"low": 0, "medium": 0, "high": 0, "urgent": 0},
    )
    service = ChartService(empty_analytics, dict(CHARTS, top_assignees=[]))
    for name in ("category-tasks", "priority-distribution", "top-assignees"):
        assert service.render(name).getvalue().startswith(PNG_SIGNATURE)


def test_unknown_chart():
    with pytest.raises(UnknownChartError):
        ChartService(ANALYTICS, CHARTS).render("burndown")


def test_rendering_only_lays_out_its_own_figure(monkeypatch):
    def _global_layout(*args, **kwargs):
        raise AssertionError("pyplot current-figure layout used")

    monkeypatch.setattr(chart_service.plt, "tight_layout", _global_layout)
    assert ChartService(ANALYTICS, CHARTS).render("task-status").getvalue().startswith(PNG_SIGNATURE)
