"""
Server-side chart rendering for the reports page.

Uses matplotlib with the non-interactive Agg backend and returns PNG images
as BytesIO buffers. Inputs are the dictionaries produced by
``metrics_service`` (snake_case keys).
"""
import io
import logging
from typing import Callable, Dict

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for server use
import matplotlib.pyplot as plt
import numpy as np

logger = logging.getLogger(__name__)

plt.rcParams["font.family"] = "DejaVu Sans"
plt.rcParams["figure.facecolor"] = "#ffffff"
plt.rcParams["axes.facecolor"] = "#ffffff"

PRIORITY_COLORS = {
    "low": "#98D8C8",
    "medium": "#F7DC6F",
    "high": "#F8C471",
    "urgent": "#F1948A",
}
STATUS_COLORS = {
    "todo": "#AED6F1",
    "in-progress": "#F7DC6F",
    "completed": "#82E0AA",
    "cancelled": "#D5D8DC",
}
PERFORMANCE_LABELS = [
    "Task Completion",
    "On-Time Delivery",
    "Quality Score",
    "Collaboration",
    "Points Average",
    "Efficiency",
]
FALLBACK_COLOR = "#BB8FCE"
CHART_NAMES = (
    "productivity-trend",
    "category-tasks",
    "category-points",
    "priority-distribution",
    "performance-radar",
    "top-assignees",
    "task-status",
)


class UnknownChartError(KeyError):
    pass


def _to_png(fig) -> io.BytesIO:
    fig.tight_layout()
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=120, bbox_inches="tight", facecolor=fig.get_facecolor())
    buf.seek(0)
    plt.close(fig)
    return buf


def _style_axes(ax) -> None:
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.grid(axis="y", alpha=0.3)
    ax.set_axisbelow(True)


def _empty(ax, message: str = "No data") -> None:
    ax.text(0.5, 0.5, message, ha="center", va="center", fontsize=12, color="#888888",
            transform=ax.transAxes)
    ax.set_xticks([])
    ax.set_yticks([])


class ChartService:
    """Renders the report charts from precomputed analytics."""

    def __init__(self, analytics: dict, charts: dict):
        self.analytics = analytics
        self.charts = charts
        self._renderers: Dict[str, Callable[[], io.BytesIO]] = {
            "productivity-trend": self.productivity_trend,
            "category-tasks": self.category_tasks,
            "category-points": self.category_points,
            "priority-distribution": self.priority_distribution,
            "performance-radar": self.performance_radar,
            "top-assignees": self.top_assignees,
            "task-status": self.task_status,
        }

    def render(self, name: str) -> io.BytesIO:
        renderer = self._renderers.get(name)
        if renderer is None:
            raise UnknownChartError(name)
        buf = renderer()
        logger.info("chart_rendered: chart=%s range=%s", name, self.analytics.get("range"))
        return buf

    def productivity_trend(self) -> io.BytesIO:
        trend = self.analytics["productivity_trend"]
        labels = trend["labels"]
        x = np.arange(len(labels))

        fig, ax = plt.subplots(figsize=(10, 5))
        ax.plot(x, trend["total_points_completed"], marker="o", color="#6C5CE7", label="Points completed")
        ax.fill_between(x, trend["total_points_completed"], alpha=0.15, color="#6C5CE7")
        ax.plot(x, trend["avg_points_per_task"], marker="s", color="#00B894", label="Avg points / task")
        step = max(1, len(labels) // 10)
        ax.set_xticks(x[::step])
        ax.set_xticklabels(labels[::step], rotation=45, ha="right", fontsize=8)
        ax.set_title("Productivity Trend", fontsize=13, fontweight="bold")
        ax.legend(frameon=False)
        _style_axes(ax)
        return _to_png(fig)

    def _category_bar(self, key: str, title: str, ylabel: str) -> io.BytesIO:
        rows = self.analytics["category_breakdown"]
        fig, ax = plt.subplots(figsize=(9, 5))
        if not rows:
            _empty(ax)
        else:
            names = [r["name"] for r in rows]
            values = [r[key] for r in rows]
            colors = [r.get("color") or FALLBACK_COLOR for r in rows]
            bars = ax.bar(range(len(rows)), values, color=colors, edgecolor="#555555", width=0.6, zorder=3)
            for bar, value in zip(bars, values):
                ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height(), f"{value}",
                        ha="center", va="bottom", fontsize=9)
            ax.set_xticks(range(len(rows)))
            ax.set_xticklabels(names, fontsize=9)
            ax.set_ylabel(ylabel)
            _style_axes(ax)
        ax.set_title(title, fontsize=13, fontweight="bold")
        return _to_png(fig)

    def category_tasks(self) -> io.BytesIO:
        return self._category_bar("task_count", "Tasks by Category", "Tasks")

    def category_points(self) -> io.BytesIO:
        return self._category_bar("total_points", "Points by Category", "Points")

    def priority_distribution(self) -> io.BytesIO:
        dist = self.analytics["priority_distribution"]
        labels = [p.capitalize() for p in PRIORITY_COLORS]
        values = [dist.get(p, 0) for p in PRIORITY_COLORS]
        fig, ax = plt.subplots(figsize=(7, 6))
        if not sum(values):
            _empty(ax)
        else:
            ax.pie(
                values,
                labels=labels,
                colors=list(PRIORITY_COLORS.values()),
                autopct=lambda pct: f"{pct:.0f}%" if pct > 0 else "",
                startangle=90,
                wedgeprops=dict(width=0.5, edgecolor="white", linewidth=2),
            )
            ax.axis("equal")
        ax.set_title("Priority Distribution", fontsize=13, fontweight="bold")
        return _to_png(fig)

    def performance_radar(self) -> io.BytesIO:
        perf = self.analytics["performance_metrics"]
        values = [
            perf["task_completion"],
            perf["on_time_delivery"],
            perf["quality_score"],
            perf["collaboration"],
            # scaled x10 onto the 0-100 axis
            min(perf["points_average"] * 10, 100),
            perf["efficiency"],
        ]
        angles = np.linspace(0, 2 * np.pi, len(values), endpoint=False).tolist()
        values += values[:1]
        angles += angles[:1]

        fig = plt.figure(figsize=(7, 7))
        ax = fig.add_subplot(111, polar=True)
        ax.plot(angles, values, color="#6C5CE7", linewidth=2)
        ax.fill(angles, values, color="#6C5CE7", alpha=0.25)
        ax.set_xticks(angles[:-1])
        ax.set_xticklabels(PERFORMANCE_LABELS, fontsize=9)
        ax.set_ylim(0, 100)
        ax.set_title("Performance Metrics", fontsize=13, fontweight="bold", pad=20)
        return _to_png(fig)

    def top_assignees(self) -> io.BytesIO:
        rows = self.charts["top_assignees"]
        fig, ax = plt.subplots(figsize=(9, 5))
        if not rows:
            _empty(ax, "No completed tasks yet")
        else:
            names = [r["name"] for r in rows][::-1]
            points = [r["points"] for r in rows][::-1]
            ax.barh(range(len(rows)), points, color="#74B9FF", edgecolor="#555555", zorder=3)
            ax.set_yticks(range(len(rows)))
            ax.set_yticklabels(names)
            ax.set_xlabel("Points")
            ax.grid(axis="x", alpha=0.3)
            ax.set_axisbelow(True)
        ax.set_title("Top Assignees", fontsize=13, fontweight="bold")
        return _to_png(fig)

    def task_status(self) -> io.BytesIO:
        rows = self.charts["tasks_by_status"]
        labels = [r["status"] for r in rows]
        counts = [r["count"] for r in rows]
        fig, ax = plt.subplots(figsize=(8, 5))
        ax.bar(range(len(rows)), counts, color=[STATUS_COLORS.get(s, FALLBACK_COLOR) for s in labels],
               edgecolor="#555555", width=0.6, zorder=3)
        ax.set_xticks(range(len(rows)))
        ax.set_xticklabels([s.replace("-", " ").title() for s in labels])
        ax.set_ylabel("Tasks")
        ax.set_title("Tasks by Status", fontsize=13, fontweight="bold")
        _style_axes(ax)
        return _to_png(fig)
