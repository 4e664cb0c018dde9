"""
Date-range and relative-time helpers shared by tasks, dashboard and reports.
"""
from datetime import datetime, timedelta
from typing import Optional

from pulseboard.db.models.base import as_utc, now_utc

RANGE_DAYS = {
    "7days": 7,
    "30days": 30,
    "90days": 90,
}
VALID_RANGES = tuple(RANGE_DAYS) + ("all",)


def range_cutoff(range_key: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """Return the earliest timestamp included by ``range_key``; None means unbounded."""
    days = RANGE_DAYS.get(range_key or "all")
    if days is None:
        return None
    return (now or now_utc()) - timedelta(days=days)


def trend_days(range_key: Optional[str]) -> int:
    """Number of daily buckets in the productivity trend ("all" shows a week)."""
    return RANGE_DAYS.get(range_key or "all", 7)


def time_ago(value: Optional[datetime], now: Optional[datetime] = None) -> str:
    if value is None:
        return "just now"
    delta = (now or now_utc()) - as_utc(value)
    minutes = int(delta.total_seconds() // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes} minutes ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours} hours ago"
    days = hours // 24
    return f"{days} days ago"
