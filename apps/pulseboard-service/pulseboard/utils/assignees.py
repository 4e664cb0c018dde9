"""
Helpers for the comma-separated ``tasks.assignee_ids`` column.
"""
from typing import List, Optional


def parse_assignee_ids(value: Optional[str]) -> List[int]:
    """Return the integer ids in a stored assignee string, in order, without duplicates."""
    if not value:
        return []
    ids: List[int] = []
    for part in str(value).split(","):
        part = part.strip()
        if not part:
            continue
        try:
            uid = int(part)
        except ValueError:
            continue
        if uid not in ids:
            ids.append(uid)
    return ids


def normalize_assignee_ids(value: Optional[str]) -> Optional[str]:
    """Canonical storage form: ``"1,3"``; empty results become None."""
    ids = parse_assignee_ids(value)
    if not ids:
        return None
    return ",".join(str(i) for i in ids)


def remove_assignee(value: Optional[str], user_id: int) -> Optional[str]:
    ids = [i for i in parse_assignee_ids(value) if i != user_id]
    return ",".join(str(i) for i in ids) if ids else None
