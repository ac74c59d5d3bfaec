from __future__ import annotations

from typing import Any, Dict, Iterable

from .models import TaskEntity


# PUBLIC_INTERFACE
def compute_stats(tasks: Iterable[TaskEntity]) -> Dict[str, Any]:
    """
    Derive completion statistics from a task collection.

    Args:
        tasks: The current collection (any iterable of TaskEntity).

    Returns:
        Dict with keys: total, completed, pending, high_priority, by_category.
        pending is always total - completed; high_priority counts only tasks
        that are both high priority and not completed.
    """
    total = 0
    completed = 0
    high_priority = 0
    by_category: Dict[str, int] = {}
    for t in tasks:
        total += 1
        if t["completed"]:
            completed += 1
        elif t["priority"] == "high":
            high_priority += 1
        by_category[t["category"]] = by_category.get(t["category"], 0) + 1
    return {
        "total": total,
        "completed": completed,
        "pending": total - completed,
        "high_priority": high_priority,
        "by_category": by_category,
    }
