from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A lightweight domain model representing a Task for the storage backends.

    Fields:
    - id: Unique positive integer, assigned as max(id) + 1
    - title: Short non-empty title (trimmed on input via schemas)
    - category: Free-text label used for grouping in stats
    - priority: 'low', 'medium' or 'high'
    - due_date: Optional due date
    - completed: Boolean completion flag
    - created_at: UTC creation timestamp; never changes after creation
    """

    id: int
    title: str
    category: str
    priority: str
    due_date: Optional[date]
    completed: bool
    created_at: Optional[datetime]


class QuoteEntity(TypedDict):
    text: str
    author: str


DEFAULT_QUOTE: QuoteEntity = {
    "text": "The only way to do great work is to love what you do.",
    "author": "Steve Jobs",
}

SEED_QUOTES: List[QuoteEntity] = [
    {"text": "The way to get started is to quit talking and begin doing.", "author": "Walt Disney"},
    {"text": "Your time is limited, so don't waste it living someone else's life.", "author": "Steve Jobs"},
    {"text": "The future depends on what you do today.", "author": "Mahatma Gandhi"},
    {"text": "Don't watch the clock; do what it does. Keep going.", "author": "Sam Levenson"},
]


def seed_tasks(created_at: datetime) -> List[TaskEntity]:
    """Return the starter collection written the first time the store runs."""
    rows = [
        (1, "Complete web app assignment", False, "high", "Study", date(2025, 1, 15)),
        (2, "Review project documentation", True, "medium", "Work", date(2025, 1, 12)),
        (3, "Plan weekly schedule", False, "medium", "Personal", date(2025, 1, 14)),
        (4, "Research responsive design patterns", False, "low", "Study", date(2025, 1, 20)),
    ]
    return [
        {
            "id": task_id,
            "title": title,
            "category": category,
            "priority": priority,
            "due_date": due,
            "completed": completed,
            "created_at": created_at,
        }
        for task_id, title, completed, priority, category, due in rows
    ]
