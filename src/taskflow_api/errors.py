from __future__ import annotations


class TaskFlowError(Exception):
    """Base class for domain errors raised by the task store."""


# PUBLIC_INTERFACE
class TaskNotFoundError(TaskFlowError):
    """Raised when a referenced task id does not exist in the collection."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


# PUBLIC_INTERFACE
class StorageError(TaskFlowError):
    """
    Raised when the persisted collection cannot be read or written.

    The original OSError (or serialization error) is chained as __cause__.
    """
