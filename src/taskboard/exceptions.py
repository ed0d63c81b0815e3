"""Exceptions for taskboard."""


class TaskboardError(Exception):
    """Base exception for taskboard errors."""

    pass


class ConnectivityError(TaskboardError):
    """Raised when the remote backend is unreachable or rejects the credentials."""

    pass


class ValidationError(TaskboardError):
    """Raised when a task payload is rejected before reaching any backend."""

    pass


class NotFoundError(TaskboardError):
    """Raised when a task id does not exist in the active backend."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class BackendError(TaskboardError):
    """Raised for any other backend failure."""

    pass
