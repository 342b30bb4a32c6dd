"""Errors raised while extracting or forcing task results."""


class TaskGraphError(Exception):
    """Base class for task graph errors."""


class TypeMismatchError(TaskGraphError, TypeError):
    """Requested type does not match the stored concrete type."""

    def __init__(self, expected: type = None, actual: type = None):
        self.expected = expected
        self.actual = actual
        wanted = f"type {expected.__name__}" if expected is not None else "any type"
        if actual is None:
            message = f"Expected a value of {wanted}, but nothing is stored"
        else:
            message = f"Expected a value of {wanted}, got {actual.__name__}"
        super().__init__(message)


class NoProducerError(TaskGraphError):
    """The cell is not ready and its producing task no longer exists."""


class CycleDetectedError(TaskGraphError):
    """A cell was forced while it was already being forced."""


class ProducerIncompleteError(TaskGraphError):
    """The producer ran but did not publish its result."""
