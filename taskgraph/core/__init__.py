"""Core module: values, result cells, futures and tasks."""

from .cell import ResultCell
from .exceptions import (
    CycleDetectedError,
    NoProducerError,
    ProducerIncompleteError,
    TaskGraphError,
    TypeMismatchError,
)
from .future import Future, FutureBinding, ValueBinding, bind
from .task import Task, TaskHandle, TaskStatus
from .value import AnyValue

__all__ = [
    "AnyValue",
    "ResultCell",
    "Future",
    "FutureBinding",
    "ValueBinding",
    "bind",
    "Task",
    "TaskHandle",
    "TaskStatus",
    "TaskGraphError",
    "TypeMismatchError",
    "NoProducerError",
    "CycleDetectedError",
    "ProducerIncompleteError",
]
