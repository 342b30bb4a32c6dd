"""Dependency-graph task executor with lazy, memoized results."""

from .core import (
    AnyValue,
    CycleDetectedError,
    Future,
    NoProducerError,
    ProducerIncompleteError,
    ResultCell,
    TaskGraphError,
    TaskHandle,
    TaskStatus,
    TypeMismatchError,
)
from .schedulers import SchedulerConfig, TaskScheduler, TopologicalExecution

__version__ = "1.0.0"
__all__ = [
    "AnyValue",
    "ResultCell",
    "Future",
    "TaskHandle",
    "TaskStatus",
    "TaskScheduler",
    "SchedulerConfig",
    "TopologicalExecution",
    "TaskGraphError",
    "TypeMismatchError",
    "NoProducerError",
    "CycleDetectedError",
    "ProducerIncompleteError",
]
