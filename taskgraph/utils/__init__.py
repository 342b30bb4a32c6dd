"""Utility helpers."""

from .helpers import (
    DEFAULT_CONFIG,
    DEFAULT_LOGGER,
    LogManager,
    PerformanceMonitor,
    SimpleConfig,
    timer,
    validate_task_id,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_LOGGER",
    "LogManager",
    "PerformanceMonitor",
    "SimpleConfig",
    "timer",
    "validate_task_id",
]
