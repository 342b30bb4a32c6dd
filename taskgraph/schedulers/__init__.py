"""Schedulers module for dependency-ordered and lazy task execution."""

from .scheduler import SchedulerConfig, TaskScheduler, TopologicalExecution

__all__ = ["SchedulerConfig", "TaskScheduler", "TopologicalExecution"]
