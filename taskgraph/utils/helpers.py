"""Helper utilities: logging, configuration, timing and id validation."""

import os
import re
import time
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from dateutil import tz

if TYPE_CHECKING:
    from ..schedulers.scheduler import TaskScheduler


def generate_graph_visualization_data(scheduler: 'TaskScheduler') -> Dict[str, Any]:
    """Generate data for frontend task graph visualization."""
    nodes = []
    edges = []

    for i, info in enumerate(scheduler.get_task_info()):
        nodes.append({
            "id": info["id"],
            "index": i,
            "status": info["status"],
            "ready": info["ready"],
            "position": {"x": 100 + i * 200, "y": 100}
        })

    task_ids = [node["id"] for node in nodes]
    for edge_id, (u, v) in enumerate(scheduler.dependency_edges()):
        edges.append({
            "id": f"edge_{edge_id}",
            "source": task_ids[u],
            "target": task_ids[v],
            "type": "dependency"
        })

    return {
        "nodes": nodes,
        "edges": edges,
        "width": max(800, 200 * len(nodes)),
        "height": 400,
        "interactive": True
    }


def now() -> datetime:
    """Timezone-aware local timestamp."""
    return datetime.now(tz.tzlocal())


class SimpleConfig:
    """Simplified configuration management."""

    def __init__(self):
        self._config = {
            "log_level": os.environ.get("TASKGRAPH_LOG_LEVEL", "WARNING"),
            "pre_resolve_external_deps": True,
            "validate_task_ids": True,
            "max_log_history": 1000
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any):
        """Set configuration value."""
        self._config[key] = value

    def update(self, config_dict: Dict[str, Any]):
        """Update configuration."""
        self._config.update(config_dict)


class LogManager:
    """Levelled logger with an in-memory history."""

    LOG_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40, "CRITICAL": 50}

    def __init__(self, log_level: str = "INFO", log_format: str = None,
                 max_history: int = 1000):
        self.set_level(log_level)
        self.log_format = log_format or "[{level}] {timestamp}: {message}"
        self.log_history: List[Dict[str, Any]] = []
        self.max_history = max_history

    def set_level(self, log_level: str):
        """Change the minimum level that gets printed and recorded."""
        level = log_level.upper()
        if level not in self.LOG_LEVELS:
            raise ValueError(f"Unknown log level: {log_level}")
        self.log_level = level

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged."""
        return self.LOG_LEVELS.get(level.upper(), 20) >= self.LOG_LEVELS.get(self.log_level, 20)

    def _log(self, level: str, message: str, extra_data: Dict[str, Any] = None):
        """Internal logging method."""
        if self._should_log(level):
            timestamp = now().isoformat()
            formatted_message = self.log_format.format(
                level=level,
                timestamp=timestamp,
                message=message
            )
            print(formatted_message)

            self.log_history.append({
                "level": level,
                "message": message,
                "timestamp": timestamp,
                "extra_data": extra_data or {}
            })

            if len(self.log_history) > self.max_history:
                self.log_history = self.log_history[-self.max_history:]

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self._log("DEBUG", message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self._log("INFO", message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self._log("WARNING", message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message."""
        self._log("ERROR", message, kwargs)

    def get_recent_logs(self, count: int = 100, level: str = None) -> List[Dict[str, Any]]:
        """Get recent log entries."""
        logs = self.log_history[-count:] if count else self.log_history
        if level:
            logs = [log for log in logs if log["level"] == level.upper()]
        return logs

    def clear_history(self):
        self.log_history.clear()


DEFAULT_CONFIG = SimpleConfig()
DEFAULT_LOGGER = LogManager(DEFAULT_CONFIG.get("log_level"),
                            max_history=DEFAULT_CONFIG.get("max_log_history"))

_TASK_ID_PATTERN = re.compile(r'^[a-zA-Z0-9_.-]+$')


def validate_task_id(task_id: str) -> bool:
    """Task ids are 1-250 characters of letters, digits, '_', '-' or '.'."""
    if not task_id or not isinstance(task_id, str):
        return False
    if len(task_id) > 250:
        return False
    return bool(_TASK_ID_PATTERN.match(task_id))


class PerformanceMonitor:
    """Simple performance monitoring utility."""

    def __init__(self):
        self.metrics: Dict[str, List[float]] = {}
        self.start_times: Dict[str, float] = {}

    def start_timer(self, name: str):
        """Start timing an operation."""
        self.start_times[name] = time.perf_counter()

    def end_timer(self, name: str) -> float:
        """End timing and record duration."""
        if name not in self.start_times:
            raise ValueError(f"Timer {name} was not started")

        duration = time.perf_counter() - self.start_times.pop(name)
        self.metrics.setdefault(name, []).append(duration)
        return duration

    def get_stats(self, name: str) -> Dict[str, float]:
        """Get statistics for a metric."""
        if name not in self.metrics:
            return {}

        values = self.metrics[name]
        return {
            "count": len(values),
            "total": sum(values),
            "average": sum(values) / len(values),
            "min": min(values),
            "max": max(values)
        }

    def reset_metrics(self, name: str = None):
        """Reset metrics."""
        if name:
            self.metrics.pop(name, None)
        else:
            self.metrics.clear()


class timer:
    """Context manager for timing operations."""

    def __init__(self, name: str, monitor: Optional[PerformanceMonitor] = None):
        self.name = name
        self.monitor = monitor or PerformanceMonitor()
        self.duration = 0.0

    def __enter__(self):
        self.monitor.start_timer(self.name)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = self.monitor.end_timer(self.name)
