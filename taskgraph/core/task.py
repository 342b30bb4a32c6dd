"""Tasks and the handles returned for them at registration."""

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from .cell import ResultCell
from .exceptions import CycleDetectedError
from .future import Binding, bind
from ..utils.helpers import DEFAULT_LOGGER, LogManager, now


class TaskStatus(Enum):
    """Task execution status."""
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class Task:
    """A callable, its argument bindings and the cell it fills.

    The callable, bindings and output cell are fixed at construction.
    ``execute`` runs the callable at most once successfully; afterwards it
    is a no-op.
    """

    def __init__(self, task_id: str, fn: Callable[..., Any],
                 args: Sequence[Any] = (), kwargs: Optional[Dict[str, Any]] = None,
                 output: Optional[ResultCell] = None, logger: Optional[LogManager] = None):
        if not callable(fn):
            raise TypeError(f"Task {task_id} needs a callable, got {type(fn).__name__}")
        self.task_id = task_id
        self.fn = fn
        self.args: List[Binding] = [bind(a) for a in args]
        self.kwargs: Dict[str, Binding] = {k: bind(v) for k, v in (kwargs or {}).items()}
        self.output = output if output is not None else ResultCell()
        self.output.bind_producer(self)

        self.status = TaskStatus.PENDING
        self.created_at = now()
        self.started_at: Optional[datetime] = None
        self.finished_at: Optional[datetime] = None
        self.logger = logger or DEFAULT_LOGGER

    def dependencies(self) -> List[ResultCell]:
        """Distinct cells read by this task, in argument order."""
        seen = set()
        cells = []
        for binding in list(self.args) + list(self.kwargs.values()):
            cell = binding.dependency()
            if cell is None or id(cell) in seen:
                continue
            seen.add(id(cell))
            cells.append(cell)
        return cells

    def ready(self) -> bool:
        return self.output.ready

    def execute(self):
        """Compute and publish the result unless it is already available."""
        if self.output.ready:
            return
        if self.status == TaskStatus.RUNNING:
            raise CycleDetectedError(f"Task {self.task_id} depends on its own result")

        self.status = TaskStatus.RUNNING
        self.started_at = now()
        self.finished_at = None
        self.logger.debug(f"Executing task {self.task_id}")
        try:
            args = [binding.get() for binding in self.args]
            kwargs = {name: binding.get() for name, binding in self.kwargs.items()}
            result = self.fn(*args, **kwargs)
        except BaseException as e:
            self.status = TaskStatus.FAILED
            self.finished_at = now()
            self.logger.error(f"Task {self.task_id} failed: {e}", task_id=self.task_id)
            raise

        self.output.publish(result)
        self.status = TaskStatus.SUCCESS
        self.finished_at = now()
        self.logger.debug(f"Task {self.task_id} finished in {self.get_duration():.6f}s")

    def get_duration(self) -> Optional[float]:
        """Duration of the last run in seconds."""
        if self.started_at and self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return None

    def get_info(self) -> Dict[str, Any]:
        """Get task information."""
        return {
            "id": self.task_id,
            "status": self.status.value,
            "ready": self.output.ready,
            "dependency_count": len(self.dependencies()),
            "created_at": self.created_at.isoformat(),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration": self.get_duration()
        }

    def __repr__(self) -> str:
        return f"<Task {self.task_id} {self.status.value}>"


class TaskHandle:
    """Opaque reference to a registered task's result."""

    __slots__ = ("_cell",)

    def __init__(self, cell: ResultCell):
        self._cell = cell

    def ready(self) -> bool:
        return self._cell.ready

    def __repr__(self) -> str:
        return f"<TaskHandle {'ready' if self._cell.ready else 'pending'}>"
