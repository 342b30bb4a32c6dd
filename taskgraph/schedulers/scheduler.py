"""Task registration, lazy result retrieval and topological execution."""

import json
from collections import deque
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar, Union

from ..core.cell import ResultCell
from ..core.future import Future
from ..core.task import Task, TaskHandle, TaskStatus
from ..utils.helpers import (
    DEFAULT_CONFIG,
    DEFAULT_LOGGER,
    LogManager,
    PerformanceMonitor,
    generate_graph_visualization_data,
    timer,
    validate_task_id,
)

T = TypeVar("T")


class SchedulerConfig:
    """Configuration for a task scheduler."""

    def __init__(self, pre_resolve_external_deps: bool = None,
                 validate_task_ids: bool = None, log_level: str = None):
        if pre_resolve_external_deps is None:
            pre_resolve_external_deps = DEFAULT_CONFIG.get("pre_resolve_external_deps", True)
        if validate_task_ids is None:
            validate_task_ids = DEFAULT_CONFIG.get("validate_task_ids", True)
        self.pre_resolve_external_deps = bool(pre_resolve_external_deps)
        self.validate_task_ids = bool(validate_task_ids)
        if log_level is not None and str(log_level).upper() not in LogManager.LOG_LEVELS:
            raise ValueError(f"Unknown log level: {log_level}")
        self.log_level = log_level

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "pre_resolve_external_deps": self.pre_resolve_external_deps,
            "validate_task_ids": self.validate_task_ids,
            "log_level": self.log_level
        }

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'SchedulerConfig':
        """Create config from a dictionary, ignoring unknown keys.

        A nested ``"scheduler"`` section takes precedence over top-level keys.
        """
        section = config_dict.get("scheduler") or {}
        if not isinstance(section, dict):
            raise ValueError("The \"scheduler\" config section must be an object")
        data = dict(config_dict)
        data.update(section)
        return cls(
            pre_resolve_external_deps=data.get("pre_resolve_external_deps"),
            validate_task_ids=data.get("validate_task_ids"),
            log_level=data.get("log_level")
        )

    @classmethod
    def from_file(cls, filepath: str) -> 'SchedulerConfig':
        """Load config from a JSON file."""
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config file {filepath} must contain a JSON object")
        return cls.from_dict(data)


class TopologicalExecution:
    """Outcome of a topological pass.

    ``order`` lists task indices in the order they were visited. When the
    graph could not be fully ordered ``ok`` is False and ``stuck`` lists the
    indices still waiting on unresolved dependencies.
    """

    def __init__(self, ok: bool = False, order: List[int] = None, stuck: List[int] = None):
        self.ok = ok
        self.order = order if order is not None else []
        self.stuck = stuck if stuck is not None else []

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "order": list(self.order), "stuck": list(self.stuck)}

    def __bool__(self) -> bool:
        return self.ok

    def __repr__(self) -> str:
        return f"TopologicalExecution(ok={self.ok}, order={self.order}, stuck={self.stuck})"


class TaskScheduler:
    """Registry of tasks that can be run in dependency order or pulled lazily.

    Tasks are registered with :meth:`add`. Arguments that are :class:`Future`
    objects become dependencies on the task producing them; anything else is
    passed through unchanged. Results are obtained either by running the
    whole graph with :meth:`execute_topologically_detailed` or by forcing a
    single result with :meth:`get_result`. Both paths share the same
    memoized task execution, so they can be mixed freely.
    """

    def __init__(self, config: SchedulerConfig = None):
        self.config = config or SchedulerConfig()
        self._tasks: List[Task] = []
        self._task_ids: Dict[str, int] = {}
        if self.config.log_level:
            self.logger = LogManager(self.config.log_level)
        else:
            self.logger = DEFAULT_LOGGER
        self.monitor = PerformanceMonitor()

    def size(self) -> int:
        """Number of registered tasks."""
        return len(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def add(self, fn: Callable[..., Any], *args: Any, task_id: str = None,
            output: ResultCell = None, **kwargs: Any) -> TaskHandle:
        """Register ``fn`` to be called with ``args`` and ``kwargs``.

        Nothing runs at registration. ``output`` lets the caller supply the
        cell the task fills, e.g. one a future was created over earlier.
        """
        index = len(self._tasks)
        if task_id is None:
            task_id = f"task_{index}"
        elif self.config.validate_task_ids and not validate_task_id(task_id):
            raise ValueError(f"Invalid task ID: {task_id!r}")
        if task_id in self._task_ids:
            raise ValueError(f"Task {task_id} is already registered")

        task = Task(task_id, fn, args, kwargs, output=output, logger=self.logger)
        self._tasks.append(task)
        self._task_ids[task_id] = index
        self.logger.debug(f"Registered task {task_id} with {len(task.dependencies())} dependencies")
        return TaskHandle(task.output)

    def add_method(self, method: Union[str, Callable[..., Any]], target: Any,
                   *args: Any, **kwargs: Any) -> TaskHandle:
        """Register a call of ``method`` on ``target``.

        ``method`` is either the name of a method of ``target`` or a function
        taking ``target`` as its first argument.
        """
        if isinstance(method, str):
            name = method
            if not callable(getattr(target, name, None)):
                raise TypeError(f"{type(target).__name__} has no method {name!r}")

            def bound(*call_args, **call_kwargs):
                return getattr(target, name)(*call_args, **call_kwargs)
        else:
            if not callable(method):
                raise TypeError(f"Expected a method or method name, got {type(method).__name__}")

            def bound(*call_args, **call_kwargs):
                return method(target, *call_args, **call_kwargs)

        return self.add(bound, *args, **kwargs)

    def get_future(self, handle: TaskHandle, result_type: Optional[Type[T]] = None) -> Future:
        """Typed view over a task's result; does not force it."""
        return Future(self._cell_of(handle), result_type)

    def get_result(self, handle: TaskHandle, result_type: Optional[Type[T]] = None) -> T:
        """Force a task's result and return it."""
        return self.get_future(handle, result_type).get()

    def get_task_index(self, task_id: str) -> Optional[int]:
        """Registration index of the task with ``task_id``."""
        return self._task_ids.get(task_id)

    def dependency_edges(self) -> List[Tuple[int, int]]:
        """Edges ``(u, v)`` between registered tasks, without forcing anything."""
        index_by_task = self._index_by_task()
        edges = []
        for v, task in enumerate(self._tasks):
            for u in self._registered_producers(task, index_by_task):
                edges.append((u, v))
        return edges

    def execute_topologically_detailed(self, pre_resolve_external_deps: bool = None) -> TopologicalExecution:
        """Execute every task in dependency order.

        Dependencies whose producer is not registered with this scheduler are
        external. With ``pre_resolve_external_deps`` they are forced up front;
        without it they are ignored when building the graph. Among tasks that
        are ready to run, the one that became ready first runs first, with
        registration order as the initial order.
        """
        if pre_resolve_external_deps is None:
            pre_resolve_external_deps = self.config.pre_resolve_external_deps

        with timer("topological_pass", self.monitor):
            result = self._run_topological_pass(pre_resolve_external_deps)

        if result.ok:
            self.logger.info(f"Topological pass executed {len(result.order)} tasks")
        else:
            stuck_ids = [self._tasks[i].task_id for i in result.stuck]
            self.logger.warning(
                f"Topological pass stuck on {len(result.stuck)} tasks: {', '.join(stuck_ids)}",
                stuck=list(result.stuck)
            )
        return result

    def execute_topologically(self) -> bool:
        """Execute every task in dependency order; report success."""
        return self.execute_topologically_detailed().ok

    def get_task_info(self) -> List[Dict[str, Any]]:
        """Information about every registered task, in registration order."""
        return [task.get_info() for task in self._tasks]

    def get_stats(self) -> Dict[str, Any]:
        """Get execution statistics."""
        statuses = [task.status for task in self._tasks]
        return {
            "registered_tasks": len(self._tasks),
            "ready_tasks": sum(1 for task in self._tasks if task.ready()),
            "failed_tasks": statuses.count(TaskStatus.FAILED),
            "pending_tasks": statuses.count(TaskStatus.PENDING),
            "topological_passes": self.monitor.get_stats("topological_pass")
        }

    def to_visualization_data(self) -> Dict[str, Any]:
        """Convert the task graph to frontend visualization format."""
        return generate_graph_visualization_data(self)

    def _run_topological_pass(self, pre_resolve_external_deps: bool) -> TopologicalExecution:
        index_by_task = self._index_by_task()
        count = len(self._tasks)
        successors: List[List[int]] = [[] for _ in range(count)]
        in_degree = [0] * count

        for v, task in enumerate(self._tasks):
            seen = set()
            for cell in task.dependencies():
                u = self._producer_index(cell, index_by_task)
                if u is None:
                    if pre_resolve_external_deps and not cell.ready:
                        self.logger.debug(f"Resolving external dependency of task {task.task_id}")
                        cell.ensure_ready()
                    continue
                if u not in seen:
                    seen.add(u)
                    successors[u].append(v)
                    in_degree[v] += 1

        queue = deque(i for i in range(count) if in_degree[i] == 0)
        order: List[int] = []

        while queue:
            u = queue.popleft()
            order.append(u)

            if not self._tasks[u].ready():
                self._tasks[u].execute()

            for v in successors[u]:
                if in_degree[v] > 0:
                    in_degree[v] -= 1
                    if in_degree[v] == 0:
                        queue.append(v)

        if len(order) != count:
            stuck = [i for i in range(count) if in_degree[i] != 0]
            return TopologicalExecution(ok=False, order=order, stuck=stuck)
        return TopologicalExecution(ok=True, order=order)

    def _index_by_task(self) -> Dict[int, int]:
        return {id(task): i for i, task in enumerate(self._tasks)}

    def _registered_producers(self, task: Task, index_by_task: Dict[int, int]) -> List[int]:
        producers = []
        for cell in task.dependencies():
            u = self._producer_index(cell, index_by_task)
            if u is not None and u not in producers:
                producers.append(u)
        return producers

    @staticmethod
    def _producer_index(cell: ResultCell, index_by_task: Dict[int, int]) -> Optional[int]:
        producer = cell.producer
        if producer is None:
            return None
        return index_by_task.get(id(producer))

    @staticmethod
    def _cell_of(handle: TaskHandle) -> ResultCell:
        if not isinstance(handle, TaskHandle):
            raise TypeError(f"Expected a TaskHandle, got {type(handle).__name__}")
        return handle._cell
