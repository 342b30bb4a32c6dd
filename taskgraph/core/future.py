"""Typed futures and the argument bindings a task is registered with."""

from typing import Any, Generic, Optional, Type, TypeVar

from .cell import ResultCell

T = TypeVar("T")


class Future(Generic[T]):
    """Read-only, typed view over a result cell.

    Reading forces the cell, which runs its producer (and, transitively,
    everything the producer depends on) the first time.
    """

    def __init__(self, cell: ResultCell, result_type: Optional[Type[T]] = None):
        if not isinstance(cell, ResultCell):
            raise TypeError(f"Future needs a ResultCell, got {type(cell).__name__}")
        self._cell = cell
        self.result_type = result_type

    @property
    def cell(self) -> ResultCell:
        return self._cell

    def ready(self) -> bool:
        """Whether the value is available without forcing."""
        return self._cell.ready

    def get(self) -> T:
        self._cell.ensure_ready()
        if self.result_type is None:
            return self._cell.value.unwrap()
        return self._cell.value.as_(self.result_type)

    def __repr__(self) -> str:
        type_name = self.result_type.__name__ if self.result_type else "Any"
        return f"Future[{type_name}]({self._cell!r})"


class Binding:
    """One argument of a task."""

    def get(self) -> Any:
        raise NotImplementedError

    def dependency(self) -> Optional[ResultCell]:
        """The cell this argument is read from, if any."""
        return None


class ValueBinding(Binding):
    """A plain captured value; no dependency."""

    def __init__(self, value: Any):
        self.value = value

    def get(self) -> Any:
        return self.value

    def __repr__(self) -> str:
        return f"ValueBinding({self.value!r})"


class FutureBinding(Binding):
    """An argument read from another task's result."""

    def __init__(self, future: Future):
        self.future = future

    def get(self) -> Any:
        return self.future.get()

    def dependency(self) -> Optional[ResultCell]:
        return self.future.cell

    def __repr__(self) -> str:
        return f"FutureBinding({self.future!r})"


def bind(argument: Any) -> Binding:
    """Wrap a registration argument in the matching binding."""
    if isinstance(argument, Binding):
        return argument
    if isinstance(argument, Future):
        return FutureBinding(argument)
    return ValueBinding(argument)
