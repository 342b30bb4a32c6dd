"""Lazily populated, single-assignment result cells."""

import weakref
from typing import Any, Optional

from typing_extensions import Protocol, runtime_checkable

from .exceptions import CycleDetectedError, NoProducerError, ProducerIncompleteError
from .value import AnyValue


@runtime_checkable
class Producer(Protocol):
    """Anything that can populate a result cell."""

    def execute(self) -> None:
        ...


class _ForcingGuard:
    """Holds a cell's ``running`` flag for the duration of a force."""

    def __init__(self, cell: "ResultCell"):
        self.cell = cell

    def __enter__(self):
        self.cell.running = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cell.running = False


class ResultCell:
    """Shared slot for the output of one task.

    A cell becomes ``ready`` exactly once, when its producer publishes a
    value. Readers hold the cell itself; the cell only holds a weak reference
    to its producer, so it can outlive the task that would fill it.
    """

    def __init__(self):
        self.ready = False
        self.running = False
        self.value = AnyValue()
        self._producer: Optional[weakref.ref] = None

    @classmethod
    def resolved(cls, value: Any) -> "ResultCell":
        """Build a cell that is already populated and has no producer."""
        cell = cls()
        cell.publish(value)
        return cell

    @property
    def producer(self) -> Optional[Producer]:
        """The live producing task, or ``None``."""
        if self._producer is None:
            return None
        return self._producer()

    def bind_producer(self, producer: Producer):
        """Wire the weak back-reference to the task that fills this cell."""
        if not isinstance(producer, Producer):
            raise TypeError(f"{producer!r} cannot produce a result")
        current = self.producer
        if current is not None and current is not producer:
            raise ValueError("Result cell already has a producer")
        if self.ready:
            raise ValueError("Result cell is already populated")
        self._producer = weakref.ref(producer)

    def publish(self, value: Any):
        """Store the result and mark the cell ready."""
        if self.ready:
            raise ValueError("Result cell is already populated")
        self.value = AnyValue(value)
        self.ready = True

    def ensure_ready(self):
        """Force the cell, running its producer if needed.

        Raises NoProducerError if the producer is gone, CycleDetectedError if
        the cell is already being forced further up the call stack and
        ProducerIncompleteError if the producer ran without publishing.
        The ``running`` flag is released on every exit path, so a failed
        force can be attempted again.
        """
        if self.ready:
            return

        producer = self.producer
        if producer is None:
            raise NoProducerError("Result cell is not ready and has no live producer")
        if self.running:
            raise CycleDetectedError(f"Cycle detected while forcing the result of {producer!r}")

        with _ForcingGuard(self):
            producer.execute()

        if not self.ready:
            raise ProducerIncompleteError(f"{producer!r} ran but did not publish a result")

    def __repr__(self) -> str:
        state = "ready" if self.ready else ("running" if self.running else "pending")
        return f"<ResultCell {state} {self.value!r}>"
