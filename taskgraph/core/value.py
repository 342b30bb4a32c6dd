"""Type-erased value container."""

import copy
from typing import Any, Optional, Type, TypeVar

from .exceptions import TypeMismatchError

T = TypeVar("T")

_EMPTY = object()


class AnyValue:
    """Holds exactly one value of any type, or nothing.

    The concrete type is fixed at construction. Typed extraction with
    :meth:`as_` is an exact type check: ``AnyValue(True).as_(int)`` fails.
    Copying the container deep-copies the held value.
    """

    __slots__ = ("_value",)

    def __init__(self, value: Any = _EMPTY):
        self._value = value

    def has_value(self) -> bool:
        return self._value is not _EMPTY

    @property
    def value_type(self) -> Optional[type]:
        """Concrete type of the held value, ``None`` when empty."""
        if self._value is _EMPTY:
            return None
        return type(self._value)

    def as_(self, value_type: Type[T]) -> T:
        """Return the stored value if its type is exactly ``value_type``."""
        actual = self.value_type
        if actual is None or actual is not value_type:
            raise TypeMismatchError(value_type, actual)
        return self._value

    def unwrap(self) -> Any:
        """Return the stored value without a type check."""
        if self._value is _EMPTY:
            raise TypeMismatchError()
        return self._value

    def __copy__(self) -> "AnyValue":
        return self.__deepcopy__({})

    def __deepcopy__(self, memo) -> "AnyValue":
        if self._value is _EMPTY:
            return AnyValue()
        return AnyValue(copy.deepcopy(self._value, memo))

    def __bool__(self) -> bool:
        return self.has_value()

    def __repr__(self) -> str:
        if self._value is _EMPTY:
            return "AnyValue()"
        return f"AnyValue({self.value_type.__name__})"
