"""Compute-once cells for derived values."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

_UNSET = object()


class Memo(Generic[T]):
    """
    Lazily computes a value the first time it is read, then keeps it.

    Presence is tracked separately from the value, so a factory that
    returns ``None`` is still only called once.

    Example:
        og = Memo(lambda: build_open_graph(node))
        og.get()      # builds
        og.get()      # returns the same object
    """

    __slots__ = ("_factory", "_value")

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._value: object = _UNSET

    @property
    def is_set(self) -> bool:
        return self._value is not _UNSET

    def get(self) -> T:
        if self._value is _UNSET:
            self._value = self._factory()
        return self._value  # type: ignore[return-value]

    def set(self, value: T) -> None:
        """Store an explicit value, skipping the factory."""
        self._value = value

    def reset(self) -> None:
        self._value = _UNSET

    def __repr__(self) -> str:
        state = repr(self._value) if self.is_set else "<unset>"
        return f"Memo({state})"
