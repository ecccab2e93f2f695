"""Thread-safe compute-once cell.

``SingleFlight`` holds one lazily computed value.  The first caller of
``get_or_compute`` runs the factory; callers arriving while that
computation is in flight block until it finishes and receive the same
object.  Once set, the value is returned without locking semantics
beyond a single attribute read.

Failure semantics:
    If the factory raises, every caller waiting on that flight receives
    the same exception and the cell stays empty, so a later call starts
    a fresh flight.  Nothing is retried automatically.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class _Flight(Generic[T]):
    """One in-flight computation that waiters block on."""

    __slots__ = ("done", "error", "value")

    def __init__(self) -> None:
        self.done = threading.Event()
        self.value: T | None = None
        self.error: BaseException | None = None


class SingleFlight(Generic[T]):
    """Lazily initialised value shared by all threads.

    Example::

        cell: SingleFlight[dict] = SingleFlight()
        data = cell.get_or_compute(load_expensive_thing)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: T | None = None
        self._has_value = False
        self._flight: _Flight[T] | None = None

    @property
    def is_set(self) -> bool:
        """Whether a value has been computed and cached."""
        return self._has_value

    def get_or_compute(self, factory: Callable[[], T]) -> T:
        """Return the cached value, computing it with *factory* at most once.

        Raises:
            Exception: Whatever *factory* raised, for the caller that ran
                it and for every caller that waited on the same flight.
        """
        if self._has_value:
            return self._value  # type: ignore[return-value]

        with self._lock:
            if self._has_value:
                return self._value  # type: ignore[return-value]
            flight = self._flight
            leader = flight is None
            if flight is None:
                flight = _Flight()
                self._flight = flight

        if not leader:
            flight.done.wait()
            if flight.error is not None:
                raise flight.error
            return flight.value  # type: ignore[return-value]

        try:
            value = factory()
        except BaseException as exc:
            with self._lock:
                self._flight = None
            flight.error = exc
            flight.done.set()
            raise

        with self._lock:
            self._value = value
            self._has_value = True
            self._flight = None
        flight.value = value
        flight.done.set()
        return value

    def reset(self) -> None:
        """Drop the cached value so the next call recomputes it."""
        with self._lock:
            self._value = None
            self._has_value = False
