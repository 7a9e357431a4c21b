import threading
from dataclasses import replace
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")


class SlotClosed(Exception):
    """Raised by LatestValueSlot.take() once the slot is closed and drained."""


class LatestValueSlot(Generic[T]):
    """
    Single-slot, latest-wins hand-off between one producer and one consumer.

    ``put`` never blocks: an unconsumed value is replaced and counted as
    dropped. ``take`` blocks until a value arrives or the slot is closed.
    """

    def __init__(self):
        self._cond = threading.Condition()
        self._value: Optional[T] = None
        self._has_value = False
        self._closed = False
        self.dropped = 0

    def put(self, value: T) -> bool:
        """Store ``value``. Returns False if it superseded an unconsumed one."""
        with self._cond:
            if self._closed:
                return False
            superseded = self._has_value
            if superseded:
                self.dropped += 1
            self._value = value
            self._has_value = True
            self._cond.notify()
            return not superseded

    def take(self, timeout: Optional[float] = None) -> Optional[T]:
        """
        Remove and return the latest value.

        Returns None on timeout. Raises SlotClosed once closed with nothing
        left to consume.
        """
        with self._cond:
            if not self._has_value and not self._closed:
                self._cond.wait(timeout)
            if self._has_value:
                value = self._value
                self._value = None
                self._has_value = False
                return value
            if self._closed:
                raise SlotClosed()
            return None

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        return self._closed


class ObservableState(Generic[T]):
    """Holds the latest value and notifies subscribers whenever it changes."""

    def __init__(self, initial: T):
        self._lock = threading.Lock()
        self._value = initial
        self._listeners: List[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        with self._lock:
            self._value = value
            listeners = list(self._listeners)
        for listener in listeners:
            listener(value)

    def update(self, **changes) -> T:
        """Replace fields of a dataclass value and publish the copy."""
        with self._lock:
            value = replace(self._value, **changes)
        self.set(value)
        return value

    def subscribe(self, listener: Callable[[T], None]) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[T], None]) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
