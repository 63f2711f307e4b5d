"""Thread-safe primitives shared by the trigger sources.

The watcher, the alarm clock and the control API all run on their own
threads and may refresh displays at the same time; these containers keep
the little shared state they have consistent.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import TypeVar, Generic, Callable, Any

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")


@dataclass
class LockedValue(Generic[T]):
    """Thread-safe value container.

    Usage:
        last = LockedValue(None)
        last.set(datetime.now())
    """

    _value: T
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def get(self) -> T:
        """Get the current value (thread-safe read)."""
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        """Set the value (thread-safe write)."""
        with self._lock:
            self._value = value


class ThreadSafeDict(Generic[K, V]):
    """Thread-safe dictionary.

    Provides a dict-like interface with thread safety for all operations.
    """

    def __init__(self, initial: dict[K, V] | None = None) -> None:
        self._data: dict[K, V] = dict(initial) if initial else {}
        self._lock = threading.RLock()

    def __setitem__(self, key: K, value: V) -> None:
        with self._lock:
            self._data[key] = value

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def get(self, key: K, default: V | None = None) -> V | None:
        """Get value for key, or default if not found."""
        with self._lock:
            return self._data.get(key, default)

    def pop(self, key: K, *args: Any) -> V:
        """Remove and return value for key."""
        with self._lock:
            return self._data.pop(key, *args)

    def swap(self, key: K, value: V) -> V | None:
        """Store value under key and return the value it replaced."""
        with self._lock:
            previous = self._data.get(key)
            self._data[key] = value
            return previous

    def pop_where(self, predicate: Callable[[K, V], bool]) -> list[tuple[K, V]]:
        """Atomically remove and return every pair matching predicate."""
        with self._lock:
            matched = [(k, v) for k, v in self._data.items() if predicate(k, v)]
            for key, _ in matched:
                del self._data[key]
            return matched


class StoppableThread(threading.Thread):
    """Thread with clean stop mechanism using Event.

    Usage:
        def worker(thread: StoppableThread):
            while not thread.wait(1.0):  # Sleep with stop check
                # Do work

        thread = StoppableThread(target=worker)
        thread.start()
        # Later:
        thread.stop()  # Signals stop and waits
    """

    def __init__(
        self,
        target: Callable[..., Any] | None = None,
        name: str | None = None,
        args: tuple[Any, ...] = (),
        kwargs: dict[str, Any] | None = None,
        daemon: bool = True,
    ) -> None:
        # Target receives the thread as its first argument
        if target is not None:
            original_target = target

            def wrapped_target(*a: Any, **kw: Any) -> Any:
                return original_target(self, *a, **kw)

            super().__init__(target=wrapped_target, name=name, args=args, kwargs=kwargs or {})
        else:
            super().__init__(name=name)

        self.daemon = daemon
        self._stop_event = threading.Event()

    def stop(self, timeout: float = 5.0) -> bool:
        """Request stop and wait for thread to finish.

        Args:
            timeout: Maximum time to wait for thread to finish

        Returns:
            True if thread stopped, False if still running
        """
        logger.debug("Stopping thread: %s", self.name)
        self._stop_event.set()
        if self.is_alive() and threading.current_thread() is not self:
            self.join(timeout=timeout)
        stopped = not self.is_alive() or threading.current_thread() is self
        if not stopped:
            logger.warning("Thread %s did not stop within timeout", self.name)
        return stopped

    def wait(self, timeout: float) -> bool:
        """Wait with stop check.

        Args:
            timeout: Maximum time to wait in seconds

        Returns:
            True if stop was requested, False if timeout elapsed
        """
        return self._stop_event.wait(timeout)


class AtomicCounter:
    """Thread-safe counter with atomic increment.

    Usage:
        counter = AtomicCounter()
        counter.increment()
        value = counter.value
    """

    def __init__(self, initial: int = 0) -> None:
        self._value = initial
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        """Get current counter value."""
        with self._lock:
            return self._value

    def increment(self, delta: int = 1) -> int:
        """Atomically increment counter.

        Returns:
            New value after increment
        """
        with self._lock:
            self._value += delta
            return self._value
