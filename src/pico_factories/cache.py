"""Thread-safe cache with at-most-one computation per key."""

import threading
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class _Pending:
    __slots__ = ("lock", "waiters")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.waiters = 0


class OnceCache(Generic[K, V]):
    """Lazily populated mapping whose entries are computed exactly once.

    Concurrent callers asking for the same missing key wait for a single
    computation and observe its result; callers for different keys proceed
    independently. A computation that raises leaves no entry behind, so the
    next caller retries it.

    Entries persist until :meth:`clear`. Clearing while a computation is in
    flight is not supported.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: Dict[K, V] = {}
        self._pending: Dict[K, _Pending] = {}

    def get_or_compute(self, key: K, compute: Callable[[K], V]) -> V:
        """Return the entry for *key*, computing it with ``compute(key)`` on a miss."""
        with self._lock:
            if key in self._values:
                return self._values[key]
            pending = self._pending.get(key)
            if pending is None:
                pending = self._pending[key] = _Pending()
            pending.waiters += 1

        try:
            with pending.lock:
                with self._lock:
                    if key in self._values:
                        return self._values[key]
                value = compute(key)
                with self._lock:
                    self._values[key] = value
                return value
        finally:
            with self._lock:
                pending.waiters -= 1
                if not pending.waiters and self._pending.get(key) is pending:
                    del self._pending[key]

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            return self._values.get(key)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()
            self._pending.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
