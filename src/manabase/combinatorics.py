"""
Binomial coefficients with a bounded memo cache.

The cache is an explicit object owned by the engine, so tests and threads
never share hidden process-wide state.
"""

import threading
from typing import Dict, Hashable, Optional


class MemoCache:
    """
    Bounded-growth memo table.

    Once `max_size` entries are stored, new results are simply not cached;
    nothing is ever evicted. Inserts and hit/miss counters take a lock; a
    racing recomputation of the same key writes the same value.
    """

    def __init__(self, max_size: int = 10_000):
        self.max_size = max_size
        self._data: Dict[Hashable, object] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[object]:
        value = self._data.get(key)
        with self._lock:
            if value is None:
                self.misses += 1
            else:
                self.hits += 1
        return value

    def put(self, key: Hashable, value: object) -> None:
        with self._lock:
            if len(self._data) < self.max_size:
                self._data[key] = value

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._data)

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class Combinatorics:
    """Exact binomial coefficients C(n, k)."""

    def __init__(self, cache: MemoCache = None):
        self.cache = cache if cache is not None else MemoCache()

    def binomial(self, n: int, k: int) -> int:
        """
        Return C(n, k); 0 when k < 0 or k > n.

        Uses the multiplicative recurrence over min(k, n - k) steps. Every
        intermediate value is itself a binomial coefficient, so integer
        division is exact.
        """
        if k < 0 or k > n:
            return 0
        if k == 0 or k == n:
            return 1

        key = (n, k)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        k = min(k, n - k)
        result = 1
        for i in range(k):
            result = result * (n - i) // (i + 1)

        self.cache.put(key, result)
        return result
