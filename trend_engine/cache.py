"""
In-process memoization for trend computations.

Recomputation is pure, so results can be reused whenever the full input
tuple repeats. Immutable option values (enums, dates, numbers, strings)
are compared by equality; raw collaborator payloads (lists, dicts) by
identity. Entries hold references to the payloads they were keyed on, so an
identity cannot be recycled while its entry is alive.

Usage:
    from trend_engine.cache import ComputationCache

    cache = ComputationCache(max_entries=32)

    @cache.cached(key_prefix="comparison")
    def compute(selector, mode, metric, current, prior):
        ...
"""
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from enum import Enum
from functools import wraps
from threading import Lock
from typing import Any, Callable, Hashable, Optional, Tuple, TypeVar

from trend_engine.config import config
from trend_engine.observability import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_VALUE_TYPES = (str, int, float, bool, date, Enum, type(None))


@dataclass
class CacheStats:
    """Cache statistics for monitoring."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return (self.hits / total * 100) if total > 0 else 0.0

    def to_dict(self) -> dict:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "hit_rate_percent": round(self.hit_rate, 2),
        }

    def reset(self) -> None:
        self.hits = 0
        self.misses = 0
        self.evictions = 0


def _key_part(value: Any) -> Hashable:
    if isinstance(value, _VALUE_TYPES):
        return value
    if isinstance(value, tuple):
        return tuple(_key_part(v) for v in value)
    return ("id", id(value))


class ComputationCache:
    """Bounded LRU memo keyed by input tuples."""

    def __init__(self, max_entries: Optional[int] = None):
        self.max_entries = max_entries or config.cache.max_entries
        self._entries: "OrderedDict[Hashable, Tuple[Tuple[Any, ...], Any]]" = OrderedDict()
        self._stats = CacheStats()
        self._lock = Lock()

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def __len__(self) -> int:
        return len(self._entries)

    def make_key(self, *parts: Any) -> Hashable:
        """Build a cache key from input values."""
        return tuple(_key_part(p) for p in parts)

    def get_or_compute(self, parts: Tuple[Any, ...], compute: Callable[[], T]) -> T:
        """Return the cached result for these inputs, computing it on a miss."""
        key = self.make_key(*parts)

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._entries.move_to_end(key)
                self._stats.hits += 1
                return entry[1]
            self._stats.misses += 1

        value = compute()

        with self._lock:
            self._entries[key] = (tuple(parts), value)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
                self._stats.evictions += 1

        return value

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug("Computation cache cleared", extra={"entries": count})

    def cached(self, key_prefix: str = "") -> Callable[[Callable[..., T]], Callable[..., T]]:
        """
        Decorator memoizing a pure function on its full argument tuple.

        Args:
            key_prefix: Namespace for the function's keys (defaults to its name)
        """
        def decorator(func: Callable[..., T]) -> Callable[..., T]:
            prefix = key_prefix or func.__qualname__

            @wraps(func)
            def wrapper(*args: Any, **kwargs: Any) -> T:
                parts = (prefix, *args, *sorted(kwargs.items()))
                return self.get_or_compute(parts, lambda: func(*args, **kwargs))

            return wrapper

        return decorator
