"""Thread-safe LRU cache of compiled templates.

Maps raw template strings to shared, immutable CompiledTemplate instances.

Architecture:
    - Thread-safe using threading.RLock (reentrant lock)
    - LRU eviction via OrderedDict
    - Compilation runs outside the lock; the lock guards dictionary
      operations only, so a slow compile never blocks unrelated keys
    - Concurrent misses on one key may compile twice; the first insert wins
      and every caller receives that shared instance afterwards

Python 3.13+.
"""

import logging
from collections import OrderedDict
from threading import Lock, RLock

from flexexpander.syntax import CompiledTemplate, TemplateParser

from .cache_config import CacheConfig

__all__ = ["TemplateCache", "get_shared_cache"]

logger = logging.getLogger(__name__)


class TemplateCache:
    """Thread-safe LRU cache for compiled templates.

    Attributes:
        maxsize: Maximum number of cache entries
        hits: Number of cache hits (for metrics)
        misses: Number of cache misses (for metrics)

    Example:
        >>> cache = TemplateCache()
        >>> first = cache.get_compiled("Hello ${name}")
        >>> cache.get_compiled("Hello ${name}") is first
        True
        >>> cache.get_compiled("Hello ${name}", use_cache=False) is first
        False
    """

    __slots__ = ("_cache", "_hits", "_lock", "_maxsize", "_misses", "_parser")

    def __init__(
        self,
        *,
        parser: TemplateParser | None = None,
        config: CacheConfig | None = None,
    ) -> None:
        """Initialize template cache.

        Args:
            parser: Compiler used on cache misses (default: TemplateParser())
            config: Cache sizing (default: CacheConfig())
        """
        self._parser = parser if parser is not None else TemplateParser()
        self._maxsize = (config or CacheConfig()).size
        self._cache: OrderedDict[str, CompiledTemplate] = OrderedDict()
        self._lock = RLock()
        self._hits = 0
        self._misses = 0

    @property
    def parser(self) -> TemplateParser:
        """Compiler used on cache misses."""
        return self._parser

    def get_compiled(self, raw: str | None, use_cache: bool = True) -> CompiledTemplate:
        """Return the compiled form of raw.

        Args:
            raw: Raw template text (None compiles to an empty template)
            use_cache: If False, compile fresh and leave the cache untouched

        Returns:
            CompiledTemplate. With use_cache=True, repeated calls for equal
            raw strings return the same shared instance.
        """
        if not use_cache or not raw:
            return self._parser.parse(raw)

        with self._lock:
            cached = self._cache.get(raw)
            if cached is not None:
                self._cache.move_to_end(raw)
                self._hits += 1
                return cached
            self._misses += 1

        compiled = self._parser.parse(raw)

        with self._lock:
            existing = self._cache.get(raw)
            if existing is not None:
                return existing
            if len(self._cache) >= self._maxsize:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug("Evicted compiled template %r", evicted[:40])
            self._cache[raw] = compiled
            return compiled

    def clear(self) -> None:
        """Clear all cached entries and reset metrics.

        Thread-safe.
        """
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> dict[str, int | float]:
        """Get cache statistics.

        Thread-safe. Returns current metrics.

        Returns:
            Dict with keys:
            - size (int): Current number of cached entries
            - maxsize (int): Maximum cache capacity
            - hits (int): Number of cache hits
            - misses (int): Number of cache misses
            - hit_rate (float): Hit rate as percentage (0.0-100.0)
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0

            return {
                "size": len(self._cache),
                "maxsize": self._maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
            }

    def __contains__(self, raw: object) -> bool:
        with self._lock:
            return raw in self._cache

    def __len__(self) -> int:
        """Get current cache size.

        Thread-safe.
        """
        with self._lock:
            return len(self._cache)

    @property
    def maxsize(self) -> int:
        """Maximum cache size."""
        return self._maxsize

    @property
    def hits(self) -> int:
        """Number of cache hits.

        Thread-safe.
        """
        with self._lock:
            return self._hits

    @property
    def misses(self) -> int:
        """Number of cache misses.

        Thread-safe.
        """
        with self._lock:
            return self._misses


# Lazily created process-wide cache
_shared_cache: TemplateCache | None = None
_shared_cache_lock = Lock()


def get_shared_cache() -> TemplateCache:
    """Get the process-wide TemplateCache.

    Created on first use with default configuration. Pass your own
    TemplateCache to FlexibleStringExpander for isolation (tests,
    per-tenant sizing).

    Returns:
        The shared TemplateCache instance
    """
    global _shared_cache  # noqa: PLW0603
    if _shared_cache is None:
        with _shared_cache_lock:
            if _shared_cache is None:
                _shared_cache = TemplateCache()
    return _shared_cache
