"""Cache configuration for TemplateCache.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from flexexpander.constants import DEFAULT_CACHE_SIZE

__all__ = ["CacheConfig"]


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Immutable configuration for compiled-template caching.

    Constructing ``CacheConfig()`` with no arguments produces a usable
    configuration.

    Attributes:
        size: Maximum cached templates before least-recently-used eviction
            (default: 10000).

    Example:
        >>> from flexexpander.runtime.cache import TemplateCache
        >>> cache = TemplateCache(config=CacheConfig(size=500))
        >>> cache.maxsize
        500
    """

    size: int = DEFAULT_CACHE_SIZE

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If size is not positive.
        """
        if self.size <= 0:
            msg = "size must be positive"
            raise ValueError(msg)
