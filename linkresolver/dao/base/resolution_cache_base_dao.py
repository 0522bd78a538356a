"""Abstract base class for the resolution cache.

The resolution cache maps shortcodes to canonical target addresses in a
fast, volatile key-value store. A value returned by get() is authoritative
for reads within its TTL.

Methods:
    get(shortcode) -> str | None
    set(shortcode, target, ttl=None) -> ResolutionCacheBaseDAO
    invalidate(shortcode) -> bool

All methods raise DataStoreError when the cache store is unreachable or
times out. Callers decide whether to degrade.
"""

from abc import ABC, abstractmethod


class ResolutionCacheBaseDAO(ABC):
    """Interface for shortcode -> target address caches."""

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> str | None:
        """Return the cached target address, or None on a cache miss."""
        pass

    @abstractmethod
    def set(self, shortcode: str, target: str, ttl: int | None = None, **kwargs) -> 'ResolutionCacheBaseDAO':
        """Cache a target address.

        Args:
            shortcode (str):
                Shortcode to cache the target address under.
            target (str):
                Canonical target address.
            ttl (int | None):
                Expiry in seconds. None stores the value without expiry.

        Returns:
            ResolutionCacheBaseDAO: self (for method chaining)
        """
        pass

    @abstractmethod
    def invalidate(self, shortcode: str, **kwargs) -> bool:
        """Drop the cached value. Returns True if a value was removed."""
        pass
