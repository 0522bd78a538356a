import functools
from collections.abc import Callable


__all__ = ['CacheKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class CacheKeySchema:
    """Provide standardized Redis keys for the resolution cache.

    All keys live under a 'cache:' namespace, so the cache can share a Redis
    deployment with the persistent store without colliding with its keys.

    NOTE: Yes, this class mirrors RedisKeySchema, but the caching layer must
    stay independent of the persistent store backend.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = f'cache:{prefix}' if prefix is not None else 'cache'

    @prefix_key
    def link_target_key(self, shortcode: str) -> str:
        return f'links:{shortcode}'
