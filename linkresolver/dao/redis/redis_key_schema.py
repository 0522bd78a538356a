import functools
from collections.abc import Callable

import xxhash


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing data models.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "linkresolver:prod" or "linkresolver:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_key(self, shortcode: str) -> str:
        return f'links:{shortcode}'

    @prefix_key
    def target_index_key(self, target: str) -> str:
        # NOTE: target addresses are unbounded in length, so the index is keyed
        #       by their 64-bit xxhash digest. Colliding targets share a list;
        #       readers must compare the stored target before accepting a match.
        return f'links:targets:{xxhash.xxh64_hexdigest(target)}'

    @prefix_key
    def filter_key(self, name: str) -> str:
        return f'filters:{name}'
