"""Build a ResolutionService from a lambda's AppConfig sections

Sections (see linkresolver.utils.config.load_config):
    redis:     persistent store connection (required; only supported backend)
    cache:     resolution cache connection, defaults to `redis`
    filter:    existence filter connection, defaults to `cache`
    resolver:  ResolverConfig tunables

Connection sections hold redis-py parameters without the 'redis_' prefix,
e.g. {"host": "localhost", "port": 6379, "db": 0, "socket_timeout": 2}.
"""

import logging
from typing import Any, Optional
from collections.abc import Mapping

from linkresolver.dao.redis import ShortEntryRedisDAO
from linkresolver.dao.cache import ResolutionCacheRedisDAO
from linkresolver.dao.bloom import ExistenceFilterRedisDAO
from linkresolver.dao.exceptions import DataStoreError
from linkresolver.exceptions import UnavailableError
from linkresolver.services.resolution_service import ResolutionService
from linkresolver.services.constants import CACHE_UNAVAILABLE, FILTER_UNAVAILABLE, STORE_UNAVAILABLE
from linkresolver.utils.config import ResolverConfig


logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ('redis',)


def redis_kwargs(section: Mapping[str, Any]) -> dict[str, Any]:
    """Turn a connection section into RedisClientMixin keyword arguments"""
    return {f'redis_{k}': v for k, v in section.items()}


def build_resolution_service(app_config: Mapping[str, Any], prefix: Optional[str] = None) -> ResolutionService:
    """Create the DAOs, initialize the existence filter and wire the service

    The existence filter is reserved here (idempotent), once per process.
    An unreachable cache is tolerated: the service runs without one.

    Args:
        app_config (Mapping[str, Any]):
            Lambda configuration as returned by load_config().
        prefix (Optional[str]):
            Key namespace, usually app_prefix().

    Returns:
        ResolutionService: ready to serve requests.

    Raises:
        ValueError:
            If no supported backend is configured or resolver tunables are invalid.
        UnavailableError:
            If the persistent store or the existence filter can't be reached
            or the filter can't be reserved.
    """
    if 'redis' not in app_config:
        raise ValueError(f'No supported backend configured (supported: {", ".join(SUPPORTED_BACKENDS)}).')

    store_section = app_config['redis']
    cache_section = app_config.get('cache', store_section)
    filter_section = app_config.get('filter', cache_section)
    resolver_config = ResolverConfig.from_mapping(app_config.get('resolver'))

    try:
        store = ShortEntryRedisDAO(**redis_kwargs(store_section), prefix=prefix)
    except DataStoreError as e:
        logger.error('Persistent store unreachable.', extra={'event': STORE_UNAVAILABLE, 'error': e.__class__.__name__})
        raise UnavailableError(str(e)) from e

    try:
        cache = ResolutionCacheRedisDAO(**redis_kwargs(cache_section), prefix=prefix)
    except DataStoreError as e:
        logger.warning(
            'Resolution cache unreachable. Serving without a cache.',
            extra={'event': CACHE_UNAVAILABLE, 'error': e.__class__.__name__},
        )
        cache = None

    try:
        existence_filter = ExistenceFilterRedisDAO(
            **redis_kwargs(filter_section),
            name=resolver_config.filter_name,
            prefix=prefix,
        )
        created = existence_filter.initialize(resolver_config.filter_capacity, resolver_config.filter_error_rate)
    except DataStoreError as e:
        logger.error('Existence filter initialization failed.', extra={'event': FILTER_UNAVAILABLE, 'error': e.__class__.__name__})
        raise UnavailableError(str(e)) from e
    else:
        logger.debug(
            'Existence filter ready.',
            extra={'filter': existence_filter.key, 'filterCreated': created, 'capacity': resolver_config.filter_capacity},
        )

    return ResolutionService(store=store, cache=cache, existence_filter=existence_filter, config=resolver_config)
