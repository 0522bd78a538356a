"""Resolution service: create, resolve, update and delete short links

The service coordinates three collaborators in a cache-aside layout:

    existence filter  ->  resolution cache  ->  persistent store
    (negative check)      (fast, volatile)      (authoritative)

Reads consult them in that order and stop at the first definitive answer.
Writes go to the persistent store first; cache and filter updates are
best-effort follow-ups. Cache and filter failures are logged and degraded
(miss / possibly present); persistent store failures surface as
UnavailableError.

Classes:
    ResolutionService:
        Orchestrates the four link operations over the DAO contracts.

Example:
    >>> service = ResolutionService(store=ShortEntryRedisDAO(prefix='app:dev'))
    >>> entry = service.create('https://Example.com/path/?utm_source=x&id=5')
    >>> entry.target
    'https://example.com/path?id=5'
    >>> service.get(entry.shortcode)
    'https://example.com/path?id=5'
"""

import re
import logging
import contextlib
from datetime import datetime, UTC
from typing import Optional

from linkresolver.models import ShortEntryModel, LinkOptions
from linkresolver.dao.base import ShortEntryBaseDAO, ResolutionCacheBaseDAO, ExistenceFilterBaseDAO
from linkresolver.dao.exceptions import (
    ShortEntryNotFoundError,
    ShortEntryAlreadyExistsError,
    ConcurrentModificationError,
    DataStoreError,
)
from linkresolver.exceptions import BadRequestError, NotFoundError, ConflictError, UnavailableError
from linkresolver.utils import canonicalize, generate_shortcode, expiry_from_ttl, ResolverConfig
from linkresolver.services.constants import (
    LINK_CREATED,
    LINK_RESOLVED,
    LINK_UPDATED,
    LINK_DELETED,
    LINK_NOT_FOUND,
    SHORTCODE_COLLISION,
    SHORTCODE_RETRIES_EXHAUSTED,
    FILTER_REJECTED,
    FILTER_UNAVAILABLE,
    CACHE_HIT,
    CACHE_MISS,
    CACHE_UNAVAILABLE,
    STORE_UNAVAILABLE,
    CUSTOM_SHORTCODE_PATTERN,
    MAX_LINK_TTL,
)


logger = logging.getLogger(__name__)

_CUSTOM_SHORTCODE_RE = re.compile(CUSTOM_SHORTCODE_PATTERN)


@contextlib.contextmanager
def _store_errors(shortcode: Optional[str] = None):
    """Translate persistent store errors into service errors"""
    try:
        yield
    except ShortEntryNotFoundError as e:
        raise NotFoundError(str(e)) from e
    except (ShortEntryAlreadyExistsError, ConcurrentModificationError) as e:
        raise ConflictError(str(e)) from e
    except DataStoreError as e:
        logger.error(
            'Persistent store unavailable.',
            extra={'shortcode': shortcode, 'event': STORE_UNAVAILABLE, 'error': e.__class__.__name__},
        )
        raise UnavailableError(str(e)) from e


def _validate_ttl(ttl: Optional[int]) -> None:
    if ttl is None:
        return
    if not isinstance(ttl, int) or isinstance(ttl, bool) or not 0 < ttl <= MAX_LINK_TTL:
        raise BadRequestError(
            f'ttl must be a positive integer number of seconds up to {MAX_LINK_TTL} (given value: {ttl!r}).'
        )


def _validate_shortcode(shortcode: Optional[str]) -> None:
    if not isinstance(shortcode, str) or not _CUSTOM_SHORTCODE_RE.fullmatch(shortcode):
        raise BadRequestError(f'shortcode must match {CUSTOM_SHORTCODE_PATTERN} (given value: {shortcode!r}).')


class ResolutionService:
    """Orchestrate link operations over a store, a cache and an existence filter

    Attributes:
        store (ShortEntryBaseDAO):
            Persistent store; the single source of truth for active entries.
        cache (Optional[ResolutionCacheBaseDAO]):
            Resolution cache. None disables caching.
        existence_filter (Optional[ExistenceFilterBaseDAO]):
            Existence filter, already initialized. None disables pre-filtering.
        config (ResolverConfig):
            Tunables (shortcode length, retries, read-populate cache TTL).

    Methods:
        create(target, options=None) -> ShortEntryModel
        get(shortcode) -> str
        update(shortcode, target, ttl=None) -> ShortEntryModel
        delete(shortcode=None, target=None) -> ShortEntryModel

    Errors (see linkresolver.exceptions):
        InvalidAddressError, BadRequestError, NotFoundError, ConflictError,
        UnavailableError.
    """

    def __init__(
        self,
        store: ShortEntryBaseDAO,
        cache: Optional[ResolutionCacheBaseDAO] = None,
        existence_filter: Optional[ExistenceFilterBaseDAO] = None,
        config: Optional[ResolverConfig] = None,
    ):
        self.store = store
        self.cache = cache
        self.existence_filter = existence_filter
        self.config = config or ResolverConfig()

    def create(self, target: str, options: Optional[LinkOptions] = None) -> ShortEntryModel:
        """Create a short link for `target`

        Steps:
            1. Canonicalize the target address.
            2. Insert the entry under the supplied shortcode, or under a freshly
               generated one (regenerated on collision, up to max_retries).
            3. Populate the cache with the entry's TTL (no expiry if none).
            4. Add the shortcode to the existence filter.

        Args:
            target (str):
                Target address; canonicalized before storing.
            options (Optional[LinkOptions]):
                Custom shortcode and/or TTL in seconds.

        Returns:
            ShortEntryModel: the created entry.

        Raises:
            InvalidAddressError: target address is malformed.
            BadRequestError: custom shortcode or ttl is invalid.
            ConflictError: custom shortcode is taken, or generated ones kept colliding.
            UnavailableError: persistent store failed.
        """
        options = options or LinkOptions()
        canonical = canonicalize(target)
        _validate_ttl(options.ttl)
        if options.shortcode is not None:
            _validate_shortcode(options.shortcode)

        now = datetime.now(UTC)
        expires_at = expiry_from_ttl(options.ttl, now=now)

        if options.shortcode is not None:
            entry = ShortEntryModel(shortcode=options.shortcode, target=canonical, created_at=now, expires_at=expires_at)
            with _store_errors(entry.shortcode):
                self.store.insert(entry)
        else:
            entry = self._insert_generated(canonical, now, expires_at)

        self._cache_set(entry.shortcode, entry.target, options.ttl)
        self._filter_add(entry.shortcode)

        logger.info(
            'Created short link.',
            extra={'shortcode': entry.shortcode, 'event': LINK_CREATED, 'ttl': options.ttl},
        )
        return entry

    def get(self, shortcode: str) -> str:
        """Resolve `shortcode` to its canonical target address

        Raises:
            BadRequestError: shortcode is missing.
            NotFoundError: no active entry exists for the shortcode.
            UnavailableError: persistent store failed.
        """
        if not shortcode:
            raise BadRequestError('shortcode is required.')

        # 1- Existence filter: only a negative answer is definitive
        if not self._filter_might_contain(shortcode):
            logger.info('Shortcode was never issued.', extra={'shortcode': shortcode, 'event': FILTER_REJECTED})
            raise NotFoundError(f"Short link '{shortcode}' not found.")

        # 2- Cache: a hit is authoritative within its TTL
        cached = self._cache_get(shortcode)
        if cached is not None:
            logger.debug('Resolved from cache.', extra={'shortcode': shortcode, 'event': CACHE_HIT})
            return cached
        logger.debug('Cache miss.', extra={'shortcode': shortcode, 'event': CACHE_MISS})

        # 3- Persistent store
        with _store_errors(shortcode):
            entry = self.store.get(shortcode)
        if entry.expired():
            logger.info('Short link expired.', extra={'shortcode': shortcode, 'event': LINK_NOT_FOUND})
            raise NotFoundError(f"Short link '{shortcode}' not found.")

        remaining = entry.ttl()
        cache_ttl = self.config.cache_ttl if remaining is None else min(self.config.cache_ttl, remaining)
        if cache_ttl > 0:
            self._cache_set(shortcode, entry.target, cache_ttl)

        logger.info('Resolved from persistent store.', extra={'shortcode': shortcode, 'event': LINK_RESOLVED})
        return entry.target

    def update(self, shortcode: str, target: str, ttl: Optional[int] = None) -> ShortEntryModel:
        """Point an existing short link to a new target address

        The cached value is always invalidated after the store write. When a
        ttl is given, the entry's expiry is recomputed and the cache is
        re-populated right away with the new TTL; otherwise the expiry is
        left unchanged and the cache is re-populated lazily on the next read.

        Raises:
            BadRequestError: shortcode is missing or ttl is invalid.
            InvalidAddressError: target address is malformed.
            NotFoundError: no active entry exists for the shortcode.
            ConflictError: the entry was modified concurrently.
            UnavailableError: persistent store failed.
        """
        if not shortcode:
            raise BadRequestError('shortcode is required.')
        _validate_ttl(ttl)

        with _store_errors(shortcode):
            current = self.store.get(shortcode)
        if current.expired():
            raise NotFoundError(f"Short link '{shortcode}' not found.")

        canonical = canonicalize(target)
        expires_at = expiry_from_ttl(ttl) if ttl is not None else current.expires_at

        with _store_errors(shortcode):
            updated = self.store.update(shortcode, canonical, expires_at=expires_at)

        self._cache_invalidate(shortcode)
        if ttl is not None:
            self._cache_set(shortcode, updated.target, ttl)

        logger.info('Updated short link.', extra={'shortcode': shortcode, 'event': LINK_UPDATED, 'ttl': ttl})
        return updated

    def delete(self, shortcode: Optional[str] = None, target: Optional[str] = None) -> ShortEntryModel:
        """Delete a short link by shortcode, or the first one created for a target

        The shortcode stays in the existence filter (filters can't remove).

        Raises:
            BadRequestError: neither shortcode nor target is given.
            InvalidAddressError: target address is malformed.
            NotFoundError: no active entry matches.
            ConflictError: the entry was modified concurrently.
            UnavailableError: persistent store failed.
        """
        if not shortcode and not target:
            raise BadRequestError('Either shortcode or target_url is required.')

        canonical = canonicalize(target) if target else None
        with _store_errors(shortcode):
            entry = self.store.find_first(shortcode=shortcode or None, target=canonical)
            deleted = self.store.delete(entry.shortcode)

        self._cache_invalidate(deleted.shortcode)

        logger.info('Deleted short link.', extra={'shortcode': deleted.shortcode, 'event': LINK_DELETED})
        return deleted

    def _insert_generated(self, target: str, now: datetime, expires_at: Optional[datetime]) -> ShortEntryModel:
        for attempt in range(1, self.config.max_retries + 1):
            entry = ShortEntryModel(
                shortcode=generate_shortcode(self.config.shortcode_length),
                target=target,
                created_at=now,
                expires_at=expires_at,
            )
            try:
                with _store_errors(entry.shortcode):
                    self.store.insert(entry)
            except ConflictError:
                logger.warning(
                    'Generated shortcode collided with an existing one. Retrying.',
                    extra={'shortcode': entry.shortcode, 'event': SHORTCODE_COLLISION, 'attempt': attempt},
                )
            else:
                return entry

        logger.error(
            'Could not generate a free shortcode.',
            extra={'event': SHORTCODE_RETRIES_EXHAUSTED, 'attempts': self.config.max_retries},
        )
        raise ConflictError(f'Could not generate a free shortcode after {self.config.max_retries} attempts.')

    def _filter_might_contain(self, shortcode: str) -> bool:
        if self.existence_filter is None:
            return True
        try:
            return self.existence_filter.might_contain(shortcode)
        except DataStoreError as e:
            logger.warning(
                'Existence filter unavailable. Treating shortcode as possibly present.',
                extra={'shortcode': shortcode, 'event': FILTER_UNAVAILABLE, 'error': e.__class__.__name__},
            )
            return True

    def _filter_add(self, shortcode: str) -> None:
        if self.existence_filter is None:
            return
        try:
            self.existence_filter.add(shortcode)
        except DataStoreError as e:
            logger.warning(
                'Failed to add shortcode to existence filter.',
                extra={'shortcode': shortcode, 'event': FILTER_UNAVAILABLE, 'error': e.__class__.__name__},
            )

    def _cache_get(self, shortcode: str) -> Optional[str]:
        if self.cache is None:
            return None
        try:
            return self.cache.get(shortcode)
        except DataStoreError as e:
            logger.warning(
                'Resolution cache unavailable. Treating as cache miss.',
                extra={'shortcode': shortcode, 'event': CACHE_UNAVAILABLE, 'error': e.__class__.__name__},
            )
            return None

    def _cache_set(self, shortcode: str, target: str, ttl: Optional[int]) -> None:
        if self.cache is None:
            return
        try:
            self.cache.set(shortcode, target, ttl=ttl)
        except DataStoreError as e:
            logger.warning(
                'Failed to populate resolution cache.',
                extra={'shortcode': shortcode, 'event': CACHE_UNAVAILABLE, 'error': e.__class__.__name__},
            )

    def _cache_invalidate(self, shortcode: str) -> None:
        if self.cache is None:
            return
        try:
            self.cache.invalidate(shortcode)
        except DataStoreError as e:
            logger.warning(
                'Failed to invalidate resolution cache.',
                extra={'shortcode': shortcode, 'event': CACHE_UNAVAILABLE, 'error': e.__class__.__name__},
            )
