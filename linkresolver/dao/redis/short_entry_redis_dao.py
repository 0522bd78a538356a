"""Data Access Object (DAO) implementation for persisting short entries in Redis

This module provides a Redis-based implementation of ShortEntryBaseDAO. The
Redis deployment behind it is the durable source of truth for shortcodes
(AOF/RDB persistence is an operational concern of that deployment).

Key layout (see RedisKeySchema):
    <prefix>:links:<shortcode>
        Hash with fields 'target', 'created_at' and 'expires_at'
        (ISO-8601 UTC, empty string when the entry never expires).
        Carries EXPIREAT when the entry has an expiry moment.
    <prefix>:links:targets:<xxh64(target)>
        List of shortcodes created for a target address, oldest first.
        Expires with its longest-lived member; never while a member is permanent.
        Members whose entry is gone or expired are pruned by find_first().

Responsibilities:
    - Insert, retrieve, update and delete short entries;
    - Enforce shortcode uniqueness with optimistic (WATCH/MULTI) transactions;
    - Keep the target address index in sync with the entries;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Classes:
    ShortEntryRedisDAO:
        DAO for storing and retrieving ShortEntryModel in a Redis datastore.

Example:
    >>> from linkresolver.models import ShortEntryModel
    >>> from linkresolver.dao.redis import ShortEntryRedisDAO

    >>> dao = ShortEntryRedisDAO(prefix="app:dev")

    >>> entry = ShortEntryModel(
    ...     shortcode="abc123",
    ...     target="https://example.com/page",
    ...     created_at=datetime.now(UTC),
    ... )
    >>> dao.insert(entry)
    <ShortEntryRedisDAO>

    >>> dao.get("abc123").target
    'https://example.com/page'

    >>> dao.find_first(target="https://example.com/page").shortcode
    'abc123'

    >>> dao.delete("abc123").shortcode
    'abc123'
"""

import math
import dataclasses
from datetime import datetime
from typing import Optional

import redis
from beartype import beartype

from linkresolver.models import ShortEntryModel
from linkresolver.dao.base import ShortEntryBaseDAO
from linkresolver.dao.redis.mixins import RedisClientMixin
from linkresolver.dao.redis.helpers import handle_redis_connection_error
from linkresolver.dao.exceptions import (
    ShortEntryAlreadyExistsError,
    ShortEntryNotFoundError,
    ConcurrentModificationError,
)


# Optimistic transactions re-run after a WatchError before giving up
WATCH_ATTEMPTS = 3


class ShortEntryRedisDAO(RedisClientMixin, ShortEntryBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short entries

    This class implements the ShortEntryBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(entry: ShortEntryModel, **kwargs) -> ShortEntryRedisDAO:
            Insert an entry and index it by target address.
            Raises ShortEntryAlreadyExistsError when the shortcode exists.

        get(shortcode: str, **kwargs) -> ShortEntryModel:
            Retrieve an entry by shortcode.
            Raises ShortEntryNotFoundError when the shortcode doesn't exist.

        find_first(shortcode: str | None, target: str | None, **kwargs) -> ShortEntryModel:
            Retrieve an entry by shortcode, or the oldest active one for a target address.
            Raises ShortEntryNotFoundError when nothing matches.

        update(shortcode: str, target: str, expires_at: datetime | None, **kwargs) -> ShortEntryModel:
            Replace target address and expiry of an entry.
            Raises ShortEntryNotFoundError when the shortcode doesn't exist.

        delete(shortcode: str, **kwargs) -> ShortEntryModel:
            Delete an entry and drop it from the target address index.
            Raises ShortEntryNotFoundError when the shortcode doesn't exist.

    All methods raise DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, entry: ShortEntryModel, **kwargs) -> 'ShortEntryRedisDAO':
        """Insert a short entry into Redis

        The existence check and the writes are performed in a WATCH/MULTI
        transaction, so two clients racing on the same shortcode can never
        both succeed. A logically expired entry that Redis has not evicted
        yet does not block the shortcode; it is replaced.

        The target address index is watched as well, so its expiry can be
        extended to cover the new entry. A transaction aborted by a write to
        either key is re-run from the existence check, up to WATCH_ATTEMPTS times.

        Args:
            entry (ShortEntryModel):
                ShortEntryModel instance to persist.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortEntryRedisDAO: self (for method chaining)

        Raises:
            ShortEntryAlreadyExistsError:
                If an unexpired entry with the same shortcode already exists, or
                every attempt was aborted by concurrent writers.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.
        """
        link_key = self.keys.link_key(entry.shortcode)
        target_index_key = self.keys.target_index_key(entry.target)

        for _ in range(WATCH_ATTEMPTS):
            with self.redis.pipeline(transaction=True) as pipe:
                try:
                    pipe.watch(link_key, target_index_key)
                    mapping = pipe.hgetall(link_key)
                    stale = self._deserialize(entry.shortcode, mapping) if mapping else None
                    if stale is not None and not stale.expired():
                        raise ShortEntryAlreadyExistsError(f"Short entry with code '{entry.shortcode}' already exists.")
                    index_expiry = pipe.expiretime(target_index_key)

                    pipe.multi()
                    if stale is not None:
                        # Logically expired but not yet evicted: replace it
                        pipe.delete(link_key)
                        pipe.lrem(self.keys.target_index_key(stale.target), 0, entry.shortcode)
                    pipe.hset(link_key, mapping=self._serialize(entry))
                    if entry.expires_at is not None:
                        pipe.expireat(link_key, self._unix_time(entry.expires_at))
                    pipe.rpush(target_index_key, entry.shortcode)
                    self._extend_index_expiry(pipe, target_index_key, index_expiry, entry.expires_at)
                    pipe.execute()
                    return self
                except redis.exceptions.WatchError:
                    continue

        raise ShortEntryAlreadyExistsError(f"Short entry with code '{entry.shortcode}' was created concurrently.")

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortEntryModel:
        """Retrieve a stored short entry by shortcode

        NOTE: the entry is returned even if it is logically expired but not yet
              evicted by Redis. Check ShortEntryModel.expired() before use.

        Args:
            shortcode (str):
                The shortcode identifier of the entry.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortEntryModel:
                The retrieved ShortEntryModel instance.

        Raises:
            ShortEntryNotFoundError:
                If the entry does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        mapping = self.redis.hgetall(self.keys.link_key(shortcode))
        if not mapping:
            raise ShortEntryNotFoundError(f"Short entry with code '{shortcode}' not found.")

        return self._deserialize(shortcode, mapping)

    @handle_redis_connection_error
    @beartype
    def find_first(self, shortcode: Optional[str] = None, target: Optional[str] = None, **kwargs) -> ShortEntryModel:
        """Retrieve an entry by shortcode, falling back to its target address

        Steps:
            - If a shortcode is given and names an unexpired entry, return it.
            - Else, if a target is given, walk the target address index
              (oldest first) and return the first unexpired entry whose
              target matches exactly.

        Index members whose entry was evicted, or is logically expired, are
        removed from the index on the way.

        Args:
            shortcode (Optional[str]):
                Shortcode to look up first.
            target (Optional[str]):
                Canonical target address to fall back to.

        Returns:
            ShortEntryModel: the matching entry.

        Raises:
            ValueError:
                If neither shortcode nor target is given.
            ShortEntryNotFoundError:
                If no active entry matches.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        if shortcode is None and target is None:
            raise ValueError('Either shortcode or target must be provided.')

        if shortcode is not None:
            mapping = self.redis.hgetall(self.keys.link_key(shortcode))
            if mapping:
                entry = self._deserialize(shortcode, mapping)
                if not entry.expired():
                    return entry

        if target is not None:
            target_index_key = self.keys.target_index_key(target)
            candidates = self.redis.lrange(target_index_key, 0, -1)

            # Fetch all candidate entries in a single round trip
            with self.redis.pipeline(transaction=False) as pipe:
                for candidate in candidates:
                    pipe.hgetall(self.keys.link_key(candidate))
                mappings = pipe.execute() if candidates else []

            found = None
            dangling = []
            for candidate, mapping in zip(candidates, mappings):
                entry = self._deserialize(candidate, mapping) if mapping else None
                if entry is None or (entry.target == target and entry.expired()):
                    dangling.append(candidate)
                elif found is None and entry.target == target:
                    found = entry
                # any other target is a digest collision sharing this list

            if dangling:
                self._prune_target_index(target_index_key, dangling)
            if found is not None:
                return found

        raise ShortEntryNotFoundError(f'No short entry found for shortcode={shortcode!r} or target={target!r}.')

    @handle_redis_connection_error
    @beartype
    def update(self, shortcode: str, target: str, expires_at: Optional[datetime] = None, **kwargs) -> ShortEntryModel:
        """Replace target address and expiry of an existing entry

        Performed in a WATCH/MULTI transaction over the entry and the index of
        the new target address. The shortcode is moved between target address
        indexes when the target changes. A transaction aborted by a write to
        either key is re-run against the fresh entry, up to WATCH_ATTEMPTS times.

        Args:
            shortcode (str):
                Shortcode of the entry to update.
            target (str):
                New canonical target address.
            expires_at (Optional[datetime]):
                New expiry moment. None makes the entry permanent.

        Returns:
            ShortEntryModel: the updated entry.

        Raises:
            ShortEntryNotFoundError:
                If the entry does not exist.
            ConcurrentModificationError:
                If every attempt was aborted by concurrent writers.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        link_key = self.keys.link_key(shortcode)
        target_index_key = self.keys.target_index_key(target)

        for _ in range(WATCH_ATTEMPTS):
            with self.redis.pipeline(transaction=True) as pipe:
                try:
                    pipe.watch(link_key, target_index_key)
                    mapping = pipe.hgetall(link_key)
                    if not mapping:
                        raise ShortEntryNotFoundError(f"Short entry with code '{shortcode}' not found.")

                    current = self._deserialize(shortcode, mapping)
                    updated = dataclasses.replace(current, target=target, expires_at=expires_at)
                    index_expiry = pipe.expiretime(target_index_key)

                    pipe.multi()
                    pipe.hset(link_key, mapping=self._serialize(updated))
                    if expires_at is not None:
                        pipe.expireat(link_key, self._unix_time(expires_at))
                    else:
                        pipe.persist(link_key)
                    if updated.target != current.target:
                        pipe.lrem(self.keys.target_index_key(current.target), 0, shortcode)
                        pipe.rpush(target_index_key, shortcode)
                    self._extend_index_expiry(pipe, target_index_key, index_expiry, expires_at)
                    pipe.execute()
                    return updated
                except redis.exceptions.WatchError:
                    continue

        raise ConcurrentModificationError(f"Short entry with code '{shortcode}' was modified concurrently.")

    @handle_redis_connection_error
    @beartype
    def delete(self, shortcode: str, **kwargs) -> ShortEntryModel:
        """Delete an entry and drop it from the target address index

        Args:
            shortcode (str):
                Shortcode of the entry to delete.

        Returns:
            ShortEntryModel: the deleted entry.

        Raises:
            ShortEntryNotFoundError:
                If the entry does not exist.
            ConcurrentModificationError:
                If another client modified the entry during the transaction.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        link_key = self.keys.link_key(shortcode)

        with self.redis.pipeline(transaction=True) as pipe:
            try:
                pipe.watch(link_key)
                mapping = pipe.hgetall(link_key)
                if not mapping:
                    raise ShortEntryNotFoundError(f"Short entry with code '{shortcode}' not found.")

                entry = self._deserialize(shortcode, mapping)

                pipe.multi()
                pipe.delete(link_key)
                pipe.lrem(self.keys.target_index_key(entry.target), 0, shortcode)
                pipe.execute()
            except redis.exceptions.WatchError as e:
                raise ConcurrentModificationError(f"Short entry with code '{shortcode}' was modified concurrently.") from e

        return entry

    def _prune_target_index(self, target_index_key: str, shortcodes: list[str]) -> None:
        # One occurrence per stale sighting, oldest first, so a shortcode
        # re-pushed by a concurrent insert keeps its newer occurrence.
        with self.redis.pipeline(transaction=False) as pipe:
            for shortcode in shortcodes:
                pipe.lrem(target_index_key, 1, shortcode)
            pipe.execute()

    def _extend_index_expiry(self, pipe, target_index_key: str, index_expiry: int, expires_at: Optional[datetime]) -> None:
        """Keep a target index alive as long as its longest-lived member

        `index_expiry` is the index's EXPIRETIME read under WATCH:
        -2 when the index doesn't exist, -1 when it never expires.
        """
        if expires_at is None:
            pipe.persist(target_index_key)
        elif index_expiry == -2:
            pipe.expireat(target_index_key, self._unix_time(expires_at))
        elif index_expiry >= 0:
            pipe.expireat(target_index_key, max(index_expiry, self._unix_time(expires_at)))

    @staticmethod
    def _serialize(entry: ShortEntryModel) -> dict[str, str]:
        return {
            'target': entry.target,
            'created_at': entry.created_at.isoformat(),
            'expires_at': entry.expires_at.isoformat() if entry.expires_at is not None else '',
        }

    @staticmethod
    def _deserialize(shortcode: str, mapping: dict[str, str]) -> ShortEntryModel:
        expires_at = mapping.get('expires_at')
        return ShortEntryModel(
            shortcode=shortcode,
            target=mapping['target'],
            created_at=datetime.fromisoformat(mapping['created_at']),
            expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
        )

    @staticmethod
    def _unix_time(moment: datetime) -> int:
        # Round up so Redis never evicts an entry before it is logically expired
        return math.ceil(moment.timestamp())
