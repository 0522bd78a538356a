"""Abstract base class for ShortEntry data access objects (DAOs).

This class establishes a consistent contract for the persistent store of
short entries, regardless of the underlying storage mechanism (e.g. Redis,
DynamoDB, PostgreSQL). The persistent store is the single source of truth
for whether a shortcode is currently active.

Responsibilities:
    - Provide an interface for inserting, retrieving, updating and deleting
      ShortEntryModel objects.
    - Enforce shortcode uniqueness on insert.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linkresolver.models import ShortEntryModel
        >>> from linkresolver.dao.redis import ShortEntryRedisDAO

        >>> dao = ShortEntryRedisDAO(...)

        >>> entry = ShortEntryModel(
        ...     shortcode="a1b2c3",
        ...     target="https://example.com/blog/article-123",
        ...     created_at=datetime.now(UTC),
        ... )
        >>> dao.insert(entry)

        >>> dao.get("a1b2c3").target
        'https://example.com/blog/article-123'
"""

from abc import ABC, abstractmethod
from datetime import datetime

from linkresolver.models import ShortEntryModel


class ShortEntryBaseDAO(ABC):
    """Interface for ShortEntry data access objects (DAOs).

    Methods:
        insert(entry: ShortEntryModel, **kwargs) -> ShortEntryBaseDAO:
            Insert a new ShortEntryModel into the data store.
            Raises ShortEntryAlreadyExistsError if the shortcode already exists.

        get(shortcode: str, **kwargs) -> ShortEntryModel:
            Retrieve a ShortEntryModel by shortcode.
            Raises ShortEntryNotFoundError if the entry does not exist.

        find_first(shortcode: str | None, target: str | None, **kwargs) -> ShortEntryModel:
            Retrieve the entry matching a shortcode, or else the first
            active entry created for a target address.
            Raises ShortEntryNotFoundError if nothing matches.

        update(shortcode: str, target: str, expires_at: datetime | None, **kwargs) -> ShortEntryModel:
            Replace the target address and expiry of an existing entry.
            Raises ShortEntryNotFoundError if the entry does not exist.

        delete(shortcode: str, **kwargs) -> ShortEntryModel:
            Delete an entry and return it.
            Raises ShortEntryNotFoundError if the entry does not exist.

    All methods raise DataStoreError on connection, timeout or read/write failures.

    NOTE:
        - Entries may be physically present after their `expires_at` moment.
          Callers must check `ShortEntryModel.expired()` before treating an
          entry returned by get() as active.
    """

    @abstractmethod
    def insert(self, entry: ShortEntryModel, **kwargs) -> 'ShortEntryBaseDAO':
        """Insert a new ShortEntryModel into the data store.

        Args:
            entry (ShortEntryModel):
                The ShortEntryModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortEntryBaseDAO: self (for method chaining)

        Raises:
            ShortEntryAlreadyExistsError:
                If an unexpired entry with the same shortcode already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortEntryModel:
        """Retrieve a ShortEntryModel from the data store by its shortcode.

        Raises:
            ShortEntryNotFoundError:
                If no entry with the given shortcode exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_first(self, shortcode: str | None = None, target: str | None = None, **kwargs) -> ShortEntryModel:
        """Retrieve an entry by shortcode, falling back to its target address.

        A shortcode match always wins. Otherwise the oldest unexpired entry
        whose target equals `target` is returned.

        Raises:
            ValueError:
                If neither shortcode nor target is given.

            ShortEntryNotFoundError:
                If no entry matches.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def update(self, shortcode: str, target: str, expires_at: datetime | None = None, **kwargs) -> ShortEntryModel:
        """Replace target address and expiry of an existing entry.

        Args:
            shortcode (str):
                Shortcode of the entry to update.
            target (str):
                New canonical target address.
            expires_at (datetime | None):
                New expiry moment. None removes any expiry.

        Returns:
            ShortEntryModel: the updated entry.

        Raises:
            ShortEntryNotFoundError:
                If no entry with the given shortcode exists.

            ConcurrentModificationError:
                If the entry changed while the update was in flight.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, shortcode: str, **kwargs) -> ShortEntryModel:
        """Delete an entry from the data store.

        Returns:
            ShortEntryModel: the deleted entry.

        Raises:
            ShortEntryNotFoundError:
                If no entry with the given shortcode exists.

            ConcurrentModificationError:
                If the entry changed while the delete was in flight.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
