"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortEntryNotFoundError:
        Raised when a ShortEntryModel is not found in the data store.

    ShortEntryAlreadyExistsError:
        Raised when attempting to insert a ShortEntryModel whose shortcode is taken.

    ConcurrentModificationError:
        Raised when a record changed while a transaction on it was in flight.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from linkresolver.dao.exceptions import ShortEntryNotFoundError
    >>> raise ShortEntryNotFoundError("Short entry with code 'abc123' not found.")
    Traceback (most recent call last):
        ...
    linkresolver.dao.exceptions.ShortEntryNotFoundError: Short entry with code 'abc123' not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class ShortEntryNotFoundError(DAOError):
    """Exception raised when a ShortEntryModel is not found in the data store."""

    pass


class ShortEntryAlreadyExistsError(DAOError):
    """Exception raised when attempting to insert a ShortEntryModel that already exists in the data store."""

    pass


class ConcurrentModificationError(DAOError):
    """Exception raised when a watched record is modified by another client mid-transaction."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    pass
