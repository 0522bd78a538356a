from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Optional

from linkresolver.utils.helpers import seconds_until


@dataclass(frozen=True)
class ShortEntryModel:
    """Represent a shortcode -> canonical target address mapping.

    Attributes:
        shortcode (str):
            The unique, URL-safe identifier of the entry. Immutable.
        target (str):
            The canonical target address the shortcode resolves to.
        created_at (datetime):
            Moment the entry was created (UTC). Immutable.
        expires_at (Optional[datetime]):
            Moment after which the entry is logically expired and must be
            treated as absent, even if still present in the data store.
            None means the entry never expires.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> entry = ShortEntryModel(
        ...     shortcode="V1StGXR8_Z",
        ...     target="https://example.com/article/123",
        ...     created_at=datetime.now(UTC),
        ...     expires_at=datetime.now(UTC) + timedelta(days=30),
        ... )
        >>> entry.expired()
        False
        >>> entry.ttl()
        2592000
    """
    shortcode: str
    target: str
    created_at: datetime
    expires_at: Optional[datetime] = None

    def expired(self, now: Optional[datetime] = None) -> bool:
        """True if the entry has an expiry moment and it has passed"""
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or datetime.now(UTC))

    def ttl(self, now: Optional[datetime] = None) -> Optional[int]:
        """Seconds left until expiry (rounded up), or None if the entry never expires"""
        if self.expires_at is None:
            return None
        return seconds_until(self.expires_at, now=now)
