"""Abstract base class for shortcode existence filters.

An existence filter is a probabilistic set of every shortcode ever issued.
It answers "definitely absent" (False) or "possibly present" (True):

    - no false negatives: might_contain() is True for every added shortcode
    - bounded false positives: might_contain() may be True for a shortcode
      never added, with probability <= the configured error rate
    - no removal: membership outlives deletion of the entry

Only a False answer carries information. A True answer never proves that
an entry is currently active.
"""

from abc import ABC, abstractmethod


class ExistenceFilterBaseDAO(ABC):
    """Interface for probabilistic shortcode membership stores."""

    @abstractmethod
    def initialize(self, capacity: int, error_rate: float, **kwargs) -> bool:
        """Reserve the filter for `capacity` elements at `error_rate`.

        Idempotent: reserving a filter that already exists is not an error.

        Returns:
            bool: True if the filter was created, False if it already existed.
        """
        pass

    @abstractmethod
    def add(self, shortcode: str, **kwargs) -> 'ExistenceFilterBaseDAO':
        """Record `shortcode` as a member. Irreversible."""
        pass

    @abstractmethod
    def might_contain(self, shortcode: str, **kwargs) -> bool:
        """False only if `shortcode` was never added."""
        pass
