"""In-memory fakes of the DAO contracts used by the resolution service"""

import dataclasses

import pytest

from linkresolver.models import ShortEntryModel
from linkresolver.dao.base import ShortEntryBaseDAO, ResolutionCacheBaseDAO, ExistenceFilterBaseDAO
from linkresolver.dao.exceptions import ShortEntryNotFoundError, ShortEntryAlreadyExistsError
from linkresolver.services import ResolutionService


class FakeStore(ShortEntryBaseDAO):
    def __init__(self):
        self.entries: dict[str, ShortEntryModel] = {}
        self.calls: list[str] = []

    def insert(self, entry, **kwargs):
        self.calls.append('insert')
        current = self.entries.get(entry.shortcode)
        if current is not None and not current.expired():
            raise ShortEntryAlreadyExistsError(f"Short entry with code '{entry.shortcode}' already exists.")
        self.entries[entry.shortcode] = entry
        return self

    def get(self, shortcode, **kwargs):
        self.calls.append('get')
        if shortcode not in self.entries:
            raise ShortEntryNotFoundError(f"Short entry with code '{shortcode}' not found.")
        return self.entries[shortcode]

    def find_first(self, shortcode=None, target=None, **kwargs):
        self.calls.append('find_first')
        if shortcode is None and target is None:
            raise ValueError('Either shortcode or target must be provided.')
        entry = self.entries.get(shortcode)
        if entry is not None and not entry.expired():
            return entry
        for entry in self.entries.values():  # insertion order == creation order
            if entry.target == target and not entry.expired():
                return entry
        raise ShortEntryNotFoundError('No short entry found.')

    def update(self, shortcode, target, expires_at=None, **kwargs):
        self.calls.append('update')
        if shortcode not in self.entries:
            raise ShortEntryNotFoundError(f"Short entry with code '{shortcode}' not found.")
        self.entries[shortcode] = dataclasses.replace(self.entries[shortcode], target=target, expires_at=expires_at)
        return self.entries[shortcode]

    def delete(self, shortcode, **kwargs):
        self.calls.append('delete')
        if shortcode not in self.entries:
            raise ShortEntryNotFoundError(f"Short entry with code '{shortcode}' not found.")
        return self.entries.pop(shortcode)


class FakeCache(ResolutionCacheBaseDAO):
    def __init__(self):
        self.values: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    def get(self, shortcode, **kwargs):
        return self.values.get(shortcode)

    def set(self, shortcode, target, ttl=None, **kwargs):
        self.values[shortcode] = target
        self.ttls[shortcode] = ttl
        return self

    def invalidate(self, shortcode, **kwargs):
        self.ttls.pop(shortcode, None)
        return self.values.pop(shortcode, None) is not None


class FakeFilter(ExistenceFilterBaseDAO):
    def __init__(self):
        self.members: set[str] = set()
        self.false_positives: set[str] = set()

    def initialize(self, capacity, error_rate, **kwargs):
        return True

    def add(self, shortcode, **kwargs):
        self.members.add(shortcode)
        return self

    def might_contain(self, shortcode, **kwargs):
        return shortcode in self.members or shortcode in self.false_positives


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def existence_filter() -> FakeFilter:
    return FakeFilter()


@pytest.fixture
def service(store: FakeStore, cache: FakeCache, existence_filter: FakeFilter) -> ResolutionService:
    return ResolutionService(store=store, cache=cache, existence_filter=existence_filter)
