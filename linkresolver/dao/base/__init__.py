from linkresolver.dao.base.short_entry_base_dao import ShortEntryBaseDAO
from linkresolver.dao.base.resolution_cache_base_dao import ResolutionCacheBaseDAO
from linkresolver.dao.base.existence_filter_base_dao import ExistenceFilterBaseDAO


__all__ = [
    'ShortEntryBaseDAO',
    'ResolutionCacheBaseDAO',
    'ExistenceFilterBaseDAO',
]
