from linkresolver.models.short_entry_model import ShortEntryModel
from linkresolver.models.link_options import LinkOptions


__all__ = [
    'ShortEntryModel',
    'LinkOptions',
]
