from .data import DataPageParser, DecodedPage
from .dictionary import DictionaryPageParser, DictType, read_payload

__all__ = [
    'DataPageParser',
    'DecodedPage',
    'DictType',
    'DictionaryPageParser',
    'read_payload',
]
