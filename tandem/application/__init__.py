"""Cache-aside orchestration over a record store and a record cache.

This package provides:
- DataServices: cache-aside add/fetch/update/delete over a store and cache
- RecordStore: the persistent store interface, with an in-memory backend
- RecordCache: the cache interface, with null and in-memory backends
"""

from .cache import InMemoryRecordCache, NullRecordCache, RecordCache, cache_key
from .services import DataServices
from .store import InMemoryRecordStore, RecordStore

__all__ = [
    "DataServices",
    "RecordStore",
    "InMemoryRecordStore",
    "RecordCache",
    "NullRecordCache",
    "InMemoryRecordCache",
    "cache_key",
]
