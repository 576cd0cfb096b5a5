"""Tandem - cache-aside persistence over MongoDB and Redis.

This module provides the public API for keeping records in a document store
with a TTL-bound key-value cache in front of it.
"""

from .application import (
    DataServices,
    InMemoryRecordCache,
    InMemoryRecordStore,
    NullRecordCache,
    RecordCache,
    RecordStore,
)
from .config import DataServicesConfig
from .domain import (
    CacheError,
    Cacheable,
    ConnectionSetupError,
    DataServicesError,
    IdExistsError,
    Persistable,
    Record,
    SerializationError,
    StoreError,
    UnexpectedCacheResponseError,
)

__all__ = [
    # Services
    "DataServices",
    "DataServicesConfig",
    # Records
    "Persistable",
    "Cacheable",
    "Record",
    # Backends
    "RecordStore",
    "InMemoryRecordStore",
    "RecordCache",
    "NullRecordCache",
    "InMemoryRecordCache",
    # Errors
    "DataServicesError",
    "ConnectionSetupError",
    "StoreError",
    "CacheError",
    "UnexpectedCacheResponseError",
    "SerializationError",
    "IdExistsError",
]
