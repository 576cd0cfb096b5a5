from .exceptions import (
    CacheError,
    ConnectionSetupError,
    DataServicesError,
    IdExistsError,
    SerializationError,
    StoreError,
    UnexpectedCacheResponseError,
)
from .record import (
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_ID_FIELD,
    Cacheable,
    Persistable,
    Record,
)

__all__ = [
    "Persistable",
    "Cacheable",
    "Record",
    "DEFAULT_ID_FIELD",
    "DEFAULT_CACHE_TTL_SECONDS",
    "DataServicesError",
    "ConnectionSetupError",
    "StoreError",
    "CacheError",
    "UnexpectedCacheResponseError",
    "SerializationError",
    "IdExistsError",
]
