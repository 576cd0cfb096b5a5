"""Exceptions raised by tandem's stores, caches and data services."""


class DataServicesError(Exception):
    """Base class for every error raised by tandem."""


class ConnectionSetupError(DataServicesError):
    """Raised when a store or cache client cannot be established at startup.

    This is fatal to startup and is never retried.
    """


class StoreError(DataServicesError):
    """Raised when an operation against the persistent store fails.

    The underlying driver exception is always available as ``__cause__``.
    """


class CacheError(DataServicesError):
    """Raised when an operation against the cache fails.

    The underlying driver exception is always available as ``__cause__``.
    """


class UnexpectedCacheResponseError(CacheError):
    """Raised when the cache answers with a value of an unexpected shape."""


class SerializationError(DataServicesError):
    """Raised when a record cannot be encoded or decoded.

    The original encoder or validation error is chained as ``__cause__``.
    """


class IdExistsError(DataServicesError):
    """Raised when adding a record whose id is already present in the store.

    This is an expected condition that callers are free to branch on.

    Attributes:
        collection: Name of the collection the record was added to.
        record_id: The duplicate id value.
    """

    def __init__(self, collection: str, record_id: str):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"A value with this id already exists in '{collection}': {record_id}")
