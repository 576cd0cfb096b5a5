import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TypeVar

from pydantic import ValidationError

from ..domain import Cacheable, SerializationError

C = TypeVar("C", bound=Cacheable)


def cache_key(namespace: str, cache_id: str) -> str:
    """Build the cache key for a record.

    Neither part is escaped, so a namespace or id containing ``:`` can
    produce the same key as a different pair.
    """
    return f"{namespace}:{cache_id}"


def encode_record(record: Cacheable) -> bytes:
    """Serialize a record to the bytes kept in the cache."""
    try:
        return record.model_dump_json().encode("utf-8")
    except (TypeError, ValueError) as err:
        raise SerializationError(f"Could not serialize {type(record).__name__}") from err


def decode_record(record_type: type[C], data: bytes | str) -> C:
    """Rebuild a record from cached bytes.

    Raises:
        SerializationError: If the data is not a valid ``record_type``.
    """
    try:
        return record_type.model_validate_json(data)
    except ValidationError as err:
        raise SerializationError(
            f"Cached value is not a valid {record_type.__name__}"
        ) from err


class RecordCache(ABC):
    """A namespaced, TTL-bound cache of records.

    The cache is a derived view of the store and knows nothing about it.
    Entries are keyed by ``cache_key(record.cache_namespace(), record.cache_id())``
    and expire after ``record.cache_ttl_seconds()``. A missing entry is a
    cache miss and is reported as None, never as an error.
    """

    @staticmethod
    def null() -> "RecordCache":
        return NullRecordCache()

    @abstractmethod
    async def put(self, record: Cacheable) -> None:
        """Write the record and its expiry together in one atomic step."""
        ...

    @abstractmethod
    async def fetch(self, record_type: type[C], record_id: str) -> C | None:
        """Read a cached record, or None on a cache miss."""
        ...

    @abstractmethod
    async def delete(self, record_type: type[Cacheable], record_id: str) -> None:
        """Evict a cached record. Evicting an absent entry succeeds."""
        ...


class NullRecordCache(RecordCache):
    """A cache that never holds anything."""

    async def put(self, record: Cacheable) -> None:
        pass

    async def fetch(self, record_type: type[C], record_id: str) -> C | None:
        return None

    async def delete(self, record_type: type[Cacheable], record_id: str) -> None:
        pass


class InMemoryRecordCache(RecordCache):
    """A cache that keeps serialized records in a dict.

    Not intended for production use. Entries expire according to the
    record type's TTL, measured with ``clock`` (``time.monotonic`` unless
    a test supplies its own).
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self.entries: dict[str, tuple[bytes, float]] = {}

    def expires_at(self, key: str) -> float | None:
        """Expiry time of a live entry, or None if there is none."""
        entry = self._live_entry(key)
        return entry[1] if entry else None

    def _live_entry(self, key: str) -> tuple[bytes, float] | None:
        entry = self.entries.get(key)
        if entry is None:
            return None
        if entry[1] <= self.clock():
            del self.entries[key]
            return None
        return entry

    async def put(self, record: Cacheable) -> None:
        key = cache_key(record.cache_namespace(), record.cache_id())
        self.entries[key] = (
            encode_record(record),
            self.clock() + record.cache_ttl_seconds(),
        )

    async def fetch(self, record_type: type[C], record_id: str) -> C | None:
        entry = self._live_entry(cache_key(record_type.cache_namespace(), record_id))
        if entry is None:
            return None
        return decode_record(record_type, entry[0])

    async def delete(self, record_type: type[Cacheable], record_id: str) -> None:
        self.entries.pop(cache_key(record_type.cache_namespace(), record_id), None)
