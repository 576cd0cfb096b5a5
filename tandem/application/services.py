import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from ..domain import ConnectionSetupError, Persistable, Record
from .cache import RecordCache
from .store import RecordStore

if TYPE_CHECKING:
    from ..config import DataServicesConfig

LOGGER = logging.getLogger(__name__)

P = TypeVar("P", bound=Persistable)
R = TypeVar("R", bound=Record)


class ConnectionResource(Protocol):
    async def close(self) -> None: ...


class DataServices:
    """Cache-aside access to records kept in a store and mirrored in a cache.

    The store is the source of truth and the cache is a derived, TTL-bound
    view of it. Every write goes to the store first and only then to the
    cache; a failed store write never reaches the cache. Nothing is rolled
    back: when the store write commits and the following cache operation
    fails, the cache error is raised and the cache stays out of date until
    the entry expires or a later write replaces it.

    Errors are never swallowed or retried. The first failure aborts the
    operation and propagates to the caller. Absent records are returned as
    None.

    Examples:
        >>> services = DataServices(MongoRecordStore(mongo), RedisRecordCache(redis))
        >>> await services.add_cached(DemoStruct(id="id_1", name="Demo", description="d0"))
        >>> await services.fetch_cached(DemoStruct, "id_1")
        DemoStruct(id='id_1', name='Demo', description='d0')

        >>> # Or build everything from TANDEM_* environment variables
        >>> async with await DataServices.connect(DataServicesConfig()) as services:
        ...     await services.delete_cached(DemoStruct, "id_1")
    """

    __slots__ = ("store", "cache", "_resources")

    def __init__(
        self,
        store: RecordStore,
        cache: RecordCache,
        resources: Sequence[ConnectionResource] = (),
    ):
        """Initialize data services.

        Args:
            store: The persistent store.
            cache: The cache.
            resources: Connections owned by this instance, closed by ``close``.
        """
        self.store = store
        self.cache = cache
        self._resources = tuple(resources)

    @classmethod
    async def connect(cls, config: "DataServicesConfig") -> "DataServices":
        """Connect to MongoDB and Redis and build data services on top of them.

        Should be called once at startup. Both connections are verified
        before returning.

        Raises:
            ConnectionSetupError: If either client cannot be established.
        """
        from ..integrations.mongodb import MongoDBConnectionManager, MongoRecordStore
        from ..integrations.redis import RedisConnectionManager, RedisRecordCache

        mongo = MongoDBConnectionManager(config.mongodb_config())
        redis = RedisConnectionManager(config.redis_config())
        try:
            await mongo.connect()
            await redis.connect()
        except ConnectionSetupError:
            LOGGER.error("Data services failed to start")
            await mongo.close()
            await redis.close()
            raise

        LOGGER.info("Data services connected to database '%s'", config.db_database)
        return cls(MongoRecordStore(mongo), RedisRecordCache(redis), resources=(mongo, redis))

    async def close(self) -> None:
        """Close the connections owned by this instance."""
        for resource in self._resources:
            await resource.close()

    async def __aenter__(self) -> "DataServices":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    # ========== Store only ==========

    async def add(self, record: P) -> P:
        """Add a record to the store. The cache is not involved.

        Raises:
            IdExistsError: If a record with the same id is already stored.
        """
        return await self.store.add(record)

    async def fetch(self, record_type: type[P], record_id: str) -> P | None:
        """Fetch a record straight from the store. The cache is not involved."""
        return await self.store.fetch_by_id(record_type, record_id)

    async def fetch_all(
        self,
        record_type: type[P],
        field: str | None = None,
        value: Any = None,
    ) -> list[P]:
        """Fetch every record of a type, optionally where ``field`` equals ``value``."""
        return await self.store.fetch(record_type, field, value)

    async def update(
        self,
        record_type: type[P],
        record_id: str,
        field: str,
        value: Any,
    ) -> P | None:
        """Set one field of a stored record.

        A cached copy of the record is left as it is; use ``update_cached``
        for records that may be cached.
        """
        return await self.store.update(record_type, record_id, field, value)

    async def delete(self, record_type: type[Persistable], record_id: str) -> None:
        """Delete a record from the store.

        A cached copy of the record is left as it is; use ``delete_cached``
        for records that may be cached.
        """
        await self.store.delete(record_type, record_id)

    # ========== Cache aside ==========

    async def add_cached(self, record: R) -> R:
        """Add a record to the store, then cache it.

        Raises:
            IdExistsError: If a record with the same id is already stored.
                Nothing is cached in that case.
        """
        result = await self.store.add(record)
        await self.cache.put(result)
        return result

    async def fetch_cached(self, record_type: type[R], record_id: str) -> R | None:
        """Fetch a record from the cache, falling back to the store.

        On a cache hit the store is not consulted. On a miss the record is
        read from the store and, if found, cached before it is returned.
        """
        if (cached := await self.cache.fetch(record_type, record_id)) is not None:
            return cached

        LOGGER.debug(
            "Cache miss, reading through to the store",
            extra={"collection": record_type.collection_name(), "record_id": record_id},
        )
        record = await self.store.fetch_by_id(record_type, record_id)
        if record is None:
            return None

        await self.cache.put(record)
        return record

    async def update_cached(
        self,
        record_type: type[R],
        record_id: str,
        field: str,
        value: Any,
    ) -> R | None:
        """Set one field of a stored record, then re-cache the whole record.

        Re-caching the full record also restarts its expiry. If no record
        has the id, the cache is left untouched and None is returned.
        """
        record = await self.store.update(record_type, record_id, field, value)
        if record is None:
            return None

        await self.cache.put(record)
        return record

    async def delete_cached(self, record_type: type[Record], record_id: str) -> None:
        """Delete a record from the store, then evict it from the cache."""
        await self.store.delete(record_type, record_id)
        await self.cache.delete(record_type, record_id)
