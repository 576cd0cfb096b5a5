"""Redis implementation of RecordCache."""

import logging
from typing import TypeVar

from redis.exceptions import RedisError

from ...application.cache import RecordCache, cache_key, decode_record, encode_record
from ...domain import Cacheable, CacheError, UnexpectedCacheResponseError
from .connection import RedisConnectionManager

LOGGER = logging.getLogger(__name__)

C = TypeVar("C", bound=Cacheable)


class RedisRecordCache(RecordCache):
    """Redis-backed record cache.

    Each record is stored as its JSON bytes under
    ``"{cache_namespace}:{cache_id}"``. Value and expiry are written by one
    ``SET key value EX ttl`` command, so no key ever exists without its TTL.

    Redis failures are raised as ``CacheError`` with the driver exception
    chained. Nothing is retried.

    Example:
        >>> cache = RedisRecordCache(RedisConnectionManager(config))
        >>> await cache.put(DemoStruct(id="id_1", name="Demo", description="d0"))
        >>> await cache.fetch(DemoStruct, "id_1")
        DemoStruct(id='id_1', name='Demo', description='d0')
    """

    def __init__(self, connection_manager: RedisConnectionManager) -> None:
        """Initialize the Redis record cache.

        Args:
            connection_manager: Redis connection manager
        """
        self.connection_manager = connection_manager

    async def put(self, record: Cacheable) -> None:
        key = cache_key(record.cache_namespace(), record.cache_id())
        data = encode_record(record)
        try:
            await self.connection_manager.client.set(key, data, ex=record.cache_ttl_seconds())
        except RedisError as err:
            LOGGER.error("Redis SET error for key '%s': %s", key, err)
            raise CacheError(f"Failed to cache {key}") from err
        LOGGER.debug("Cached: %s", key)

    async def fetch(self, record_type: type[C], record_id: str) -> C | None:
        key = cache_key(record_type.cache_namespace(), record_id)
        try:
            response = await self.connection_manager.client.get(key)
        except RedisError as err:
            LOGGER.error("Redis GET error for key '%s': %s", key, err)
            raise CacheError(f"Failed to read {key} from cache") from err

        if response is None:
            LOGGER.debug("Item not in cache: %s", key)
            return None
        if not isinstance(response, bytes | str):
            raise UnexpectedCacheResponseError(
                f"Unexpected cache response for {key}: {type(response).__name__}"
            )

        LOGGER.debug("Fetched from cache: %s", key)
        return decode_record(record_type, response)

    async def delete(self, record_type: type[Cacheable], record_id: str) -> None:
        key = cache_key(record_type.cache_namespace(), record_id)
        try:
            await self.connection_manager.client.delete(key)
        except RedisError as err:
            LOGGER.error("Redis DEL error for key '%s': %s", key, err)
            raise CacheError(f"Failed to delete {key} from cache") from err
        LOGGER.debug("Deleted from cache: %s", key)
