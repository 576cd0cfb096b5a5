"""Pooled asyncio Redis client for the record cache."""

import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError

from ...domain import ConnectionSetupError
from .config import RedisConfig

LOGGER = logging.getLogger(__name__)


class RedisConnectionManager:
    """Owns the Redis client a record cache talks through.

    The client is built from the URI on first use and keeps its own
    connection pool, bounded by ``max_connections``. Values come back as
    bytes; ``decode_responses`` is never set.

    Examples:
        >>> manager = RedisConnectionManager(RedisConfig(uri="redis://localhost:6379/0"))
        >>> await manager.connect()
        >>> cache = RedisRecordCache(manager)
        >>> await manager.close()
    """

    def __init__(self, config: RedisConfig):
        self.config = config
        self._client: Redis | None = None

    @property
    def client(self) -> Redis:
        if self._client is None:
            self._client = Redis.from_url(
                self.config.uri,
                max_connections=self.config.max_connections,
                socket_timeout=self.config.socket_timeout,
                socket_connect_timeout=self.config.socket_connect_timeout,
            )
        return self._client

    async def connect(self) -> None:
        """Build the client and ping the server once.

        Raises:
            ConnectionSetupError: The URI was rejected or the server did not
                answer.
        """
        try:
            await self.client.ping()
        except (RedisError, ValueError) as err:
            LOGGER.error("Redis: failed to connect", exc_info=True)
            raise ConnectionSetupError("Redis: failed to create client") from err
        LOGGER.info("Redis: connected")

    async def verify_connectivity(self) -> bool:
        try:
            await self.client.ping()
        except Exception:
            LOGGER.warning("Redis: ping failed", exc_info=True)
            return False
        return True

    async def close(self) -> None:
        """Close the client and disconnect its pool."""
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.aclose()

    async def __aenter__(self) -> "RedisConnectionManager":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
