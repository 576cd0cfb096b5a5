"""Shared AsyncMongoClient for the record store."""

import logging

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from ...domain import ConnectionSetupError
from .config import MongoDBConfig

LOGGER = logging.getLogger(__name__)


class MongoDBConnectionManager:
    """Owns the one MongoDB client a record store talks through.

    Nothing touches the network until the client is first needed. The
    client pools its connections, so a single manager serves any number
    of concurrent store operations.

    Examples:
        >>> manager = MongoDBConnectionManager(
        ...     MongoDBConfig(uri="mongodb://localhost:27017", database="myapp")
        ... )
        >>> await manager.connect()
        >>> store = MongoRecordStore(manager)
        >>> await manager.close()

        >>> async with MongoDBConnectionManager(config) as manager:
        ...     await manager.connect()
    """

    def __init__(self, config: MongoDBConfig):
        self.config = config
        self._client: AsyncMongoClient | None = None

    @property
    def client(self) -> AsyncMongoClient:
        """The client, built from the configuration on first access."""
        if self._client is None:
            self._client = AsyncMongoClient(self.config.uri, **self.config.client_options())
        return self._client

    @property
    def database(self) -> AsyncDatabase:
        return self.client[self.config.database]

    async def connect(self) -> None:
        """Fail fast if the server cannot be reached.

        Raises:
            ConnectionSetupError: The client could not be built or did not
                answer a ping.
        """
        try:
            await self.client.admin.command("ping")
        except (PyMongoError, ValueError, TypeError) as err:
            LOGGER.error("MongoDB: failed to connect to %s", self.config.database, exc_info=True)
            raise ConnectionSetupError("MongoDB: failed to create client") from err
        LOGGER.info("MongoDB: connected to database '%s'", self.config.database)

    async def verify_connectivity(self) -> bool:
        """Ping the server and report whether it answered."""
        try:
            await self.client.admin.command("ping")
        except Exception:
            LOGGER.warning("MongoDB: ping failed", exc_info=True)
            return False
        return True

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.close()

    async def __aenter__(self) -> "MongoDBConnectionManager":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
