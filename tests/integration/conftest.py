"""Fixtures for integration tests against real MongoDB and Redis containers."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from testcontainers.mongodb import MongoDbContainer
from testcontainers.redis import RedisContainer

from tandem import DataServices
from tandem.integrations.mongodb import (
    MongoDBConfig,
    MongoDBConnectionManager,
    MongoRecordStore,
)
from tandem.integrations.redis import (
    RedisConfig,
    RedisConnectionManager,
    RedisRecordCache,
)


@pytest.fixture(scope="module")
def mongodb_container():
    """Start MongoDB container for tests."""
    with MongoDbContainer("mongo:7") as container:
        yield container


@pytest.fixture(scope="module")
def redis_container():
    """Start Redis container for tests."""
    with RedisContainer("redis:7") as container:
        yield container


@pytest_asyncio.fixture
async def mongo_manager(
    request: pytest.FixtureRequest, mongodb_container
) -> AsyncIterator[MongoDBConnectionManager]:
    """Create a connection manager on a database of its own."""
    config = MongoDBConfig(
        uri=mongodb_container.get_connection_url(),
        database=f"test_{request.node.name}"[:63],
        app_name="tandem-tests",
    )
    async with MongoDBConnectionManager(config) as manager:
        await manager.connect()
        await manager.client.drop_database(config.database)
        yield manager


@pytest_asyncio.fixture
async def redis_manager(redis_container) -> AsyncIterator[RedisConnectionManager]:
    """Create a connection manager on an empty Redis database."""
    host = redis_container.get_container_host_ip()
    port = redis_container.get_exposed_port(6379)
    async with RedisConnectionManager(RedisConfig(uri=f"redis://{host}:{port}/0")) as manager:
        await manager.connect()
        await manager.client.flushdb()
        yield manager


@pytest.fixture
def mongo_store(mongo_manager: MongoDBConnectionManager) -> MongoRecordStore:
    return MongoRecordStore(mongo_manager)


@pytest.fixture
def redis_cache(redis_manager: RedisConnectionManager) -> RedisRecordCache:
    return RedisRecordCache(redis_manager)


@pytest.fixture
def live_services(mongo_store: MongoRecordStore, redis_cache: RedisRecordCache) -> DataServices:
    return DataServices(mongo_store, redis_cache)
