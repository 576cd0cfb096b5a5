"""Integration tests for DataServices over real MongoDB and Redis via testcontainers."""

import asyncio

import pytest

from tandem import IdExistsError
from tandem.application.cache import cache_key
from tests.fixtures import DemoStruct, Widget


@pytest.mark.integration
@pytest.mark.asyncio
async def test_end_to_end_scenario(live_services):
    """Walk a record through add, fetch, update and delete."""
    original = DemoStruct(id="id_1", name="Demo", description="d0")

    assert await live_services.add_cached(original) == original
    assert await live_services.fetch_cached(DemoStruct, "id_1") == original

    await live_services.update_cached(DemoStruct, "id_1", "description", "d1")
    fetched = await live_services.fetch_cached(DemoStruct, "id_1")
    assert fetched is not None
    assert fetched.description == "d1"
    assert fetched.name == "Demo"

    await live_services.delete_cached(DemoStruct, "id_1")
    assert await live_services.fetch_cached(DemoStruct, "id_1") is None
    assert await live_services.fetch(DemoStruct, "id_1") is None


@pytest.mark.integration
@pytest.mark.asyncio
async def test_add_duplicate_keeps_first_value(live_services, demo_struct):
    await live_services.add(demo_struct)

    with pytest.raises(IdExistsError):
        await live_services.add(demo_struct.model_copy(update={"name": "Other"}))

    assert await live_services.fetch(DemoStruct, demo_struct.id) == demo_struct


@pytest.mark.integration
@pytest.mark.asyncio
async def test_unique_index_backstops_concurrent_adds(live_services, mongo_store, demo_struct):
    """Verify exactly one of several racing adds of the same id succeeds."""
    # creates the collection and its unique index before the race
    await mongo_store.fetch_by_id(DemoStruct, demo_struct.id)

    results = await asyncio.gather(
        *(live_services.add(demo_struct) for _ in range(5)),
        return_exceptions=True,
    )

    assert sum(1 for result in results if result == demo_struct) == 1
    assert all(
        isinstance(result, IdExistsError) for result in results if result != demo_struct
    )
    assert await live_services.fetch_all(DemoStruct, "id", demo_struct.id) == [demo_struct]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_cached_record_survives_store_delete(live_services, mongo_store, demo_struct):
    await live_services.add_cached(demo_struct)
    await mongo_store.delete(DemoStruct, demo_struct.id)

    assert await live_services.fetch_cached(DemoStruct, demo_struct.id) == demo_struct


@pytest.mark.integration
@pytest.mark.asyncio
async def test_read_through_populates_cache(live_services, mongo_store, redis_cache, demo_struct):
    await mongo_store.add(demo_struct)
    assert await redis_cache.fetch(DemoStruct, demo_struct.id) is None

    assert await live_services.fetch_cached(DemoStruct, demo_struct.id) == demo_struct

    await mongo_store.delete(DemoStruct, demo_struct.id)
    assert await live_services.fetch_cached(DemoStruct, demo_struct.id) == demo_struct


@pytest.mark.integration
@pytest.mark.asyncio
async def test_update_cached_resets_ttl(live_services, redis_manager, demo_struct):
    key = cache_key(DemoStruct.cache_namespace(), demo_struct.id)
    await live_services.add_cached(demo_struct)
    await redis_manager.client.expire(key, 10)

    await live_services.update_cached(DemoStruct, demo_struct.id, "description", "d1")

    assert await redis_manager.client.ttl(key) > 10


@pytest.mark.integration
@pytest.mark.asyncio
async def test_put_writes_value_with_ttl(redis_cache, redis_manager):
    widget = Widget(widget_id="w1", label="w")

    await redis_cache.put(widget)

    ttl = await redis_manager.client.ttl("widget-cache:w1")
    assert 0 < ttl <= 60


@pytest.mark.integration
@pytest.mark.asyncio
async def test_fetch_all_filters_on_one_field(live_services):
    first = Widget(widget_id="w1", label="red", tags=["a"])
    second = Widget(widget_id="w2", label="blue")
    await live_services.add(first)
    await live_services.add(second)

    assert await live_services.fetch_all(Widget, "label", "red") == [first]
    assert len(await live_services.fetch_all(Widget)) == 2
    assert await live_services.fetch_all(Widget, "label", "green") == []


@pytest.mark.integration
@pytest.mark.asyncio
async def test_update_missing_record(live_services):
    assert await live_services.update_cached(Widget, "missing", "label", "x") is None


@pytest.mark.integration
@pytest.mark.asyncio
async def test_update_of_id_field_moves_record(live_services):
    await live_services.add(DemoStruct(id="a", name="n", description="d"))

    moved = await live_services.update(DemoStruct, "a", "id", "b")

    assert await live_services.fetch(DemoStruct, "b") == moved
    assert await live_services.fetch(DemoStruct, "a") is None
