"""Central test fixtures."""

import pytest
from ulid import ULID

from tandem import DataServices, InMemoryRecordCache, InMemoryRecordStore
from tests.fixtures import DemoStruct, FakeClock


@pytest.fixture
def record_id() -> str:
    """Generate a unique record ID."""
    return str(ULID())


@pytest.fixture
def demo_struct(record_id: str) -> DemoStruct:
    """Create a DemoStruct record."""
    return DemoStruct(id=record_id, name="Demo", description="d0")


@pytest.fixture
def clock() -> FakeClock:
    """Create a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def store() -> InMemoryRecordStore:
    """Create an in-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
def cache(clock: FakeClock) -> InMemoryRecordCache:
    """Create an in-memory record cache driven by the fake clock."""
    return InMemoryRecordCache(clock=clock)


@pytest.fixture
def services(store: InMemoryRecordStore, cache: InMemoryRecordCache) -> DataServices:
    """Create data services over the in-memory store and cache."""
    return DataServices(store, cache)
