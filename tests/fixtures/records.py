"""Record types shared by the test suite."""

from datetime import datetime

from tandem import Cacheable, Persistable, Record


class DemoStruct(Record):
    """A cached record using every default except the collection name."""

    __collection__ = "demo_struct"

    id: str
    name: str
    description: str


class Widget(Record):
    """A record with its own id field, cache namespace and TTL."""

    __collection__ = "widgets"
    __id_field__ = "widget_id"
    __cache_namespace__ = "widget-cache"
    __cache_ttl__ = 60

    widget_id: str
    label: str
    tags: list[str] = []
    created_at: datetime | None = None


class AuditEntry(Persistable):
    """A record that is persisted but never cached."""

    id: str
    message: str


class Session(Cacheable):
    """A record that is cached but never persisted."""

    __cache_namespace__ = "sessions"
    __cache_ttl__ = 600
    __cache_id_field__ = "token"

    token: str
    user: str


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
