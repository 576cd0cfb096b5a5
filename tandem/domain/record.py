import re
from typing import ClassVar

from pydantic import BaseModel

DEFAULT_ID_FIELD = "id"
DEFAULT_CACHE_TTL_SECONDS = 3600

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case(name: str) -> str:
    """Convert a class name such as ``DemoStruct`` to ``demo_struct``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


class Persistable(BaseModel):
    """Identity contract for records kept in the persistent store.

    Each persistable type lives in its own collection and is addressed by the
    value of a single id field. Both are declared as class attributes:

    - ``__collection__``: collection name (default: snake-cased class name)
    - ``__id_field__``: name of the id field (default: ``"id"``)

    Examples:
        >>> class DemoStruct(Persistable):
        ...     __collection__ = "demo_struct"
        ...
        ...     id: str
        ...     name: str
        >>>
        >>> DemoStruct.collection_name()
        'demo_struct'
        >>> DemoStruct(id="id_1", name="Demo").collection_id()
        'id_1'

    Subclasses that need a computed id may override ``collection_id``.
    """

    __collection__: ClassVar[str | None] = None
    __id_field__: ClassVar[str] = DEFAULT_ID_FIELD

    @classmethod
    def collection_name(cls) -> str:
        """The collection holding every record of this type."""
        return cls.__collection__ or snake_case(cls.__name__)

    @classmethod
    def collection_id_field(cls) -> str:
        """The field used for id based lookups."""
        return cls.__id_field__

    def collection_id(self) -> str:
        """The id value of this record instance."""
        return str(getattr(self, self.collection_id_field()))


class Cacheable(BaseModel):
    """Cache contract for records that may be kept in the cache.

    Class attributes:

    - ``__cache_namespace__``: key prefix for this type (default: the
      collection name for persistable types, otherwise the snake-cased
      class name)
    - ``__cache_ttl__``: lifetime of a cache entry in seconds (default 3600)
    - ``__cache_id_field__``: field holding the cache id, only consulted for
      types that are not also ``Persistable`` (default: ``"id"``)

    Examples:
        >>> class Session(Cacheable):
        ...     __cache_namespace__ = "sessions"
        ...     __cache_ttl__ = 600
        ...
        ...     id: str
        >>>
        >>> Session.cache_ttl_seconds()
        600
    """

    __cache_namespace__: ClassVar[str | None] = None
    __cache_ttl__: ClassVar[int] = DEFAULT_CACHE_TTL_SECONDS
    __cache_id_field__: ClassVar[str] = DEFAULT_ID_FIELD

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Reject non-positive cache lifetimes when the type is defined."""
        super().__init_subclass__(**kwargs)  # type: ignore[arg-type]
        ttl = cls.__cache_ttl__
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
            raise ValueError(
                f"{cls.__name__}.__cache_ttl__ must be a positive number of seconds, got {ttl!r}"
            )

    @classmethod
    def cache_namespace(cls) -> str:
        """The key prefix shared by every cached record of this type."""
        if cls.__cache_namespace__:
            return cls.__cache_namespace__
        if issubclass(cls, Persistable):
            return cls.collection_name()
        return snake_case(cls.__name__)

    @classmethod
    def cache_ttl_seconds(cls) -> int:
        """Seconds a cache entry for this type lives before it expires."""
        return cls.__cache_ttl__

    def cache_id(self) -> str:
        """The id of this record within its cache namespace."""
        if isinstance(self, Persistable):
            return self.collection_id()
        return str(getattr(self, self.__cache_id_field__))


class Record(Persistable, Cacheable):
    """A record that is both persisted and cacheable.

    Examples:
        >>> class DemoStruct(Record):
        ...     __collection__ = "demo_struct"
        ...
        ...     id: str
        ...     name: str
        ...     description: str
        >>>
        >>> record = DemoStruct(id="id_1", name="Demo", description="d0")
        >>> record.cache_namespace(), record.cache_id(), record.cache_ttl_seconds()
        ('demo_struct', 'id_1', 3600)
    """
