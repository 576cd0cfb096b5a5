from abc import ABC, abstractmethod
from collections import defaultdict
from copy import deepcopy
from typing import Any, TypeVar

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from ..domain import IdExistsError, Persistable, SerializationError

P = TypeVar("P", bound=Persistable)


def to_document(record: Persistable) -> dict[str, Any]:
    """Dump a record to the document shape kept in the store."""
    return record.model_dump(mode="json")


def to_document_value(value: Any) -> Any:
    """Convert a single field value to its stored representation.

    Values are stored the way ``to_document`` stores them, so equality
    filters and single-field updates line up with whole-record writes.

    Raises:
        SerializationError: If the value has no JSON representation.
    """
    try:
        return to_jsonable_python(value)
    except PydanticSerializationError as err:
        raise SerializationError(f"Cannot store a value of type {type(value).__name__}") from err


def from_document(record_type: type[P], document: dict[str, Any]) -> P:
    """Rebuild a record from a stored document.

    Raises:
        SerializationError: If the document is not a valid ``record_type``.
    """
    document = {key: value for key, value in document.items() if key != "_id"}
    try:
        return record_type.model_validate(document)
    except ValidationError as err:
        raise SerializationError(
            f"Stored document is not a valid {record_type.__name__}"
        ) from err


def check_filter(field: str | None, value: Any) -> None:
    if field is None and value is not None:
        raise ValueError("A filter value was given without a filter field")


class RecordStore(ABC):
    """The persistent store: the source of truth for records.

    Records of each type live in the collection named by the type's
    ``collection_name()`` and are addressed by the value of its
    ``collection_id_field()``. Absent records are reported as ``None`` or an
    empty list, never as errors. Failures of the underlying store are raised
    as ``StoreError`` and never retried.
    """

    @staticmethod
    def in_memory() -> "RecordStore":
        return InMemoryRecordStore()

    @abstractmethod
    async def add(self, record: P) -> P:
        """Insert a record unless one with the same id already exists.

        The existence check and the insert are two separate operations;
        concurrent adds of the same id may both pass the check. Stores that
        can enforce uniqueness themselves should do so as a backstop.

        Args:
            record: The record to insert.

        Returns:
            The inserted record, unchanged.

        Raises:
            IdExistsError: If a record with the same id is already stored.
        """
        ...

    @abstractmethod
    async def fetch_by_id(self, record_type: type[P], record_id: str) -> P | None:
        """Load the record with the given id, or None when absent."""
        ...

    @abstractmethod
    async def fetch(
        self,
        record_type: type[P],
        field: str | None = None,
        value: Any = None,
    ) -> list[P]:
        """Load every record whose ``field`` equals ``value``.

        When no field is given, every record of the type is returned. An
        empty list means nothing matched.
        """
        ...

    @abstractmethod
    async def update(
        self,
        record_type: type[P],
        record_id: str,
        field: str,
        value: Any,
    ) -> P | None:
        """Set a single field on the record with the given id.

        Setting the id field itself moves the record to the new id.

        Returns:
            The full record as stored after the update, or None if no record
            has the id.

        Raises:
            IdExistsError: If the id field is set to an id that is already taken.
        """
        ...

    @abstractmethod
    async def delete(self, record_type: type[Persistable], record_id: str) -> None:
        """Remove the record with the given id. Deleting an absent id succeeds."""
        ...


class InMemoryRecordStore(RecordStore):
    """A record store that keeps documents in memory.

    Intended for tests and local development. Documents are stored in their
    serialized form so callers never share mutable state with the store.
    """

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)

    async def add(self, record: P) -> P:
        collection = self.collections[record.collection_name()]
        record_id = record.collection_id()
        if record_id in collection:
            raise IdExistsError(record.collection_name(), record_id)
        collection[record_id] = to_document(record)
        return record

    async def fetch_by_id(self, record_type: type[P], record_id: str) -> P | None:
        document = self.collections[record_type.collection_name()].get(record_id)
        if document is None:
            return None
        return from_document(record_type, deepcopy(document))

    async def fetch(
        self,
        record_type: type[P],
        field: str | None = None,
        value: Any = None,
    ) -> list[P]:
        check_filter(field, value)
        documents = self.collections[record_type.collection_name()].values()
        if field is not None:
            expected = to_document_value(value)
            documents = [doc for doc in documents if doc.get(field) == expected]
        return [from_document(record_type, deepcopy(doc)) for doc in documents]

    async def update(
        self,
        record_type: type[P],
        record_id: str,
        field: str,
        value: Any,
    ) -> P | None:
        collection = self.collections[record_type.collection_name()]
        if (document := collection.get(record_id)) is None:
            return None

        document = {**deepcopy(document), field: to_document_value(value)}
        record = from_document(record_type, deepcopy(document))
        new_id = record.collection_id()
        if new_id != record_id:
            # refiled under the new id; a taken id is rejected like a unique index would
            if new_id in collection:
                raise IdExistsError(record_type.collection_name(), new_id)
            del collection[record_id]
        collection[new_id] = document
        return record

    async def delete(self, record_type: type[Persistable], record_id: str) -> None:
        self.collections[record_type.collection_name()].pop(record_id, None)
