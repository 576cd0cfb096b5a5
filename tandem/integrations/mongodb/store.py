"""MongoDB implementation of RecordStore."""

import logging
from typing import Any, TypeVar

from pymongo.errors import DuplicateKeyError, PyMongoError

from ...application.store import (
    RecordStore,
    check_filter,
    from_document,
    to_document,
    to_document_value,
)
from ...domain import IdExistsError, Persistable, StoreError
from .collection import RecordCollection
from .connection import MongoDBConnectionManager

LOGGER = logging.getLogger(__name__)

P = TypeVar("P", bound=Persistable)


class MongoRecordStore(RecordStore):
    """MongoDB-backed record store.

    Each record type is kept in the collection named by its
    ``collection_name()``. Documents are the record's JSON-mode dump, so
    they read back into an equal record:

        {
            "_id": ObjectId(),
            "id": "id_1",
            "name": "Demo",
            "description": "d0"
        }

    ``add`` checks for an existing id before inserting. Unless
    ``unique_ids`` is disabled in the configuration, a unique index on the id
    field is created the first time a collection is used, so two adds racing
    past the check cannot both insert; the loser gets ``IdExistsError``.

    Every driver failure is raised as ``StoreError`` with the driver
    exception chained. Nothing is retried.

    Example:
        >>> store = MongoRecordStore(MongoDBConnectionManager(config))
        >>> await store.add(DemoStruct(id="id_1", name="Demo", description="d0"))
        >>> await store.fetch_by_id(DemoStruct, "id_1")
        DemoStruct(id='id_1', name='Demo', description='d0')
    """

    def __init__(self, connection_manager: MongoDBConnectionManager) -> None:
        """Initialize the MongoDB record store.

        Args:
            connection_manager: MongoDB connection manager
        """
        self.connection_manager = connection_manager
        self._collections: dict[tuple[str, str], RecordCollection] = {}

    def _collection(self, record_type: type[Persistable]) -> RecordCollection:
        key = (record_type.collection_name(), record_type.collection_id_field())
        if (collection := self._collections.get(key)) is None:
            name, id_field = key
            collection = RecordCollection(
                self.connection_manager.database[name],
                id_field,
                unique_ids=self.connection_manager.config.unique_ids,
            )
            self._collections[key] = collection
        return collection

    async def add(self, record: P) -> P:
        record_type = type(record)
        record_id = record.collection_id()

        if await self.fetch_by_id(record_type, record_id) is not None:
            raise IdExistsError(record.collection_name(), record_id)

        try:
            await self._collection(record_type).insert(to_document(record))
        except DuplicateKeyError as err:
            raise IdExistsError(record.collection_name(), record_id) from err
        except PyMongoError as err:
            LOGGER.error("Error saving %s: %s", record.collection_name(), err)
            raise StoreError(f"Failed to add to {record.collection_name()}") from err

        LOGGER.debug("Added %s: %s", record.collection_name(), record_id)
        return record

    async def fetch_by_id(self, record_type: type[P], record_id: str) -> P | None:
        try:
            document = await self._collection(record_type).find_by_id(record_id)
        except PyMongoError as err:
            LOGGER.error("Error fetching %s: %s", record_type.collection_name(), err)
            raise StoreError(f"Failed to fetch from {record_type.collection_name()}") from err

        if document is None:
            LOGGER.debug(
                "Fetch not found: %s - %s:%s",
                record_type.collection_name(),
                record_type.collection_id_field(),
                record_id,
            )
            return None
        return from_document(record_type, document)

    async def fetch(
        self,
        record_type: type[P],
        field: str | None = None,
        value: Any = None,
    ) -> list[P]:
        check_filter(field, value)
        filter = {} if field is None else {field: to_document_value(value)}

        try:
            documents = [doc async for doc in self._collection(record_type).find(filter)]
        except PyMongoError as err:
            LOGGER.error("Error fetching %s: %s", record_type.collection_name(), err)
            raise StoreError(f"Failed to fetch from {record_type.collection_name()}") from err

        return [from_document(record_type, doc) for doc in documents]

    async def update(
        self,
        record_type: type[P],
        record_id: str,
        field: str,
        value: Any,
    ) -> P | None:
        try:
            document = await self._collection(record_type).set_field(
                record_id,
                field,
                to_document_value(value),
            )
        except DuplicateKeyError as err:
            raise IdExistsError(record_type.collection_name(), str(value)) from err
        except PyMongoError as err:
            LOGGER.error("Error updating %s: %s", record_type.collection_name(), err)
            raise StoreError(f"Failed to update {record_type.collection_name()}") from err

        if document is None:
            return None
        LOGGER.debug("Updated %s: %s - %s", record_type.collection_name(), record_id, field)
        return from_document(record_type, document)

    async def delete(self, record_type: type[Persistable], record_id: str) -> None:
        try:
            await self._collection(record_type).delete_by_id(record_id)
        except PyMongoError as err:
            LOGGER.error("Error deleting from %s: %s", record_type.collection_name(), err)
            raise StoreError(f"Failed to delete from {record_type.collection_name()}") from err

        LOGGER.debug(
            "Deleted %s - %s:%s",
            record_type.collection_name(),
            record_type.collection_id_field(),
            record_id,
        )
