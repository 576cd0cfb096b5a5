"""Id-addressed view over one MongoDB collection of records."""

from collections.abc import AsyncIterator
from typing import Any

from pymongo import ASCENDING, ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

WITHOUT_OBJECT_ID = {"_id": False}
"""Projection that keeps MongoDB's generated ``_id`` out of every read."""

Document = dict[str, Any]


class RecordCollection:
    """One record type's documents, addressed by the record's id field.

    With ``unique_ids`` set, the first operation creates a unique ascending
    index on the id field. Reads never return ``_id``, so a document read
    back has exactly the fields that were written.

    Example:
        >>> widgets = RecordCollection(database["widgets"], "widget_id")
        >>> await widgets.insert({"widget_id": "w1", "label": "red"})
        >>> await widgets.set_field("w1", "label", "blue")
        {'widget_id': 'w1', 'label': 'blue'}
    """

    def __init__(
        self,
        collection: AsyncCollection[Document],
        id_field: str,
        unique_ids: bool = True,
    ) -> None:
        self._collection = collection
        self.id_field = id_field
        self._index_pending = unique_ids

    @property
    def name(self) -> str:
        return self._collection.name

    def _by_id(self, record_id: str) -> Document:
        return {self.id_field: record_id}

    async def _ready(self) -> AsyncCollection[Document]:
        if self._index_pending:
            await self._collection.create_index([(self.id_field, ASCENDING)], unique=True)
            self._index_pending = False
        return self._collection

    async def find_by_id(self, record_id: str) -> Document | None:
        collection = await self._ready()
        return await collection.find_one(self._by_id(record_id), projection=WITHOUT_OBJECT_ID)

    async def find(self, filter: Document) -> AsyncIterator[Document]:
        """Yield every document matching ``filter``, in natural order."""
        collection = await self._ready()
        async for document in collection.find(filter, projection=WITHOUT_OBJECT_ID):
            yield document

    async def insert(self, document: Document) -> None:
        # the driver writes the generated _id into the dict it is given
        collection = await self._ready()
        await collection.insert_one(dict(document))

    async def set_field(self, record_id: str, field: str, value: Any) -> Document | None:
        """Apply ``$set`` to one field and return the document as it is afterwards.

        Returns None when no document has the id.
        """
        collection = await self._ready()
        return await collection.find_one_and_update(
            self._by_id(record_id),
            {"$set": {field: value}},
            projection=WITHOUT_OBJECT_ID,
            return_document=ReturnDocument.AFTER,
        )

    async def delete_by_id(self, record_id: str) -> None:
        collection = await self._ready()
        await collection.delete_one(self._by_id(record_id))
