"""
In-memory Database Context

DatabaseContext implementation for tests and local runs without a MongoDB
server. Supports the subset of MongoDB behavior the services rely on:

- top-level equality filters ({} matches everything)
- ObjectId assignment on insert and DuplicateKeyError on a taken ``_id``
- modified_count of 0 when a replacement is identical to the stored document
- ``$set`` / ``$inc`` updates with upsert seeded from the filter

Every operation runs to completion without awaiting, so each one is atomic
with respect to other coroutines on the same event loop.
"""

import copy
import logging
from typing import Any

import bson
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, WriteError
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from .base import CollectionHandle, DatabaseContext

logger = logging.getLogger(__name__)

DUPLICATE_KEY_CODE = 11000
IMMUTABLE_FIELD_CODE = 66


class InMemoryCursor:
    """Materialized result set with the Motor cursor surface used by callers."""

    def __init__(self, documents: list[dict[str, Any]]):
        self._documents = documents
        self._position = 0

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        remaining = self._documents[self._position :]
        if length:
            remaining = remaining[:length]
        self._position += len(remaining)
        return remaining

    def __aiter__(self) -> "InMemoryCursor":
        return self

    async def __anext__(self) -> dict[str, Any]:
        if self._position >= len(self._documents):
            raise StopAsyncIteration
        doc = self._documents[self._position]
        self._position += 1
        return doc


class InMemoryCollection(CollectionHandle):
    """
    Dictionary-backed collection keyed by ``_id``.

    Documents are deep-copied on the way in and out so callers never share
    state with the store.
    """

    def __init__(self, name: str):
        self.name = name
        self._storage: dict[Any, dict[str, Any]] = {}

    def _matches_filter(self, data: dict[str, Any], filter: dict[str, Any]) -> bool:
        """Simple equality matching on top-level fields."""
        for key, value in filter.items():
            if key not in data:
                return False
            if data[key] != value:
                return False
        return True

    @staticmethod
    def _id_first(document: dict[str, Any]) -> dict[str, Any]:
        """Reorder so ``_id`` leads, as the server stores it."""
        return {"_id": document["_id"], **{k: v for k, v in document.items() if k != "_id"}}

    def _first_match(self, filter: dict[str, Any]) -> dict[str, Any] | None:
        for data in self._storage.values():
            if self._matches_filter(data, filter):
                return data
        return None

    def find(self, filter: dict[str, Any] | None = None) -> InMemoryCursor:
        filter = filter or {}
        docs = [
            copy.deepcopy(data)
            for data in self._storage.values()
            if self._matches_filter(data, filter)
        ]
        return InMemoryCursor(docs)

    async def insert_one(self, document: dict[str, Any]) -> InsertOneResult:
        if "_id" not in document:
            # Motor sets _id on the caller's document too
            document["_id"] = ObjectId()
        doc_id = document["_id"]
        if doc_id in self._storage:
            raise DuplicateKeyError(
                f"E11000 duplicate key error collection: {self.name} "
                f"index: _id_ dup key: {{ _id: {doc_id!r} }}",
                code=DUPLICATE_KEY_CODE,
            )
        self._storage[doc_id] = self._id_first(copy.deepcopy(document))
        return InsertOneResult(doc_id, True)

    async def replace_one(self, filter: dict[str, Any], document: dict[str, Any]) -> UpdateResult:
        current = self._first_match(filter)
        if current is None:
            return UpdateResult({"n": 0, "nModified": 0}, True)

        replacement = copy.deepcopy(document)
        if "_id" in replacement and replacement["_id"] != current["_id"]:
            raise WriteError(
                "After applying the update, the (immutable) field '_id' was found "
                "to have been altered",
                code=IMMUTABLE_FIELD_CODE,
            )
        replacement["_id"] = current["_id"]
        replacement = self._id_first(replacement)

        # MongoDB compares the encoded documents, so field order counts
        if bson.encode(replacement) == bson.encode(current):
            return UpdateResult({"n": 1, "nModified": 0}, True)

        self._storage[current["_id"]] = replacement
        return UpdateResult({"n": 1, "nModified": 1}, True)

    async def delete_one(self, filter: dict[str, Any]) -> DeleteResult:
        current = self._first_match(filter)
        if current is None:
            return DeleteResult({"n": 0}, True)
        del self._storage[current["_id"]]
        return DeleteResult({"n": 1}, True)

    async def find_one_and_update(
        self,
        filter: dict[str, Any],
        update: dict[str, Any],
        upsert: bool = False,
        return_document: bool = ReturnDocument.BEFORE,
    ) -> dict[str, Any] | None:
        current = self._first_match(filter)
        if current is None:
            if not upsert:
                return None
            current = {
                key: copy.deepcopy(value)
                for key, value in filter.items()
                if not key.startswith("$")
            }
            current.setdefault("_id", ObjectId())
            current = self._id_first(current)
            before = None
            self._apply_update(current, update)
            self._storage[current["_id"]] = current
            logger.debug(f"Upserted document {current['_id']!r} into '{self.name}'")
        else:
            before = copy.deepcopy(current)
            self._apply_update(current, update)

        if return_document == ReturnDocument.AFTER:
            return copy.deepcopy(current)
        return before

    @staticmethod
    def _apply_update(document: dict[str, Any], update: dict[str, Any]) -> None:
        for operator, fields in update.items():
            if operator == "$inc":
                for key, amount in fields.items():
                    document[key] = document.get(key, 0) + amount
            elif operator == "$set":
                for key, value in fields.items():
                    document[key] = copy.deepcopy(value)
            else:
                raise WriteError(f"Unsupported update operator: {operator}", code=9)

    def clear(self) -> None:
        """Remove all documents (useful for test setup)."""
        self._storage.clear()


class InMemoryDbContext(DatabaseContext):
    """DatabaseContext whose collections live in process memory."""

    def __init__(self):
        self._collections: dict[str, InMemoryCollection] = {}

    def get_collection(self, name: str) -> InMemoryCollection:
        if name not in self._collections:
            self._collections[name] = InMemoryCollection(name)
        return self._collections[name]
