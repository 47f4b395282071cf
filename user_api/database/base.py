"""
Abstract Database Context

Defines the collection-handle and context interfaces that abstract data
access. Services depend on these, so they work with either the MongoDB
adapter or the in-memory adapter used in tests.
"""

from abc import ABC, abstractmethod
from typing import Any

from pymongo import ReturnDocument
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult


class CollectionHandle(ABC):
    """
    Operations available on a named collection.

    Filters and updates use MongoDB syntax. Return types are pymongo's
    result objects so callers read ``modified_count`` / ``deleted_count``
    the same way regardless of the backing store.

    Example:
        users = context.get_collection("Users")
        docs = await users.find({}).to_list(length=None)
        result = await users.delete_one({"_id": some_id})
        deleted = result.deleted_count > 0
    """

    @abstractmethod
    def find(self, filter: dict[str, Any] | None = None) -> Any:
        """
        Find documents matching a filter.

        Args:
            filter: MongoDB-style filter dictionary (None or {} matches all)

        Returns:
            Cursor supporting ``await cursor.to_list(length=None)`` and ``async for``
        """
        pass

    @abstractmethod
    async def insert_one(self, document: dict[str, Any]) -> InsertOneResult:
        """
        Insert a single document.

        Args:
            document: Document to insert; ``_id`` is assigned when absent

        Returns:
            InsertOneResult with inserted_id

        Raises:
            pymongo.errors.DuplicateKeyError: If ``_id`` is already taken
        """
        pass

    @abstractmethod
    async def replace_one(self, filter: dict[str, Any], document: dict[str, Any]) -> UpdateResult:
        """
        Replace the first document matching a filter.

        Returns:
            UpdateResult; ``modified_count`` is 0 when nothing matched or the
            replacement equals the stored document
        """
        pass

    @abstractmethod
    async def delete_one(self, filter: dict[str, Any]) -> DeleteResult:
        """
        Delete the first document matching a filter.

        Returns:
            DeleteResult with deleted_count
        """
        pass

    @abstractmethod
    async def find_one_and_update(
        self,
        filter: dict[str, Any],
        update: dict[str, Any],
        upsert: bool = False,
        return_document: bool = ReturnDocument.BEFORE,
    ) -> dict[str, Any] | None:
        """
        Atomically find a document and apply an update to it.

        Args:
            filter: MongoDB filter
            update: Update operators (``$inc``, ``$set``)
            upsert: Create the document from the filter when absent
            return_document: ReturnDocument.BEFORE or ReturnDocument.AFTER

        Returns:
            The document before or after modification, or None
        """
        pass


class DatabaseContext(ABC):
    """Resolves logical collection names to collection handles."""

    @abstractmethod
    def get_collection(self, name: str) -> CollectionHandle:
        """
        Get a handle for a named collection.

        Args:
            name: Collection name

        Returns:
            CollectionHandle routed to that collection
        """
        pass
