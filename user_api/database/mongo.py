"""
MongoDB Database Context

Implements the DatabaseContext interface over a Motor database.
Store errors are not translated here; they propagate to the service.
"""

import logging
from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorCursor, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from ..exceptions import ConfigurationError
from .base import CollectionHandle, DatabaseContext

logger = logging.getLogger(__name__)


class MongoCollection(CollectionHandle):
    """
    CollectionHandle backed by an AsyncIOMotorCollection.

    Example:
        users = MongoCollection(db["Users"])
        result = await users.insert_one({"name": "John Doe"})
        print(result.inserted_id)
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self._collection = collection

    @property
    def name(self) -> str:
        return self._collection.name

    def find(self, filter: dict[str, Any] | None = None) -> AsyncIOMotorCursor:
        return self._collection.find(filter or {})

    async def insert_one(self, document: dict[str, Any]) -> InsertOneResult:
        return await self._collection.insert_one(document)

    async def replace_one(self, filter: dict[str, Any], document: dict[str, Any]) -> UpdateResult:
        return await self._collection.replace_one(filter, document)

    async def delete_one(self, filter: dict[str, Any]) -> DeleteResult:
        return await self._collection.delete_one(filter)

    async def find_one_and_update(
        self,
        filter: dict[str, Any],
        update: dict[str, Any],
        upsert: bool = False,
        return_document: bool = ReturnDocument.BEFORE,
    ) -> dict[str, Any] | None:
        return await self._collection.find_one_and_update(
            filter, update, upsert=upsert, return_document=return_document
        )


class MongoDbContext(DatabaseContext):
    """
    DatabaseContext over a Motor database handle.

    The database handle is shared by every request and never reconfigured.

    Example:
        client = get_shared_mongo_client(settings.connection_string)
        context = MongoDbContext(client[settings.db_name])
        users = context.get_collection(settings.users_collection_name)
    """

    def __init__(self, database: AsyncIOMotorDatabase | None):
        """
        Initialize the context.

        Args:
            database: Motor database handle

        Raises:
            ConfigurationError: If database is None
        """
        if database is None:
            raise ConfigurationError("A database handle is required", config_key="database")
        self._database = database

    @property
    def database(self) -> AsyncIOMotorDatabase:
        return self._database

    def get_collection(self, name: str) -> MongoCollection:
        return MongoCollection(self._database[name])
