"""
Database layer.

Provides the DatabaseContext abstraction with a MongoDB adapter, an
in-memory adapter for tests, and the shared MongoDB client.
"""

from .base import CollectionHandle, DatabaseContext
from .connection import close_shared_client, get_shared_mongo_client, verify_shared_client
from .memory import InMemoryCollection, InMemoryCursor, InMemoryDbContext
from .mongo import MongoCollection, MongoDbContext

__all__ = [
    # Interfaces
    "DatabaseContext",
    "CollectionHandle",
    # Adapters
    "MongoDbContext",
    "MongoCollection",
    "InMemoryDbContext",
    "InMemoryCollection",
    "InMemoryCursor",
    # Connection
    "get_shared_mongo_client",
    "verify_shared_client",
    "close_shared_client",
]
