"""
Pytest configuration and shared fixtures for USER_API tests.

This module provides:
- Settings and service fixtures over the in-memory context
- Mock Motor collection fixtures
- Test data factories
- Testcontainers fixtures for integration tests
"""

import os
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from motor.motor_asyncio import AsyncIOMotorCollection

from user_api.config import UsersDatabaseSettings
from user_api.database import InMemoryDbContext, MongoDbContext
from user_api.services import UserService


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: tests that need a real MongoDB server")


# ============================================================================
# SETTINGS AND SERVICE FIXTURES
# ============================================================================


@pytest.fixture
def settings() -> UsersDatabaseSettings:
    """Provide settings with fixed collection names."""
    return UsersDatabaseSettings(
        mongo_uri="mongodb://localhost:27017",
        db_name="test_db",
        users_collection_name="Users",
        counters_collection_name="counters",
    )


@pytest.fixture
def memory_context() -> InMemoryDbContext:
    """Provide an empty in-memory database context."""
    return InMemoryDbContext()


@pytest.fixture
def user_service(memory_context: InMemoryDbContext, settings) -> UserService:
    """Create a UserService over the in-memory context."""
    return UserService(memory_context, settings)


# ============================================================================
# MOCK MONGODB FIXTURES
# ============================================================================


@pytest.fixture
def mock_mongo_collection() -> MagicMock:
    """Create a mock Motor collection."""
    collection = MagicMock(spec=AsyncIOMotorCollection)
    collection.name = "Users"
    collection.find = MagicMock(return_value=MagicMock(to_list=AsyncMock(return_value=[])))
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id="test_id"))
    collection.replace_one = AsyncMock(return_value=MagicMock(modified_count=1))
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    collection.find_one_and_update = AsyncMock(return_value=None)
    return collection


@pytest.fixture
def mock_mongo_database(mock_mongo_collection: MagicMock) -> MagicMock:
    """Create a mock Motor database whose every collection is mock_mongo_collection."""
    db = MagicMock()
    db.name = "test_db"
    db.__getitem__.return_value = mock_mongo_collection
    return db


@pytest.fixture
def mocked_user_service(mock_mongo_database: MagicMock, settings) -> UserService:
    """Create a UserService over a mocked Motor database."""
    return UserService(MongoDbContext(mock_mongo_database), settings)


# ============================================================================
# TEST DATA FACTORIES
# ============================================================================


@pytest.fixture
def minimal_user_payload() -> Dict[str, Any]:
    """Provide the smallest valid user payload."""
    return {
        "name": "John Doe",
        "username": "johndoe",
        "email": "johndoe@example.com",
    }


@pytest.fixture
def full_user_payload() -> Dict[str, Any]:
    """Provide a user payload with every optional section filled in."""
    return {
        "name": "Leanne Graham",
        "username": "Bret",
        "email": "Sincere@april.biz",
        "address": {
            "street": "Kulas Light",
            "suite": "Apt. 556",
            "city": "Gwenborough",
            "zipcode": "92998-3874",
            "geo": {"lat": "-37.3159", "lng": "81.1496"},
        },
        "phone": "1-770-736-8031 x56442",
        "website": "https://hildegard.org",
        "company": {
            "name": "Romaguera-Crona",
            "catchPhrase": "Multi-layered client-server neural-net",
            "bs": "harness real-time e-markets",
        },
    }


# ============================================================================
# TESTCONTAINERS FIXTURES (Real MongoDB for Integration Tests)
# ============================================================================


@pytest.fixture(scope="session")
def mongodb_container():
    """
    Start a MongoDB container for integration tests.

    Session-scoped: container starts once and is reused for all integration tests.
    """
    try:
        from testcontainers.mongodb import MongoDbContainer
    except ImportError:
        pytest.skip("testcontainers not installed. Install with: pip install testcontainers")

    try:
        container = MongoDbContainer(image="mongo:7")
        container.start()
    except Exception as e:  # Docker unavailable
        pytest.skip(f"Could not start MongoDB container: {e}")

    yield container
    container.stop()


@pytest_asyncio.fixture
async def real_mongo_db(mongodb_container):
    """
    Create a real MongoDB database for testing.

    Uses a unique database name per test and drops it afterwards.
    """
    from motor.motor_asyncio import AsyncIOMotorClient

    client = AsyncIOMotorClient(mongodb_container.get_connection_url())
    db_name = f"test_db_{os.getpid()}_{id(client)}"

    yield client[db_name]

    await client.drop_database(db_name)
    client.close()


@pytest_asyncio.fixture
async def real_user_service(real_mongo_db, settings) -> UserService:
    """Create a UserService over a real MongoDB database."""
    return UserService(MongoDbContext(real_mongo_db), settings)
