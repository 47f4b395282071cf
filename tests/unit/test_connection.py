"""
Unit tests for the shared MongoDB client.

Tests singleton creation, configuration error mapping, verification, and shutdown.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pymongo.errors import ConfigurationError as PyMongoConfigurationError
from pymongo.errors import ServerSelectionTimeoutError

import user_api.database.connection as conn_module
from user_api.database.connection import (
    close_shared_client,
    get_shared_mongo_client,
    verify_shared_client,
)
from user_api.exceptions import ConfigurationError

MONGO_URI = "mongodb://localhost:27017"


@pytest.fixture(autouse=True)
def reset_shared_client():
    """Isolate each test from the module-level client."""
    original_client = conn_module._shared_client
    conn_module._shared_client = None
    yield
    conn_module._shared_client = original_client


class TestGetSharedClient:
    def test_second_call_returns_same_client(self):
        mock_client = MagicMock()

        with patch(
            "user_api.database.connection.AsyncIOMotorClient", return_value=mock_client
        ) as mock_cls:
            client1 = get_shared_mongo_client(MONGO_URI, max_pool_size=10, min_pool_size=1)
            client2 = get_shared_mongo_client(MONGO_URI, max_pool_size=10, min_pool_size=1)

        assert client1 is client2 is mock_client
        mock_cls.assert_called_once()

    def test_pool_and_retry_options(self):
        with patch("user_api.database.connection.AsyncIOMotorClient") as mock_cls:
            get_shared_mongo_client(
                MONGO_URI,
                max_pool_size=20,
                min_pool_size=2,
                server_selection_timeout_ms=3000,
                app_name="UserAPI",
            )

        args, kwargs = mock_cls.call_args
        assert args == (MONGO_URI,)
        assert kwargs["maxPoolSize"] == 20
        assert kwargs["minPoolSize"] == 2
        assert kwargs["serverSelectionTimeoutMS"] == 3000
        assert kwargs["appname"] == "UserAPI"
        assert kwargs["retryWrites"] is True
        assert kwargs["retryReads"] is True

    def test_driver_configuration_error_is_wrapped(self):
        with patch(
            "user_api.database.connection.AsyncIOMotorClient",
            side_effect=PyMongoConfigurationError("bad uri"),
        ):
            with pytest.raises(ConfigurationError) as exc_info:
                get_shared_mongo_client("mongodb://")

        assert exc_info.value.config_key == "MONGO_URI"
        assert conn_module._shared_client is None


class TestVerifySharedClient:
    @pytest.mark.asyncio
    async def test_no_client(self):
        assert await verify_shared_client() is False

    @pytest.mark.asyncio
    async def test_ping_succeeds(self):
        mock_client = MagicMock()
        mock_client.admin.command = AsyncMock(return_value={"ok": 1})
        conn_module._shared_client = mock_client

        assert await verify_shared_client() is True
        mock_client.admin.command.assert_awaited_once_with("ping")

    @pytest.mark.asyncio
    async def test_ping_fails(self):
        mock_client = MagicMock()
        mock_client.admin.command = AsyncMock(side_effect=ServerSelectionTimeoutError("down"))
        conn_module._shared_client = mock_client

        assert await verify_shared_client() is False


class TestCloseSharedClient:
    def test_close_resets_singleton(self):
        mock_client = MagicMock()
        conn_module._shared_client = mock_client

        close_shared_client()

        mock_client.close.assert_called_once()
        assert conn_module._shared_client is None

    def test_close_without_client_is_noop(self):
        close_shared_client()
        assert conn_module._shared_client is None
