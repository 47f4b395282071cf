"""
Shared MongoDB Connection

Provides a process-wide MongoDB client so every request shares one
connection pool. The client is created during application startup and
closed at shutdown.

Usage:
    from user_api.database import get_shared_mongo_client, close_shared_client

    client = get_shared_mongo_client(settings.connection_string)
    db = client[settings.db_name]
    ...
    close_shared_client()
"""

import logging
import threading

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import (
    ConfigurationError as PyMongoConfigurationError,
)
from pymongo.errors import (
    ConnectionFailure,
    InvalidOperation,
    OperationFailure,
    ServerSelectionTimeoutError,
)

from ..constants import (
    DEFAULT_APPLICATION_NAME,
    DEFAULT_MAX_IDLE_TIME_MS,
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_MIN_POOL_SIZE,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
)
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Global singleton instance
_shared_client: AsyncIOMotorClient | None = None
# threading.Lock rather than asyncio.Lock: creation may happen outside a loop
_init_lock = threading.Lock()


def get_shared_mongo_client(
    mongo_uri: str,
    max_pool_size: int = DEFAULT_MAX_POOL_SIZE,
    min_pool_size: int = DEFAULT_MIN_POOL_SIZE,
    server_selection_timeout_ms: int = DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
    max_idle_time_ms: int = DEFAULT_MAX_IDLE_TIME_MS,
    app_name: str = DEFAULT_APPLICATION_NAME,
) -> AsyncIOMotorClient:
    """
    Gets or creates the shared MongoDB client instance.

    Args:
        mongo_uri: MongoDB connection URI
        max_pool_size: Maximum connection pool size
        min_pool_size: Minimum connection pool size
        server_selection_timeout_ms: Server selection timeout in milliseconds
        max_idle_time_ms: Maximum idle time before closing connections
        app_name: Application name reported to the server

    Returns:
        Shared AsyncIOMotorClient instance

    Raises:
        ConfigurationError: If the URI or options are rejected by the driver
    """
    global _shared_client

    # Fast path: return existing client if already initialized
    if _shared_client is not None:
        return _shared_client

    with _init_lock:
        # Double-check pattern: another thread may have initialized while we waited
        if _shared_client is not None:
            return _shared_client

        logger.info(
            f"Creating shared MongoDB client with max_pool_size={max_pool_size}, "
            f"min_pool_size={min_pool_size}"
        )

        try:
            # Retries are left to the driver's retryable reads/writes
            _shared_client = AsyncIOMotorClient(
                mongo_uri,
                serverSelectionTimeoutMS=server_selection_timeout_ms,
                appname=app_name,
                maxPoolSize=max_pool_size,
                minPoolSize=min_pool_size,
                maxIdleTimeMS=max_idle_time_ms,
                retryWrites=True,
                retryReads=True,
            )
        except (PyMongoConfigurationError, ValueError, TypeError) as e:
            logger.error(f"Failed to create shared MongoDB client: {e}", exc_info=True)
            _shared_client = None
            raise ConfigurationError(
                "Invalid MongoDB connection settings", config_key="MONGO_URI"
            ) from e

        logger.info("Shared MongoDB client created successfully")
        return _shared_client


async def verify_shared_client() -> bool:
    """
    Verifies that the shared MongoDB client is connected.

    Returns:
        True if client is connected and responsive, False otherwise
    """
    if _shared_client is None:
        logger.warning("Shared MongoDB client is None - cannot verify")
        return False

    try:
        await _shared_client.admin.command("ping")
        logger.debug("Shared MongoDB client verification successful")
        return True
    except (
        ConnectionFailure,
        ServerSelectionTimeoutError,
        OperationFailure,
        InvalidOperation,
    ) as e:
        logger.warning(f"Shared MongoDB client verification failed: {e}")
        return False


def close_shared_client() -> None:
    """
    Closes the shared MongoDB client.
    Should be called during application shutdown.
    """
    global _shared_client

    if _shared_client is not None:
        try:
            _shared_client.close()
            logger.info("Shared MongoDB client closed")
        except (InvalidOperation, AttributeError, RuntimeError) as e:
            logger.warning(f"Error closing shared MongoDB client: {e}")
        finally:
            _shared_client = None
