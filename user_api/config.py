"""
Configuration management for USER_API.

Settings are read from environment variables with explicit constructor
arguments taking precedence, so tests and scripts can build a config
without touching the process environment.
"""

import os

from .constants import (
    DEFAULT_APPLICATION_NAME,
    DEFAULT_COUNTERS_COLLECTION,
    DEFAULT_DB_HOST,
    DEFAULT_DB_NAME,
    DEFAULT_DB_PORT,
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_MIN_POOL_SIZE,
    DEFAULT_MONGO_URI_TEMPLATE,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
    DEFAULT_USERS_COLLECTION,
)
from .exceptions import ConfigurationError


class UsersDatabaseSettings:
    """
    Users database configuration.

    Example:
        # Using environment variables
        settings = UsersDatabaseSettings()
        settings.validate()
        client = get_shared_mongo_client(settings.connection_string)

        # Or using direct parameters
        settings = UsersDatabaseSettings(
            mongo_uri="mongodb://localhost:27017",
            db_name="UsersDb",
        )
    """

    def __init__(
        self,
        mongo_uri: str | None = None,
        db_host: str | None = None,
        db_port: str | None = None,
        db_name: str | None = None,
        application_name: str | None = None,
        users_collection_name: str | None = None,
        counters_collection_name: str | None = None,
        max_pool_size: int | None = None,
        min_pool_size: int | None = None,
        server_selection_timeout_ms: int | None = None,
    ):
        """
        Initialize configuration.

        Args:
            mongo_uri: Connection string or template with {host}, {port} and
                {app_name} placeholders (defaults to MONGO_URI env var)
            db_host: Database host (defaults to DB_HOST)
            db_port: Database port (defaults to DB_PORT)
            db_name: Database name (defaults to DB_NAME)
            application_name: Name reported to the server (defaults to APPLICATION_NAME)
            users_collection_name: Users collection (defaults to USERS_COLLECTION_NAME)
            counters_collection_name: Counters collection (defaults to
                COUNTERS_COLLECTION_NAME)
            max_pool_size: Maximum connection pool size (defaults to MONGO_MAX_POOL_SIZE)
            min_pool_size: Minimum connection pool size (defaults to MONGO_MIN_POOL_SIZE)
            server_selection_timeout_ms: Server selection timeout in ms
                (defaults to MONGO_SERVER_SELECTION_TIMEOUT_MS)
        """
        self.mongo_uri = mongo_uri or os.getenv("MONGO_URI", DEFAULT_MONGO_URI_TEMPLATE)
        self.db_host = db_host or os.getenv("DB_HOST", DEFAULT_DB_HOST)
        self.db_port = db_port or os.getenv("DB_PORT", DEFAULT_DB_PORT)
        self.db_name = db_name or os.getenv("DB_NAME", DEFAULT_DB_NAME)
        self.application_name = application_name or os.getenv(
            "APPLICATION_NAME", DEFAULT_APPLICATION_NAME
        )
        self.users_collection_name = users_collection_name or os.getenv(
            "USERS_COLLECTION_NAME", DEFAULT_USERS_COLLECTION
        )
        self.counters_collection_name = counters_collection_name or os.getenv(
            "COUNTERS_COLLECTION_NAME", DEFAULT_COUNTERS_COLLECTION
        )
        self.max_pool_size = (
            max_pool_size
            if max_pool_size is not None
            else int(os.getenv("MONGO_MAX_POOL_SIZE", str(DEFAULT_MAX_POOL_SIZE)))
        )
        self.min_pool_size = (
            min_pool_size
            if min_pool_size is not None
            else int(os.getenv("MONGO_MIN_POOL_SIZE", str(DEFAULT_MIN_POOL_SIZE)))
        )
        self.server_selection_timeout_ms = (
            server_selection_timeout_ms
            if server_selection_timeout_ms is not None
            else int(
                os.getenv(
                    "MONGO_SERVER_SELECTION_TIMEOUT_MS",
                    str(DEFAULT_SERVER_SELECTION_TIMEOUT_MS),
                )
            )
        )

    @property
    def connection_string(self) -> str:
        """The MongoDB URI with host, port and application name filled in."""
        try:
            return self.mongo_uri.format(
                host=self.db_host, port=self.db_port, app_name=self.application_name
            )
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigurationError(
                "MONGO_URI contains an unknown placeholder",
                config_key="MONGO_URI",
            ) from e

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If required configuration is missing or invalid
        """
        if not self.mongo_uri:
            raise ConfigurationError(
                "mongo_uri is required (set MONGO_URI environment variable or pass directly)",
                config_key="MONGO_URI",
            )

        if not self.db_name:
            raise ConfigurationError(
                "db_name is required (set DB_NAME environment variable or pass directly)",
                config_key="DB_NAME",
            )

        if not self.users_collection_name:
            raise ConfigurationError(
                "users_collection_name must not be empty", config_key="USERS_COLLECTION_NAME"
            )

        if not self.counters_collection_name:
            raise ConfigurationError(
                "counters_collection_name must not be empty",
                config_key="COUNTERS_COLLECTION_NAME",
            )

        if self.max_pool_size < 1:
            raise ConfigurationError(
                f"max_pool_size must be >= 1, got {self.max_pool_size}",
                config_key="MONGO_MAX_POOL_SIZE",
                config_value=self.max_pool_size,
            )

        if self.min_pool_size < 1:
            raise ConfigurationError(
                f"min_pool_size must be >= 1, got {self.min_pool_size}",
                config_key="MONGO_MIN_POOL_SIZE",
                config_value=self.min_pool_size,
            )

        if self.min_pool_size > self.max_pool_size:
            raise ConfigurationError(
                f"min_pool_size ({self.min_pool_size}) cannot be greater than "
                f"max_pool_size ({self.max_pool_size})"
            )

        if self.server_selection_timeout_ms < 1000:
            raise ConfigurationError(
                f"server_selection_timeout_ms must be >= 1000, got "
                f"{self.server_selection_timeout_ms}",
                config_key="MONGO_SERVER_SELECTION_TIMEOUT_MS",
                config_value=self.server_selection_timeout_ms,
            )

        # Renders the template; raises on unknown placeholders
        self.connection_string
