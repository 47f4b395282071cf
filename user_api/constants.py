"""
Constants for USER_API.

This module contains all shared constants used across the codebase to avoid
magic numbers and improve maintainability.
"""

from typing import Final

# ============================================================================
# DATABASE CONSTANTS
# ============================================================================

DEFAULT_MONGO_URI_TEMPLATE: Final[str] = "mongodb://{host}:{port}/?appname={app_name}"
"""Connection string template; host, port and app name are filled in at startup."""

DEFAULT_DB_HOST: Final[str] = "localhost"
DEFAULT_DB_PORT: Final[str] = "27017"
DEFAULT_DB_NAME: Final[str] = "UsersDb"
DEFAULT_APPLICATION_NAME: Final[str] = "UserAPI"

DEFAULT_USERS_COLLECTION: Final[str] = "Users"
"""Collection holding User documents keyed by ObjectId."""

DEFAULT_COUNTERS_COLLECTION: Final[str] = "counters"
"""Collection holding named sequence counters keyed by sequence name."""

DEFAULT_MAX_POOL_SIZE: Final[int] = 50
"""Default maximum MongoDB connection pool size."""

DEFAULT_MIN_POOL_SIZE: Final[int] = 1
"""Default minimum MongoDB connection pool size."""

DEFAULT_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 5000
"""Default server selection timeout in milliseconds."""

DEFAULT_MAX_IDLE_TIME_MS: Final[int] = 45000
"""Default maximum idle time before closing connections (milliseconds)."""

# ============================================================================
# SEQUENCE CONSTANTS
# ============================================================================

SEQUENCE_FIELD: Final[str] = "seq"

# ============================================================================
# VALIDATION CONSTANTS
# ============================================================================

NAME_MIN_LENGTH: Final[int] = 3
NAME_MAX_LENGTH: Final[int] = 255

USERNAME_MIN_LENGTH: Final[int] = 3
USERNAME_MAX_LENGTH: Final[int] = 25

COMPANY_NAME_MIN_LENGTH: Final[int] = 3
COMPANY_NAME_MAX_LENGTH: Final[int] = 255

COORDINATE_PATTERN: Final[str] = r"^-?\d+(\.\d+)?$"
"""Latitude / longitude as plain decimal text, e.g. "-37.3159"."""

WEBSITE_SCHEMES: Final[frozenset] = frozenset({"http", "https", "ftp"})

# ============================================================================
# HTTP CONSTANTS
# ============================================================================

CORRELATION_ID_HEADER: Final[str] = "X-Correlation-ID"
