"""
HTTP layer for the User API.
"""

from .dependencies import get_user_service, parse_object_id
from .error_handlers import register_error_handlers
from .routes import router

__all__ = [
    "router",
    "register_error_handlers",
    "get_user_service",
    "parse_object_id",
]
