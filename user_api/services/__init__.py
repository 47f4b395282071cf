"""
Domain services.

Usage:
    from user_api.services import UserService

    service = UserService(context, settings)
    user = await service.get_user(user_id)
"""

from .user_service import UserService

__all__ = ["UserService"]
