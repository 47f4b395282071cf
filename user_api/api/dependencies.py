"""
FastAPI dependencies for the User API.

Usage:
    from fastapi import Depends
    from user_api.api.dependencies import get_user_service

    @router.get("/{id}")
    async def get_user(id: str, service: UserService = Depends(get_user_service)):
        return await service.get_user(id)
"""

from bson import ObjectId
from fastapi import HTTPException, Request

from ..models import is_valid_object_id
from ..services import UserService


async def get_user_service(request: Request) -> UserService:
    """Get the UserService instance from app state."""
    service = getattr(request.app.state, "user_service", None)
    if service is None:
        raise HTTPException(503, "User service not initialized")
    return service


def parse_object_id(id: str) -> str:
    """
    Normalize a path id to its lowercase 24-hex form.

    Raises:
        HTTPException: 400 if id is not a valid ObjectId
    """
    if not is_valid_object_id(id):
        raise HTTPException(400, "Invalid id format")
    return str(ObjectId(id))
