"""
User routes.

Thin translation of UserService results to HTTP status codes:
None / False become 404, malformed ids and payloads become 400.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import JSONResponse, Response

from ..services import UserService
from ..validation import parse_user
from .dependencies import get_user_service, parse_object_id

router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("")
async def get_all_users(service: UserService = Depends(get_user_service)) -> list[dict[str, Any]]:
    users = await service.list_users()
    return [user.to_api() for user in users]


@router.get("/{id}")
async def get_user_by_id(id: str, service: UserService = Depends(get_user_service)):
    user = await service.get_user(parse_object_id(id))
    if user is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return user.to_api()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    request: Request,
    payload: Any = Body(...),
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    user = await service.create_user(parse_user(payload))
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=user.to_api(),
        headers={"Location": str(request.url_for("get_user_by_id", id=user.id))},
    )


@router.put("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_user(
    id: str,
    payload: Any = Body(...),
    service: UserService = Depends(get_user_service),
) -> Response:
    user = parse_user(payload)
    object_id = parse_object_id(id)

    # The path id wins over any id in the body
    user.id = object_id

    if not await service.update_user(object_id, user):
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(id: str, service: UserService = Depends(get_user_service)) -> Response:
    if not await service.delete_user(parse_object_id(id)):
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
