"""Users API: create (with the default role), update, delete (cascading)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from rbac_console.api.v1.dependencies import (
    get_cascade_service,
    get_user_service,
    require_permission,
)
from rbac_console.application.dtos.user import AuthenticatedUser
from rbac_console.application.services import CascadeService, UserService
from rbac_console.core.limiter import limit_writes
from rbac_console.schemas.user import UserCreate, UserResponse, UserUpdate

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=201)
@limit_writes
async def create_user(
    request: Request,
    body: UserCreate,
    user_svc: Annotated[UserService, Depends(get_user_service)],
    actor: Annotated[AuthenticatedUser, Depends(require_permission("user", "create"))],
) -> UserResponse:
    created = await user_svc.create_user(
        body.username,
        body.password,
        body.domain,
        body.nick_name,
        avatar=body.avatar,
        email=body.email,
        phone_number=body.phone_number,
        status=body.status.value,
        actor_id=actor.user_id,
    )
    return UserResponse.model_validate(created)


@router.put("/{user_id}", response_model=UserResponse)
@limit_writes
async def update_user(
    request: Request,
    user_id: str,
    body: UserUpdate,
    user_svc: Annotated[UserService, Depends(get_user_service)],
    actor: Annotated[AuthenticatedUser, Depends(require_permission("user", "update"))],
) -> UserResponse:
    updated = await user_svc.update_user(
        user_id,
        body.username,
        body.nick_name,
        avatar=body.avatar,
        email=body.email,
        phone_number=body.phone_number,
        status=body.status.value if body.status else None,
        actor_id=actor.user_id,
    )
    return UserResponse.model_validate(updated)


@router.delete("/{user_id}", status_code=204)
@limit_writes
async def delete_user(
    request: Request,
    user_id: str,
    cascade_svc: Annotated[CascadeService, Depends(get_cascade_service)],
    _: Annotated[object, Depends(require_permission("user", "delete"))] = None,
) -> Response:
    await cascade_svc.delete_user(user_id)
    return Response(status_code=204)
