"""Roles API: create, update, delete (cascading)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from rbac_console.api.v1.dependencies import (
    get_cascade_service,
    get_role_service,
    require_permission,
)
from rbac_console.application.dtos.user import AuthenticatedUser
from rbac_console.application.services import CascadeService, RoleService
from rbac_console.core.limiter import limit_writes
from rbac_console.schemas.role import RoleCreate, RoleResponse, RoleUpdate

router = APIRouter()


@router.post("", response_model=RoleResponse, status_code=201)
@limit_writes
async def create_role(
    request: Request,
    body: RoleCreate,
    role_svc: Annotated[RoleService, Depends(get_role_service)],
    actor: Annotated[AuthenticatedUser, Depends(require_permission("role", "create"))],
) -> RoleResponse:
    """Create a role. pid "0" is the root; a role cannot be its own parent (409)."""
    created = await role_svc.create_role(
        body.code,
        body.name,
        body.pid,
        body.description,
        body.status.value,
        role_id=body.id,
        actor_id=actor.user_id,
    )
    return RoleResponse.model_validate(created)


@router.put("/{role_id}", response_model=RoleResponse)
@limit_writes
async def update_role(
    request: Request,
    role_id: str,
    body: RoleUpdate,
    role_svc: Annotated[RoleService, Depends(get_role_service)],
    actor: Annotated[AuthenticatedUser, Depends(require_permission("role", "update"))],
) -> RoleResponse:
    updated = await role_svc.update_role(
        role_id,
        body.code,
        body.name,
        body.pid,
        body.description,
        body.status.value if body.status else None,
        actor_id=actor.user_id,
    )
    return RoleResponse.model_validate(updated)


@router.delete("/{role_id}", status_code=204)
@limit_writes
async def delete_role(
    request: Request,
    role_id: str,
    cascade_svc: Annotated[CascadeService, Depends(get_cascade_service)],
    _: Annotated[object, Depends(require_permission("role", "delete"))] = None,
) -> Response:
    """Delete a role with its policy tuples, menu and permission grants and memberships."""
    await cascade_svc.delete_role(role_id)
    return Response(status_code=204)
