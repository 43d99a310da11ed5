"""Menus API: create, update, delete (blocked while children exist)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from rbac_console.api.v1.dependencies import (
    get_cascade_service,
    get_menu_service,
    require_permission,
)
from rbac_console.application.dtos.menu import MenuInput
from rbac_console.application.dtos.user import AuthenticatedUser
from rbac_console.application.services import CascadeService, MenuService
from rbac_console.core.limiter import limit_writes
from rbac_console.schemas.menu import MenuBody, MenuCreate, MenuResponse

router = APIRouter()


def _to_input(body: MenuBody) -> MenuInput:
    data = body.model_dump(exclude={"id"})
    data["menu_type"] = body.menu_type.value
    data["status"] = body.status.value
    return MenuInput(**data)


@router.post("", response_model=MenuResponse, status_code=201)
@limit_writes
async def create_menu(
    request: Request,
    body: MenuCreate,
    menu_svc: Annotated[MenuService, Depends(get_menu_service)],
    actor: Annotated[AuthenticatedUser, Depends(require_permission("menu", "create"))],
) -> MenuResponse:
    """Create a menu. pid 0 is the root; a menu cannot be its own parent (409)."""
    created = await menu_svc.create_menu(_to_input(body), menu_id=body.id, actor_id=actor.user_id)
    return MenuResponse.model_validate(created)


@router.put("/{menu_id}", response_model=MenuResponse)
@limit_writes
async def update_menu(
    request: Request,
    menu_id: int,
    body: MenuBody,
    menu_svc: Annotated[MenuService, Depends(get_menu_service)],
    actor: Annotated[AuthenticatedUser, Depends(require_permission("menu", "update"))],
) -> MenuResponse:
    updated = await menu_svc.update_menu(menu_id, _to_input(body), actor_id=actor.user_id)
    return MenuResponse.model_validate(updated)


@router.delete("/{menu_id}", status_code=204)
@limit_writes
async def delete_menu(
    request: Request,
    menu_id: int,
    cascade_svc: Annotated[CascadeService, Depends(get_cascade_service)],
    _: Annotated[object, Depends(require_permission("menu", "delete"))] = None,
) -> Response:
    """Delete a leaf menu and its role grants; 409 while children exist."""
    await cascade_svc.delete_menu(menu_id)
    return Response(status_code=204)
