"""Domains API: create, update, delete (cascading)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from rbac_console.api.v1.dependencies import (
    get_cascade_service,
    get_domain_service,
    require_permission,
)
from rbac_console.application.dtos.user import AuthenticatedUser
from rbac_console.application.services import CascadeService, DomainService
from rbac_console.core.limiter import limit_writes
from rbac_console.schemas.domain import DomainCreate, DomainResponse, DomainUpdate

router = APIRouter()


@router.post("", response_model=DomainResponse, status_code=201)
@limit_writes
async def create_domain(
    request: Request,
    body: DomainCreate,
    domain_svc: Annotated[DomainService, Depends(get_domain_service)],
    actor: Annotated[AuthenticatedUser, Depends(require_permission("domain", "create"))],
) -> DomainResponse:
    created = await domain_svc.create_domain(
        body.code, body.name, body.description, actor_id=actor.user_id
    )
    return DomainResponse.model_validate(created)


@router.put("/{domain_id}", response_model=DomainResponse)
@limit_writes
async def update_domain(
    request: Request,
    domain_id: str,
    body: DomainUpdate,
    domain_svc: Annotated[DomainService, Depends(get_domain_service)],
    actor: Annotated[AuthenticatedUser, Depends(require_permission("domain", "update"))],
) -> DomainResponse:
    """Update a domain. The code cannot change while grants reference it (409)."""
    updated = await domain_svc.update_domain(
        domain_id,
        body.code,
        body.name,
        body.description,
        body.status.value if body.status else None,
        actor_id=actor.user_id,
    )
    return DomainResponse.model_validate(updated)


@router.delete("/{domain_id}", status_code=204)
@limit_writes
async def delete_domain(
    request: Request,
    domain_id: str,
    cascade_svc: Annotated[CascadeService, Depends(get_cascade_service)],
    _: Annotated[object, Depends(require_permission("domain", "delete"))] = None,
) -> Response:
    """Delete a domain with its policy tuples, role grants and users."""
    await cascade_svc.delete_domain(domain_id)
    return Response(status_code=204)
