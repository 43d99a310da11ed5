"""Authorization API: assign permissions, routes and users to a role; run the sweep."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from rbac_console.api.v1.dependencies import (
    get_authorization_service,
    get_sweep_service,
    require_permission,
)
from rbac_console.application.services import AuthorizationService, PolicySweepService
from rbac_console.core.limiter import limit_writes
from rbac_console.schemas.authorization import (
    AssignPermissionRequest,
    AssignRoutesRequest,
    AssignUsersRequest,
    GrantResponse,
    PermissionSyncResponse,
    PolicyResponse,
    RouteSyncResponse,
    SweepResponse,
    UserSyncResponse,
)

router = APIRouter()

AuthzDep = Annotated[AuthorizationService, Depends(get_authorization_service)]


def _grants(pairs: frozenset[tuple[str, str]]) -> list[GrantResponse]:
    return [GrantResponse(resource=r, action=a) for r, a in sorted(pairs)]


@router.post("/assign-permission", response_model=PermissionSyncResponse)
@limit_writes
async def assign_permission(
    request: Request,
    body: AssignPermissionRequest,
    auth_svc: AuthzDep,
    _: Annotated[object, Depends(require_permission("authorization", "assign_permission"))] = None,
) -> PermissionSyncResponse:
    """Make the role's permissions in the domain exactly the given endpoint ids."""
    result = await auth_svc.sync_permissions(body.domain, body.role_id, body.permissions)
    return PermissionSyncResponse(added=_grants(result.added), removed=_grants(result.removed))


@router.post("/assign-routes", response_model=RouteSyncResponse)
@limit_writes
async def assign_routes(
    request: Request,
    body: AssignRoutesRequest,
    auth_svc: AuthzDep,
    _: Annotated[object, Depends(require_permission("authorization", "assign_routes"))] = None,
) -> RouteSyncResponse:
    """Make the role's menus in the domain exactly the given menu ids."""
    result = await auth_svc.sync_routes(body.domain, body.role_id, body.route_ids)
    return RouteSyncResponse(added=sorted(result.added), removed=sorted(result.removed))


@router.post("/assign-users", response_model=UserSyncResponse)
@limit_writes
async def assign_users(
    request: Request,
    body: AssignUsersRequest,
    auth_svc: AuthzDep,
    _: Annotated[object, Depends(require_permission("authorization", "assign_users"))] = None,
) -> UserSyncResponse:
    """Make the role's members exactly the given user ids."""
    result = await auth_svc.sync_users(body.role_id, body.user_ids)
    return UserSyncResponse(added=sorted(result.added), removed=sorted(result.removed))


@router.post("/reconcile", response_model=SweepResponse)
@limit_writes
async def reconcile(
    request: Request,
    sweep_svc: Annotated[PolicySweepService, Depends(get_sweep_service)],
    _: Annotated[object, Depends(require_permission("authorization", "reconcile"))] = None,
) -> SweepResponse:
    """Run the reconciliation sweep and return what it repaired."""
    report = await sweep_svc.sweep()
    return SweepResponse(
        orphan_role_menus=report.orphan_role_menus,
        orphan_role_permissions=report.orphan_role_permissions,
        orphan_user_roles=report.orphan_user_roles,
        policies_added=report.policies_added,
        policies_removed=report.policies_removed,
        orphan_policies_removed=report.orphan_policies_removed,
        scopes_checked=report.scopes_checked,
        errors=report.errors,
    )


@router.get("/roles/{role_id}/routes", response_model=list[int])
async def get_role_routes(
    role_id: str,
    domain: Annotated[str, Query(min_length=1)],
    auth_svc: AuthzDep,
    _: Annotated[object, Depends(require_permission("authorization", "read"))] = None,
) -> list[int]:
    return sorted(await auth_svc.get_role_menu_ids(role_id, domain))


@router.get("/roles/{role_id}/permissions", response_model=list[PolicyResponse])
async def get_role_permissions(
    role_id: str,
    domain: Annotated[str, Query(min_length=1)],
    auth_svc: AuthzDep,
    _: Annotated[object, Depends(require_permission("authorization", "read"))] = None,
) -> list[PolicyResponse]:
    """Policy tuples held for the role in the domain."""
    policies = await auth_svc.get_role_permissions(role_id, domain)
    return [
        PolicyResponse(
            role=p.role, resource=p.resource, action=p.action, domain=p.domain, effect=p.effect
        )
        for p in policies
    ]


@router.get("/roles/{role_id}/users", response_model=list[str])
async def get_role_users(
    role_id: str,
    auth_svc: AuthzDep,
    _: Annotated[object, Depends(require_permission("authorization", "read"))] = None,
) -> list[str]:
    return sorted(await auth_svc.get_role_user_ids(role_id))
