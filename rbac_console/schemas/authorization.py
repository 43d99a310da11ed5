"""Authorization API schemas: assign permissions, routes and users; sweep report."""

from pydantic import BaseModel, Field


class AssignPermissionRequest(BaseModel):
    """Desired endpoint ids of a role within a domain; at least one is required."""

    domain: str = Field(..., min_length=1, max_length=64)
    role_id: str = Field(..., min_length=1)
    permissions: list[str] = Field(..., max_length=1000)


class AssignRoutesRequest(BaseModel):
    """Desired menu ids of a role within a domain; at least one is required."""

    domain: str = Field(..., min_length=1, max_length=64)
    role_id: str = Field(..., min_length=1)
    route_ids: list[int] = Field(..., max_length=1000)


class AssignUsersRequest(BaseModel):
    """Desired members of a role; at least one user is required."""

    role_id: str = Field(..., min_length=1)
    user_ids: list[str] = Field(..., max_length=1000)


class GrantResponse(BaseModel):
    resource: str
    action: str


class PermissionSyncResponse(BaseModel):
    """Policy tuples added to and removed from the role in the domain."""

    added: list[GrantResponse]
    removed: list[GrantResponse]


class RouteSyncResponse(BaseModel):
    added: list[int]
    removed: list[int]


class UserSyncResponse(BaseModel):
    added: list[str]
    removed: list[str]


class PolicyResponse(BaseModel):
    role: str
    resource: str
    action: str
    domain: str
    effect: str


class SweepResponse(BaseModel):
    orphan_role_menus: int
    orphan_role_permissions: int
    orphan_user_roles: int
    policies_added: int
    policies_removed: int
    orphan_policies_removed: int
    scopes_checked: int
    errors: list[str]
