"""DTOs for application use cases (no dependency on ORM)."""

from rbac_console.application.dtos.auth import LoginResult
from rbac_console.application.dtos.authorization import (
    CatalogRebuildResult,
    PolicyTuple,
    RelationDiff,
    SweepReport,
    SyncResult,
)
from rbac_console.application.dtos.domain import DomainResult
from rbac_console.application.dtos.endpoint import EndpointDescriptor
from rbac_console.application.dtos.menu import MenuInput, MenuResult
from rbac_console.application.dtos.role import RoleResult
from rbac_console.application.dtos.user import AuthenticatedUser, UserResult

__all__ = [
    "AuthenticatedUser",
    "CatalogRebuildResult",
    "DomainResult",
    "EndpointDescriptor",
    "LoginResult",
    "MenuInput",
    "MenuResult",
    "PolicyTuple",
    "RelationDiff",
    "RoleResult",
    "SweepReport",
    "SyncResult",
    "UserResult",
]
