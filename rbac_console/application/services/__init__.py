"""Application services: reconciler, cascade, catalog, sweep, identity and auth."""

from rbac_console.application.services.auth_service import AuthService
from rbac_console.application.services.authorization_service import AuthorizationService
from rbac_console.application.services.cascade_service import CascadeService
from rbac_console.application.services.diff import compute_diff
from rbac_console.application.services.domain_service import DomainService
from rbac_console.application.services.endpoint_catalog_service import (
    EndpointCatalogService,
)
from rbac_console.application.services.menu_service import MenuService
from rbac_console.application.services.policy_sweep_service import PolicySweepService
from rbac_console.application.services.role_service import RoleService
from rbac_console.application.services.scope_locks import ScopeLocks
from rbac_console.application.services.user_service import UserService

__all__ = [
    "AuthService",
    "AuthorizationService",
    "CascadeService",
    "DomainService",
    "EndpointCatalogService",
    "MenuService",
    "PolicySweepService",
    "RoleService",
    "ScopeLocks",
    "UserService",
    "compute_diff",
]
