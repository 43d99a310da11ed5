"""Repositories: async data access for identity tables and the three join relations."""

from rbac_console.infrastructure.persistence.repositories.base import BaseRepository
from rbac_console.infrastructure.persistence.repositories.domain_repo import (
    DomainRepository,
    domain_to_result,
)
from rbac_console.infrastructure.persistence.repositories.endpoint_repo import (
    EndpointRepository,
)
from rbac_console.infrastructure.persistence.repositories.menu_repo import (
    MenuRepository,
    menu_to_result,
)
from rbac_console.infrastructure.persistence.repositories.role_menu_repo import (
    RoleMenuRepository,
)
from rbac_console.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)
from rbac_console.infrastructure.persistence.repositories.role_repo import (
    RoleRepository,
    role_to_result,
)
from rbac_console.infrastructure.persistence.repositories.user_repo import (
    UserRepository,
    user_to_result,
)
from rbac_console.infrastructure.persistence.repositories.user_role_repo import (
    UserRoleRepository,
)

__all__ = [
    "BaseRepository",
    "DomainRepository",
    "EndpointRepository",
    "MenuRepository",
    "RoleMenuRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "UserRepository",
    "UserRoleRepository",
    "domain_to_result",
    "menu_to_result",
    "role_to_result",
    "user_to_result",
]
