"""Persistence models: ORM entities and mixins."""

from rbac_console.infrastructure.persistence.models.domain import Domain
from rbac_console.infrastructure.persistence.models.endpoint import Endpoint
from rbac_console.infrastructure.persistence.models.menu import Menu
from rbac_console.infrastructure.persistence.models.policy_rule import PolicyRule
from rbac_console.infrastructure.persistence.models.mixins import (
    ActorAuditMixin,
    IdMixin,
    IdentityModel,
    TimestampMixin,
)
from rbac_console.infrastructure.persistence.models.relations import (
    RoleMenu,
    RolePermission,
    UserRole,
)
from rbac_console.infrastructure.persistence.models.role import Role
from rbac_console.infrastructure.persistence.models.user import User

__all__ = [
    "ActorAuditMixin",
    "IdMixin",
    "Domain",
    "Endpoint",
    "IdentityModel",
    "Menu",
    "PolicyRule",
    "Role",
    "RoleMenu",
    "RolePermission",
    "TimestampMixin",
    "User",
    "UserRole",
]
