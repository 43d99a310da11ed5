"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from rbac_console.domain.enums import MenuType, Status
from rbac_console.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ConflictException,
    ConsoleException,
    HasChildrenException,
    PolicyDivergenceError,
    ResourceNotFoundException,
    SelfParentingException,
    TransientStoreException,
    ValidationException,
)

__all__ = [
    "AuthenticationException",
    "AuthorizationException",
    "ConflictException",
    "ConsoleException",
    "HasChildrenException",
    "MenuType",
    "PolicyDivergenceError",
    "ResourceNotFoundException",
    "SelfParentingException",
    "Status",
    "TransientStoreException",
    "ValidationException",
]
