"""Presentation-layer dependency injection (composition root).

Routes depend only on these dependencies, never on infrastructure directly.
"""

from rbac_console.api.v1.dependencies.auth import (
    PERMISSION_ATTR,
    get_current_user,
    require_permission,
)
from rbac_console.api.v1.dependencies.common import (
    get_policy_store,
    get_scope_locks,
    get_session_cache,
    get_uow,
)
from rbac_console.api.v1.dependencies.services import (
    get_auth_service,
    get_authorization_service,
    get_cascade_service,
    get_domain_service,
    get_menu_service,
    get_password_hasher,
    get_role_service,
    get_sweep_service,
    get_token_service,
    get_user_service,
)

__all__ = [
    "PERMISSION_ATTR",
    "get_auth_service",
    "get_authorization_service",
    "get_cascade_service",
    "get_current_user",
    "get_domain_service",
    "get_menu_service",
    "get_password_hasher",
    "get_policy_store",
    "get_role_service",
    "get_scope_locks",
    "get_session_cache",
    "get_sweep_service",
    "get_token_service",
    "get_uow",
    "require_permission",
]
