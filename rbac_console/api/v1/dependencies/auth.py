"""Bearer authentication and the permission guard used by every mutating route."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rbac_console.api.v1.dependencies.services import (
    get_authorization_service,
    get_token_service,
)
from rbac_console.application.dtos.user import AuthenticatedUser
from rbac_console.application.services import AuthorizationService
from rbac_console.domain.exceptions import AuthenticationException
from rbac_console.infrastructure.security import JwtTokenService
from rbac_console.shared.context import set_current_user_id

_http_bearer = HTTPBearer(auto_error=False)

# Attribute set on guard dependencies; the route scanner reads it to build the catalog.
PERMISSION_ATTR = "required_permission"


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    tokens: Annotated[JwtTokenService, Depends(get_token_service)],
) -> AuthenticatedUser:
    """Return the caller resolved from the bearer token; 401 when missing or invalid."""
    if credentials is None:
        raise AuthenticationException("Not authenticated")
    user = tokens.resolve(credentials.credentials)
    set_current_user_id(user.user_id)
    return user


def require_permission(resource: str, action: str):
    """Dependency factory: require a caller whose cached roles grant resource/action in their domain."""

    async def _require(
        current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> AuthenticatedUser:
        await auth_svc.require_permission(
            current_user.user_id, current_user.domain, resource, action
        )
        return current_user

    setattr(_require, PERMISSION_ATTR, (resource, action))
    return _require
