"""Auth API: login populates the Session Authority Cache, logout drops it."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from rbac_console.api.v1.dependencies import get_auth_service, get_current_user
from rbac_console.application.dtos.user import AuthenticatedUser
from rbac_console.application.services import AuthService
from rbac_console.core.limiter import limit_auth
from rbac_console.schemas.auth import LoginRequest, TokenResponse

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    auth_svc: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """Authenticate with username, email or phone number; return a bearer token."""
    result = await auth_svc.login(body.identifier, body.password)
    return TokenResponse(
        access_token=result.access_token,
        token_type=result.token_type,
        expires_in=result.expires_in,
        user_id=result.user_id,
        roles=sorted(result.roles),
    )


@router.post("/logout", status_code=204)
async def logout(
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    auth_svc: Annotated[AuthService, Depends(get_auth_service)],
) -> Response:
    await auth_svc.logout(current_user.user_id)
    return Response(status_code=204)
