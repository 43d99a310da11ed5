"""Auth service: login refreshes the Session Authority Cache, logout invalidates it."""

from __future__ import annotations

import logging
from typing import Any

from rbac_console.application.dtos.auth import LoginResult
from rbac_console.application.interfaces import IPasswordHasher, ISessionAuthorityCache
from rbac_console.domain.enums import Status
from rbac_console.domain.exceptions import AuthenticationException
from rbac_console.shared.telemetry import traced

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        uow: Any,
        password_hasher: IPasswordHasher,
        token_service: Any,
        cache: ISessionAuthorityCache,
    ) -> None:
        self.uow = uow
        self.password_hasher = password_hasher
        self.token_service = token_service
        self.cache = cache

    @traced("auth.login")
    async def login(self, identifier: str, password: str) -> LoginResult:
        """Authenticate by username, email or phone number and cache the user's roles.

        The cached set is replaced wholesale with the roles read now, so a
        role revoked since the previous login is never carried over.

        Raises:
            AuthenticationException: Unknown user, disabled user, or wrong password.
        """
        async with self.uow.reader() as repos:
            user = await repos.users.find_by_identifier(identifier)
            if user is None:
                raise AuthenticationException("Invalid credentials")
            if user.status != Status.ENABLED.value:
                raise AuthenticationException("User is disabled")
            if not self.password_hasher.verify(password, user.password):
                raise AuthenticationException("Invalid credentials")
            user_id, username, domain = user.id, user.username, user.domain
            roles = await repos.user_roles.role_codes_for_user(user_id)

        token = self.token_service.issue_for(user_id, username, domain)
        ttl = self.token_service.ttl_seconds
        await self.cache.refresh(user_id, roles, ttl)
        logger.info("User %s logged in with %d roles", username, len(roles))
        return LoginResult(
            access_token=token,
            token_type="bearer",
            expires_in=ttl,
            user_id=user_id,
            roles=frozenset(roles),
        )

    async def logout(self, user_id: str) -> None:
        await self.cache.invalidate(user_id)
        logger.info("User %s logged out", user_id)
