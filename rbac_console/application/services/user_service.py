"""User application service: create users with the default role, update profiles."""

from __future__ import annotations

import logging
from typing import Any

from rbac_console.application.dtos.user import UserResult
from rbac_console.application.interfaces import IPasswordHasher
from rbac_console.core.config import get_settings
from rbac_console.domain.enums import Status
from rbac_console.domain.exceptions import ConflictException, ResourceNotFoundException
from rbac_console.shared.utils.generators import generate_id

logger = logging.getLogger(__name__)


class UserService:
    def __init__(
        self,
        uow: Any,
        password_hasher: IPasswordHasher,
        default_role_code: str | None = None,
    ) -> None:
        self.uow = uow
        self.password_hasher = password_hasher
        self.default_role_code = default_role_code or get_settings().default_role_code

    async def create_user(
        self,
        username: str,
        password: str,
        domain: str,
        nick_name: str,
        *,
        avatar: str | None = None,
        email: str | None = None,
        phone_number: str | None = None,
        status: str = Status.ENABLED.value,
        actor_id: str | None = None,
    ) -> UserResult:
        """Create a user and grant the default role in the same transaction.

        Raises:
            ResourceNotFoundException: home domain, or enabled default role, missing.
            ConflictException: username taken.
        """
        async with self.uow.transaction() as repos:
            if await repos.domains.get_by_code(domain) is None:
                raise ResourceNotFoundException("domain", domain)
            if await repos.users.username_exists(username):
                raise ConflictException(
                    f"User with username '{username}' already exists", {"username": username}
                )
            default_role = await repos.roles.get_by_code(self.default_role_code)
            if default_role is None or default_role.status != Status.ENABLED.value:
                raise ResourceNotFoundException("role", self.default_role_code)
            result = await repos.users.create_user(
                id=generate_id(),
                username=username,
                password=self.password_hasher.hash(password),
                domain=domain,
                nick_name=nick_name,
                avatar=avatar,
                email=email,
                phone_number=phone_number,
                status=Status(status).value,
                created_by=actor_id,
            )
            await repos.user_roles.add(result.id, default_role.id)
        logger.info("User created: %s in %s", username, domain)
        return result

    async def update_user(
        self,
        user_id: str,
        username: str,
        nick_name: str,
        *,
        avatar: str | None = None,
        email: str | None = None,
        phone_number: str | None = None,
        status: str | None = None,
        actor_id: str | None = None,
    ) -> UserResult:
        """Update profile fields. Home domain and password are not changed here.

        Raises:
            ResourceNotFoundException: No user with user_id.
            ConflictException: username taken by another user.
        """
        async with self.uow.transaction() as repos:
            user = await repos.users.get_by_id(user_id)
            if user is None:
                raise ResourceNotFoundException("user", user_id)
            if await repos.users.username_exists(username, exclude_id=user_id):
                raise ConflictException(
                    f"User with username '{username}' already exists", {"username": username}
                )
            user.username = username
            user.nick_name = nick_name
            user.avatar = avatar
            user.email = email
            user.phone_number = phone_number
            if status is not None:
                user.status = Status(status).value
            user.updated_by = actor_id
            return await repos.users.save(user)
