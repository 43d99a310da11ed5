"""Role application service: create and update roles in the role tree."""

from __future__ import annotations

import logging
from typing import Any

from rbac_console.application.dtos.role import RoleResult
from rbac_console.application.interfaces import IPolicyStore, ISessionAuthorityCache
from rbac_console.application.services.cache_sync import resync_cached_authority
from rbac_console.application.services.policy_sync import rename_role_rules, run_policy_step
from rbac_console.core.config import get_settings
from rbac_console.domain.enums import Status
from rbac_console.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    SelfParentingException,
)
from rbac_console.shared.utils.generators import generate_id

logger = logging.getLogger(__name__)


class RoleService:
    """Role codes are unique; pid names an existing role or the root sentinel.

    Renaming a role moves its policy rules to the new code and resyncs the
    cached authority of its members, when a policy store and cache are given.
    """

    def __init__(
        self,
        uow: Any,
        root_pid: str | None = None,
        *,
        policy_store: IPolicyStore | None = None,
        cache: ISessionAuthorityCache | None = None,
    ) -> None:
        self.uow = uow
        self.policy_store = policy_store
        self.cache = cache
        self.root_pid = root_pid if root_pid is not None else get_settings().root_role_pid

    async def _require_parent(self, repos: Any, pid: str) -> None:
        if pid != self.root_pid and not await repos.roles.exists(pid):
            raise ResourceNotFoundException("role", pid)

    async def create_role(
        self,
        code: str,
        name: str,
        pid: str | None = None,
        description: str | None = None,
        status: str = Status.ENABLED.value,
        *,
        role_id: str | None = None,
        actor_id: str | None = None,
    ) -> RoleResult:
        """Create a role, optionally with a caller-chosen id.

        Raises:
            SelfParentingException: pid equals the new role's id.
            ConflictException: code already used.
            ResourceNotFoundException: parent role does not exist.
        """
        new_id = role_id or generate_id()
        parent = pid if pid is not None else self.root_pid
        async with self.uow.transaction() as repos:
            if parent == new_id:
                raise SelfParentingException("role", new_id)
            if await repos.roles.code_exists(code):
                raise ConflictException(f"Role with code '{code}' already exists", {"code": code})
            await self._require_parent(repos, parent)
            result = await repos.roles.create_role(
                code,
                name,
                parent,
                description,
                Status(status).value,
                role_id=new_id,
                created_by=actor_id,
            )
        logger.info("Role created: %s (%s)", code, result.id)
        return result

    async def update_role(
        self,
        role_id: str,
        code: str,
        name: str,
        pid: str,
        description: str | None = None,
        status: str | None = None,
        *,
        actor_id: str | None = None,
    ) -> RoleResult:
        """Update a role. Self-parenting is rejected even when the old pid was valid.

        Raises:
            SelfParentingException: pid equals role_id.
            ResourceNotFoundException: role or parent role does not exist.
            ConflictException: code taken by another role.
        """
        if pid == role_id:
            raise SelfParentingException("role", role_id)
        async with self.uow.transaction() as repos:
            role = await repos.roles.get_for_update(role_id)
            if role is None:
                raise ResourceNotFoundException("role", role_id)
            await self._require_parent(repos, pid)
            if await repos.roles.code_exists(code, exclude_id=role_id):
                raise ConflictException(f"Role with code '{code}' already exists", {"code": code})
            old_code = role.code
            role.code = code
            role.name = name
            role.pid = pid
            role.description = description
            if status is not None:
                role.status = Status(status).value
            role.updated_by = actor_id
            result = await repos.roles.save(role)
            renamed = old_code != code
            members = (
                await repos.user_roles.role_codes_by_user(
                    await repos.user_roles.user_ids_for_role(role_id)
                )
                if renamed
                else {}
            )

        if renamed:
            await self._follow_rename(old_code, code, members)
        return result

    async def _follow_rename(
        self, old_code: str, new_code: str, members: dict[str, set[str]]
    ) -> None:
        if self.policy_store is not None:
            store = self.policy_store
            await run_policy_step(
                {"role": old_code},
                "rename_role",
                lambda: rename_role_rules(store, old_code, new_code),
            )
        await resync_cached_authority(self.cache, members)
        logger.info("Role %s renamed to %s (%d members)", old_code, new_code, len(members))
