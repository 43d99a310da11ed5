"""Cascade service: deletes a domain, role, user or menu together with everything that depends on it.

Relational steps run in one transaction in a fixed order (identity row
first). Policy tuples are removed after the commit; a failure there is
logged as divergence and repaired by the sweep. Every dependent cleanup is
idempotent, so re-running a delete only fails at the identity step.
"""

from __future__ import annotations

import logging
from typing import Any

from rbac_console.application.interfaces import IPolicyStore, ISessionAuthorityCache
from rbac_console.application.services.cache_sync import (
    invalidate_cached_authority,
    resync_cached_authority,
)
from rbac_console.application.services.policy_sync import run_policy_step
from rbac_console.application.services.scope_locks import ScopeLocks
from rbac_console.core.constants import POLICY_FIELD_DOMAIN, POLICY_FIELD_ROLE
from rbac_console.domain.exceptions import HasChildrenException, ResourceNotFoundException
from rbac_console.shared.telemetry import traced

logger = logging.getLogger(__name__)


class CascadeService:
    def __init__(
        self,
        uow: Any,
        policy_store: IPolicyStore,
        cache: ISessionAuthorityCache | None = None,
        scope_locks: ScopeLocks | None = None,
    ) -> None:
        self.uow = uow
        self.policy_store = policy_store
        self.cache = cache
        self.scope_locks = scope_locks or ScopeLocks()

    @traced("cascade.delete_domain")
    async def delete_domain(self, domain_id: str) -> None:
        """Delete the domain, its policy tuples and role grants, and every user homed in it.

        Raises:
            ResourceNotFoundException: No domain with domain_id.
        """
        async with self.uow.transaction() as repos:
            domain = await repos.domains.get_by_id(domain_id)
            if domain is None:
                raise ResourceNotFoundException("domain", domain_id)
            code = domain.code
            await repos.domains.delete(domain)
            role_menus = await repos.role_menus.delete_by_domain(code)
            role_permissions = await repos.role_permissions.delete_by_domain(code)
            user_ids = await repos.users.ids_in_domain(code)
            user_roles = await repos.user_roles.delete_by_users(user_ids)
            await repos.users.delete_in_domain(code)

        await run_policy_step(
            {"domain": code},
            "delete_domain",
            lambda: self.policy_store.remove_filtered_policy(POLICY_FIELD_DOMAIN, code),
        )
        await invalidate_cached_authority(self.cache, user_ids)
        logger.info(
            "Domain %s deleted: %d role-menu rows, %d role-permission rows, "
            "%d users, %d user-role rows",
            code,
            role_menus,
            role_permissions,
            len(user_ids),
            user_roles,
        )

    @traced("cascade.delete_role")
    async def delete_role(self, role_id: str) -> None:
        """Delete the role, its policy tuples, menu and permission grants, and memberships.

        Former members with a live session get their cached role set replaced.

        Raises:
            ResourceNotFoundException: No role with role_id.
        """
        async with self.scope_locks.hold(("users", role_id)):
            async with self.uow.transaction() as repos:
                role = await repos.roles.get_for_update(role_id)
                if role is None:
                    raise ResourceNotFoundException("role", role_id)
                code = role.code
                member_ids = await repos.user_roles.user_ids_for_role(role_id)
                await repos.roles.delete(role)
                role_menus = await repos.role_menus.delete_by_role(role_id)
                role_permissions = await repos.role_permissions.delete_by_role(role_id)
                await repos.user_roles.delete_by_role(role_id)
                remaining = await repos.user_roles.role_codes_by_user(member_ids)

            await run_policy_step(
                {"role": code},
                "delete_role",
                lambda: self.policy_store.remove_filtered_policy(POLICY_FIELD_ROLE, code),
            )
            await resync_cached_authority(self.cache, remaining)
        logger.info(
            "Role %s deleted: %d role-menu rows, %d role-permission rows, %d members",
            code,
            role_menus,
            role_permissions,
            len(member_ids),
        )

    @traced("cascade.delete_user")
    async def delete_user(self, user_id: str) -> None:
        """Delete the user and its memberships, and drop its cached authority.

        Raises:
            ResourceNotFoundException: No user with user_id.
        """
        async with self.uow.transaction() as repos:
            user = await repos.users.get_by_id(user_id)
            if user is None:
                raise ResourceNotFoundException("user", user_id)
            await repos.users.delete(user)
            user_roles = await repos.user_roles.delete_by_users({user_id})
        await invalidate_cached_authority(self.cache, {user_id})
        logger.info("User %s deleted: %d user-role rows", user_id, user_roles)

    @traced("cascade.delete_menu")
    async def delete_menu(self, menu_id: int) -> None:
        """Delete a leaf menu and its role-menu rows.

        Raises:
            ResourceNotFoundException: No menu with menu_id.
            HasChildrenException: Some menu still names it as parent.
        """
        async with self.uow.transaction() as repos:
            menu = await repos.menus.get_by_id(menu_id)
            if menu is None:
                raise ResourceNotFoundException("menu", str(menu_id))
            if await repos.menus.has_children(menu_id):
                raise HasChildrenException("menu", str(menu_id))
            await repos.menus.delete(menu)
            role_menus = await repos.role_menus.delete_by_menu(menu_id)
        logger.info("Menu %s deleted: %d role-menu rows", menu_id, role_menus)
