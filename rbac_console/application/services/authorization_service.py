"""Authorization service: the reconciler for role-permission, role-menu and user-role grants.

Each sync call takes the desired set for one scope, diffs it against the
current set and applies only the difference. Relational rows change inside
one transaction that also holds a row lock on the role; policy tuples change
after the commit (see policy_sync).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from rbac_console.application.dtos.authorization import PolicyTuple, SyncResult
from rbac_console.application.interfaces import IPolicyStore, ISessionAuthorityCache
from rbac_console.application.services.cache_sync import resync_cached_authority
from rbac_console.application.services.diff import compute_diff
from rbac_console.application.services.policy_sync import (
    Grant,
    apply_grant_diff,
    current_grants,
    run_policy_step,
)
from rbac_console.application.services.scope_locks import ScopeLocks
from rbac_console.core.constants import POLICY_FIELD_ROLE
from rbac_console.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    TransientStoreException,
)
from rbac_console.shared.telemetry import add_span_attributes, traced

logger = logging.getLogger(__name__)


class AuthorizationService:
    """Reconciles the three grant relations and checks permissions against the policy store."""

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

    async def _lock_role(self, repos: Any, role_id: str) -> Any:
        role = await repos.roles.get_for_update(role_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        return role

    @staticmethod
    async def _require_domain(repos: Any, domain: str) -> None:
        if await repos.domains.get_by_code(domain) is None:
            raise ResourceNotFoundException("domain", domain)

    @traced("authorization.sync_permissions")
    async def sync_permissions(
        self, domain: str, role_id: str, permission_ids: Iterable[str]
    ) -> SyncResult[Grant]:
        """Make the role's grants in domain exactly the given endpoints.

        Returns the (resource, action) pairs added to and removed from the
        policy store.

        Raises:
            ResourceNotFoundException: Unknown domain, role or endpoint id, or no
                endpoint given.
        """
        desired_ids = set(permission_ids)
        async with self.scope_locks.hold(("permissions", role_id, domain)):
            async with self.uow.transaction() as repos:
                role = await self._lock_role(repos, role_id)
                await self._require_domain(repos, domain)
                if not desired_ids:
                    raise ResourceNotFoundException("endpoint", "")
                await repos.endpoints.require_all(desired_ids, "endpoint")
                current_ids = await repos.role_permissions.endpoint_ids_for(role_id, domain)
                row_diff = compute_diff(current_ids, desired_ids)
                await repos.role_permissions.remove_many(role_id, domain, row_diff.to_remove)
                await repos.role_permissions.add_many(role_id, domain, row_diff.to_add)
                desired_grants = await repos.endpoints.grants_for_ids(desired_ids)
                role_code = role.code

            grant_diff = compute_diff(
                current_grants(self.policy_store, role_code, domain), desired_grants
            )
            if not grant_diff.is_empty:
                await run_policy_step(
                    {"role": role_code, "domain": domain},
                    "sync_permissions",
                    lambda: apply_grant_diff(self.policy_store, role_code, domain, grant_diff),
                )
        add_span_attributes(added=len(grant_diff.to_add), removed=len(grant_diff.to_remove))
        logger.info(
            "Permissions synced for role %s in %s: +%d -%d tuples (%d rows changed)",
            role_code,
            domain,
            len(grant_diff.to_add),
            len(grant_diff.to_remove),
            row_diff.size,
        )
        return SyncResult.from_diff(grant_diff)

    @traced("authorization.sync_routes")
    async def sync_routes(
        self, domain: str, role_id: str, menu_ids: Iterable[int]
    ) -> SyncResult[int]:
        """Make the role's menus in domain exactly menu_ids, in one transaction.

        Raises:
            ResourceNotFoundException: Unknown domain, role or menu id, or no menu given.
        """
        desired = set(menu_ids)
        async with self.scope_locks.hold(("routes", role_id, domain)):
            async with self.uow.transaction() as repos:
                await self._lock_role(repos, role_id)
                await self._require_domain(repos, domain)
                if not desired:
                    raise ResourceNotFoundException("menu", "")
                await repos.menus.require_all(desired, "menu")
                current = await repos.role_menus.menu_ids_for(role_id, domain)
                diff = compute_diff(current, desired)
                await repos.role_menus.remove_many(role_id, domain, diff.to_remove)
                await repos.role_menus.add_many(role_id, domain, diff.to_add)
        logger.info(
            "Routes synced for role %s in %s: +%d -%d",
            role_id,
            domain,
            len(diff.to_add),
            len(diff.to_remove),
        )
        return SyncResult.from_diff(diff)

    @traced("authorization.sync_users")
    async def sync_users(self, role_id: str, user_ids: Iterable[str]) -> SyncResult[str]:
        """Make the role's members exactly user_ids, in one transaction.

        Live sessions of added and removed users get their cached role set
        replaced after the commit.

        Raises:
            ResourceNotFoundException: Unknown role, unknown user id, or no user given.
        """
        desired = set(user_ids)
        async with self.scope_locks.hold(("users", role_id)):
            async with self.uow.transaction() as repos:
                await self._lock_role(repos, role_id)
                if not desired:
                    raise ResourceNotFoundException("user", "")
                await repos.users.require_all(desired, "user")
                current = await repos.user_roles.user_ids_for_role(role_id)
                diff = compute_diff(current, desired)
                await repos.user_roles.remove_many(role_id, diff.to_remove)
                await repos.user_roles.add_many(role_id, diff.to_add)
                affected = await repos.user_roles.role_codes_by_user(
                    diff.to_add | diff.to_remove
                )
            resynced = await resync_cached_authority(self.cache, affected)
        logger.info(
            "Users synced for role %s: +%d -%d (%d live sessions updated)",
            role_id,
            len(diff.to_add),
            len(diff.to_remove),
            resynced,
        )
        return SyncResult.from_diff(diff)

    async def get_role_menu_ids(self, role_id: str, domain: str) -> set[int]:
        async with self.uow.reader() as repos:
            if not await repos.roles.exists(role_id):
                raise ResourceNotFoundException("role", role_id)
            return await repos.role_menus.menu_ids_for(role_id, domain)

    async def get_role_permissions(self, role_id: str, domain: str) -> list[PolicyTuple]:
        """Return the policy tuples held for the role in domain."""
        async with self.uow.reader() as repos:
            role = await repos.roles.get_by_id(role_id)
            if role is None:
                raise ResourceNotFoundException("role", role_id)
            role_code = role.code
        rules = self.policy_store.get_filtered_policy(POLICY_FIELD_ROLE, role_code, "", "", domain)
        return sorted(
            (PolicyTuple.from_rule(rule) for rule in rules),
            key=lambda p: (p.resource, p.action),
        )

    async def get_role_user_ids(self, role_id: str) -> set[str]:
        async with self.uow.reader() as repos:
            if not await repos.roles.exists(role_id):
                raise ResourceNotFoundException("role", role_id)
            return await repos.user_roles.user_ids_for_role(role_id)

    async def check_permission(
        self, user_id: str, domain: str, resource: str, action: str
    ) -> bool:
        """Return True if any role cached for the user's session allows the action."""
        if self.cache is None:
            raise TransientStoreException("session_cache", "not configured")
        roles = await self.cache.read(user_id)
        return any(
            self.policy_store.enforce(role, resource, action, domain) for role in sorted(roles)
        )

    async def require_permission(
        self, user_id: str, domain: str, resource: str, action: str
    ) -> None:
        """Raise AuthorizationException if the user lacks the grant."""
        if not await self.check_permission(user_id, domain, resource, action):
            raise AuthorizationException(resource=resource, action=action)
