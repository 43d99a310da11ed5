"""Reconciliation sweep: move the policy store and join tables back to relational truth.

Repairs what a crash or a policy-store outage left behind after a committed
transaction. Idempotent; safe under live traffic since every step only moves
state toward what the relational store says.
"""

from __future__ import annotations

import logging
from typing import Any

from rbac_console.application.dtos.authorization import PolicyTuple, SweepReport
from rbac_console.application.interfaces import IPolicyStore
from rbac_console.application.services.diff import compute_diff
from rbac_console.application.services.policy_sync import (
    Grant,
    apply_grant_diff,
    current_grants,
)
from rbac_console.application.services.scope_locks import ScopeLocks
from rbac_console.core.constants import POLICY_FIELD_ROLE
from rbac_console.domain.exceptions import TransientStoreException
from rbac_console.shared.telemetry import traced

logger = logging.getLogger(__name__)


class PolicySweepService:
    def __init__(
        self,
        uow: Any,
        policy_store: IPolicyStore,
        scope_locks: ScopeLocks | None = None,
    ) -> None:
        self.uow = uow
        self.policy_store = policy_store
        self.scope_locks = scope_locks or ScopeLocks()

    @traced("sweep.run")
    async def sweep(self) -> SweepReport:
        """Remove relational orphans, recompute policy tuples per role and domain, drop orphan tuples."""
        report = SweepReport()
        async with self.uow.transaction() as repos:
            report.orphan_role_menus = await repos.role_menus.delete_orphans()
            report.orphan_role_permissions = await repos.role_permissions.delete_orphans()
            report.orphan_user_roles = await repos.user_roles.delete_orphans()

        async with self.uow.reader() as repos:
            role_ids = {code: role_id for role_id, code in await repos.roles.id_code_pairs()}
            domain_codes = await repos.domains.all_codes()
            desired = await repos.role_permissions.grants_by_scope()

        current: dict[tuple[str, str], set[Grant]] = {}
        orphans: list[PolicyTuple] = []
        for rule in self.policy_store.get_policy():
            policy = PolicyTuple.from_rule(rule)
            if policy.role in role_ids and policy.domain in domain_codes:
                current.setdefault((policy.role, policy.domain), set()).add(policy.grant)
            else:
                orphans.append(policy)

        for role_code, domain in sorted(desired.keys() | current.keys()):
            report.scopes_checked += 1
            await self._sweep_scope(report, role_ids[role_code], role_code, domain)

        for policy in orphans:
            try:
                await self.policy_store.remove_filtered_policy(
                    POLICY_FIELD_ROLE, policy.role, policy.resource, policy.action, policy.domain
                )
                report.orphan_policies_removed += 1
            except TransientStoreException as e:
                report.errors.append(f"orphan {policy.role}/{policy.domain}: {e.message}")

        if report.repaired or report.errors:
            logger.warning(
                "Policy sweep repaired %d items across %d scopes (%d errors): %s",
                report.repaired,
                report.scopes_checked,
                len(report.errors),
                report,
            )
        else:
            logger.info("Policy sweep found no drift across %d scopes", report.scopes_checked)
        return report

    async def _sweep_scope(
        self,
        report: SweepReport,
        role_id: str,
        role_code: str,
        domain: str,
    ) -> None:
        """Recompute one scope under its reconciler lock, re-reading relational truth."""
        async with self.scope_locks.hold(("permissions", role_id, domain)):
            async with self.uow.reader() as repos:
                scope_desired = await repos.role_permissions.grants_for(role_id, domain)
            diff = compute_diff(
                current_grants(self.policy_store, role_code, domain), scope_desired
            )
            if diff.is_empty:
                return
            try:
                await apply_grant_diff(self.policy_store, role_code, domain, diff)
            except TransientStoreException as e:
                report.errors.append(f"{role_code}/{domain}: {e.message}")
                return
            report.policies_added += len(diff.to_add)
            report.policies_removed += len(diff.to_remove)
