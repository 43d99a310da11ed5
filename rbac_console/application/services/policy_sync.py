"""Policy-store steps shared by the reconciler, the cascade service and the sweep.

These steps run after the relational transaction has committed. A failure
there is a divergence: it is logged with its scope and step and left for the
reconciliation sweep, never raised to the caller.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from rbac_console.application.dtos.authorization import PolicyTuple, RelationDiff
from rbac_console.application.interfaces import IPolicyStore
from rbac_console.core.constants import POLICY_FIELD_ROLE
from rbac_console.domain.exceptions import PolicyDivergenceError, TransientStoreException

logger = logging.getLogger(__name__)

Grant = tuple[str, str]


def current_grants(store: IPolicyStore, role_code: str, domain: str) -> set[Grant]:
    """Return the (resource, action) pairs the store holds for role_code in domain."""
    rules = store.get_filtered_policy(POLICY_FIELD_ROLE, role_code, "", "", domain)
    return {PolicyTuple.from_rule(rule).grant for rule in rules}


async def apply_grant_diff(
    store: IPolicyStore, role_code: str, domain: str, diff: RelationDiff[Grant]
) -> None:
    """Remove stale grants, then add missing ones.

    Removals finish before any addition so a re-added tuple is never briefly
    duplicated.
    """
    for resource, action in sorted(diff.to_remove):
        await store.remove_filtered_policy(POLICY_FIELD_ROLE, role_code, resource, action, domain)
    for resource, action in sorted(diff.to_add):
        await store.add_permission(role_code, resource, action, domain)


async def run_policy_step(
    scope: dict[str, Any],
    step: str,
    apply: Callable[[], Awaitable[Any]],
) -> bool:
    """Run one post-commit policy step; log a divergence instead of raising.

    Returns True when the step completed.
    """
    try:
        await apply()
    except TransientStoreException as e:
        divergence = PolicyDivergenceError(scope, step, e.message)
        logger.error(
            "%s (scope=%s, step=%s): %s",
            divergence.message,
            scope,
            step,
            e.message,
        )
        return False
    return True


async def rename_role_rules(store: IPolicyStore, old_code: str, new_code: str) -> int:
    """Copy every rule of old_code to new_code, then drop the old ones.

    Additions come first so the role never loses a grant in between.
    """
    rules = [
        PolicyTuple.from_rule(rule)
        for rule in store.get_filtered_policy(POLICY_FIELD_ROLE, old_code)
    ]
    for rule in rules:
        await store.add_permission(new_code, rule.resource, rule.action, rule.domain, rule.effect)
    if rules:
        await store.remove_filtered_policy(POLICY_FIELD_ROLE, old_code)
    return len(rules)
