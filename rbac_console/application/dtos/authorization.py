"""DTOs for reconciliation, catalog rebuild and sweep results."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field

from rbac_console.core.constants import POLICY_EFFECT_ALLOW


@dataclass(frozen=True)
class RelationDiff[K: Hashable]:
    """Minimal change turning a current relation set into a desired one."""

    to_add: frozenset[K]
    to_remove: frozenset[K]

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove

    @property
    def size(self) -> int:
        return len(self.to_add) + len(self.to_remove)


@dataclass(frozen=True)
class SyncResult[K: Hashable]:
    """Outcome of one reconciler call: what was added to and removed from the relation.

    For permissions the keys are (resource, action) pairs; for routes menu ids;
    for users user ids.
    """

    added: frozenset[K] = frozenset()
    removed: frozenset[K] = frozenset()

    @property
    def mutations(self) -> int:
        return len(self.added) + len(self.removed)

    @classmethod
    def from_diff(cls, diff: RelationDiff[K]) -> SyncResult[K]:
        return cls(added=diff.to_add, removed=diff.to_remove)


@dataclass(frozen=True)
class PolicyTuple:
    """One policy rule (role, resource, action, domain, effect)."""

    role: str
    resource: str
    action: str
    domain: str
    effect: str = POLICY_EFFECT_ALLOW

    @classmethod
    def from_rule(cls, rule: list[str]) -> PolicyTuple:
        """Build from a positional rule as returned by the policy store."""
        effect = rule[4] if len(rule) > 4 and rule[4] else POLICY_EFFECT_ALLOW
        return cls(rule[0], rule[1], rule[2], rule[3], effect)

    @property
    def grant(self) -> tuple[str, str]:
        """(resource, action) pair, the unit the reconciler diffs on."""
        return (self.resource, self.action)


@dataclass(frozen=True)
class CatalogRebuildResult:
    """Counts from one endpoint catalog rebuild."""

    inserted: int
    updated: int
    deleted: int


@dataclass
class SweepReport:
    """Counts of repairs made by one reconciliation sweep."""

    orphan_role_menus: int = 0
    orphan_role_permissions: int = 0
    orphan_user_roles: int = 0
    policies_added: int = 0
    policies_removed: int = 0
    orphan_policies_removed: int = 0
    scopes_checked: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def repaired(self) -> int:
        return (
            self.orphan_role_menus
            + self.orphan_role_permissions
            + self.orphan_user_roles
            + self.policies_added
            + self.policies_removed
            + self.orphan_policies_removed
        )
