"""Set difference between a current and a desired relation state."""

from collections.abc import Hashable, Iterable

from rbac_console.application.dtos.authorization import RelationDiff


def compute_diff[K: Hashable](current: Iterable[K], desired: Iterable[K]) -> RelationDiff[K]:
    """Return what to add (desired - current) and remove (current - desired).

    Both inputs are materialized as frozensets, so duplicates are ignored and
    the cost is linear in their sizes.
    """
    current_set = frozenset(current)
    desired_set = frozenset(desired)
    return RelationDiff(
        to_add=desired_set - current_set,
        to_remove=current_set - desired_set,
    )
