"""Post-commit Session Authority Cache updates.

Relational truth is already committed when these run, so a cache outage is
logged rather than raised. The affected entries expire with their TTL.
"""

import logging

from rbac_console.application.interfaces import ISessionAuthorityCache
from rbac_console.domain.exceptions import TransientStoreException

logger = logging.getLogger(__name__)


async def resync_cached_authority(
    cache: ISessionAuthorityCache | None,
    role_codes_by_user: dict[str, set[str]],
) -> int:
    """Replace the cached role sets of live sessions; return how many were updated."""
    if cache is None:
        return 0
    updated = 0
    for user_id, codes in role_codes_by_user.items():
        try:
            if await cache.resync(user_id, codes):
                updated += 1
        except TransientStoreException as e:
            logger.error("Session cache resync failed for user %s: %s", user_id, e.message)
    return updated


async def invalidate_cached_authority(
    cache: ISessionAuthorityCache | None, user_ids: set[str]
) -> None:
    if cache is None:
        return
    for user_id in user_ids:
        try:
            await cache.invalidate(user_id)
        except TransientStoreException as e:
            logger.error("Session cache invalidate failed for user %s: %s", user_id, e.message)
