"""Endpoint catalog rebuild: reconcile scanned routes into sys_endpoint at start-up."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from rbac_console.application.dtos.authorization import CatalogRebuildResult
from rbac_console.application.dtos.endpoint import EndpointDescriptor
from rbac_console.application.interfaces import IPolicyStore
from rbac_console.application.services.diff import compute_diff
from rbac_console.application.services.policy_sync import run_policy_step
from rbac_console.core.constants import POLICY_FIELD_RESOURCE
from rbac_console.shared.telemetry import traced

logger = logging.getLogger(__name__)


class EndpointCatalogService:
    """Keeps the permission catalog exactly equal to the deployed route table."""

    def __init__(self, uow: Any, policy_store: IPolicyStore | None = None) -> None:
        self.uow = uow
        self.policy_store = policy_store

    @traced("catalog.rebuild")
    async def rebuild(self, descriptors: Iterable[EndpointDescriptor]) -> CatalogRebuildResult:
        """Insert new ids, update matching ids in place, delete missing ids.

        Role-permission rows pointing at deleted endpoints are removed in the
        same transaction so no grant references a dangling endpoint. After the
        commit, policy rules on a (resource, action) pair no endpoint exposes
        any more are removed from the policy store.
        """
        scanned = {d.id: d for d in descriptors}
        updated = 0
        async with self.uow.transaction() as repos:
            stored = await repos.endpoints.get_map()
            stale_grants = {(e.resource, e.action) for e in stored.values()} - {
                (d.resource, d.action) for d in scanned.values()
            }
            diff = compute_diff(stored.keys(), scanned.keys())
            for endpoint_id in sorted(diff.to_add):
                repos.endpoints.add_descriptor(scanned[endpoint_id])
            for endpoint_id in sorted(stored.keys() & scanned.keys()):
                if repos.endpoints.apply_descriptor(stored[endpoint_id], scanned[endpoint_id]):
                    updated += 1
            await repos.session.flush()
            await repos.role_permissions.delete_by_endpoints(diff.to_remove)
            await repos.endpoints.delete_ids(diff.to_remove)
        if stale_grants and self.policy_store is not None:
            await self._drop_grants(self.policy_store, stale_grants)
        result = CatalogRebuildResult(
            inserted=len(diff.to_add), updated=updated, deleted=len(diff.to_remove)
        )
        logger.info(
            "Endpoint catalog rebuilt: %d inserted, %d updated, %d deleted",
            result.inserted,
            result.updated,
            result.deleted,
        )
        return result

    @staticmethod
    async def _drop_grants(store: IPolicyStore, grants: set[tuple[str, str]]) -> None:
        async def drop() -> None:
            for resource, action in sorted(grants):
                await store.remove_filtered_policy(POLICY_FIELD_RESOURCE, resource, action)

        if await run_policy_step({"catalog": "endpoints"}, "drop_stale_grants", drop):
            logger.info("Dropped policy rules for %d retired grants", len(grants))
