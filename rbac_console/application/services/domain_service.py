"""Domain application service: create and update tenant domains."""

from __future__ import annotations

import logging
from typing import Any

from rbac_console.application.dtos.domain import DomainResult
from rbac_console.application.interfaces import IPolicyStore
from rbac_console.core.constants import POLICY_FIELD_DOMAIN
from rbac_console.domain.enums import Status
from rbac_console.domain.exceptions import ConflictException, ResourceNotFoundException

logger = logging.getLogger(__name__)


class DomainService:
    """Domain codes are unique and immutable once referenced by grants."""

    def __init__(self, uow: Any, policy_store: IPolicyStore) -> None:
        self.uow = uow
        self.policy_store = policy_store

    async def create_domain(
        self,
        code: str,
        name: str,
        description: str | None = None,
        *,
        actor_id: str | None = None,
    ) -> DomainResult:
        """Create an ENABLED domain.

        Raises:
            ConflictException: code already used.
        """
        async with self.uow.transaction() as repos:
            if await repos.domains.code_exists(code):
                raise ConflictException(f"Domain with code '{code}' already exists", {"code": code})
            result = await repos.domains.create_domain(
                code, name, description, Status.ENABLED.value, created_by=actor_id
            )
        logger.info("Domain created: %s", code)
        return result

    async def update_domain(
        self,
        domain_id: str,
        code: str,
        name: str,
        description: str | None = None,
        status: str | None = None,
        *,
        actor_id: str | None = None,
    ) -> DomainResult:
        """Update a domain; a code change is refused while grants reference the old code.

        Raises:
            ResourceNotFoundException: No domain with domain_id.
            ConflictException: code taken, or old code still referenced.
        """
        async with self.uow.transaction() as repos:
            domain = await repos.domains.get_by_id(domain_id)
            if domain is None:
                raise ResourceNotFoundException("domain", domain_id)
            if code != domain.code:
                if await repos.domains.code_exists(code, exclude_id=domain_id):
                    raise ConflictException(
                        f"Domain with code '{code}' already exists", {"code": code}
                    )
                if await self._is_referenced(repos, domain.code):
                    raise ConflictException(
                        "Domain code is referenced by grants and cannot change",
                        {"code": domain.code},
                    )
                domain.code = code
            domain.name = name
            domain.description = description
            if status is not None:
                domain.status = Status(status).value
            domain.updated_by = actor_id
            return await repos.domains.save(domain)

    async def _is_referenced(self, repos: Any, code: str) -> bool:
        if self.policy_store.get_filtered_policy(POLICY_FIELD_DOMAIN, code):
            return True
        if await repos.role_menus.exists_for_domain(code):
            return True
        if await repos.role_permissions.exists_for_domain(code):
            return True
        return bool(await repos.users.ids_in_domain(code))
