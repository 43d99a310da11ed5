"""Menu application service: create and update nodes of the menu tree."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from rbac_console.application.dtos.menu import MenuInput, MenuResult
from rbac_console.core.config import get_settings
from rbac_console.domain.enums import MenuType, Status
from rbac_console.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    SelfParentingException,
)

logger = logging.getLogger(__name__)


class MenuService:
    """pid names an existing menu or the root (0); a menu is never its own parent."""

    def __init__(self, uow: Any, root_pid: int | None = None) -> None:
        self.uow = uow
        self.root_pid = root_pid if root_pid is not None else get_settings().root_menu_pid

    async def _require_parent(self, repos: Any, pid: int) -> None:
        if pid != self.root_pid and not await repos.menus.exists(pid):
            raise ResourceNotFoundException("menu", str(pid))

    @staticmethod
    def _fields(data: MenuInput) -> dict[str, Any]:
        fields = asdict(data)
        fields["menu_type"] = MenuType(data.menu_type).value
        fields["status"] = Status(data.status).value
        return fields

    async def create_menu(
        self,
        data: MenuInput,
        *,
        menu_id: int | None = None,
        actor_id: str | None = None,
    ) -> MenuResult:
        """Create a menu; menu_id is assigned by the store unless given.

        Raises:
            SelfParentingException: pid equals the given menu_id.
            ConflictException: menu_id already used.
            ResourceNotFoundException: parent menu does not exist.
        """
        async with self.uow.transaction() as repos:
            if menu_id is not None and data.pid == menu_id:
                raise SelfParentingException("menu", str(menu_id))
            await self._require_parent(repos, data.pid)
            fields = self._fields(data)
            if menu_id is not None:
                if await repos.menus.exists(menu_id):
                    raise ConflictException(
                        f"Menu with id {menu_id} already exists", {"id": menu_id}
                    )
                fields["id"] = menu_id
            result = await repos.menus.create_menu(created_by=actor_id, **fields)
        logger.info("Menu created: %s (%d)", result.route_name, result.id)
        return result

    async def update_menu(
        self, menu_id: int, data: MenuInput, *, actor_id: str | None = None
    ) -> MenuResult:
        """Update a menu. Self-parenting is rejected even when the old pid was valid.

        Raises:
            SelfParentingException: pid equals menu_id.
            ResourceNotFoundException: menu or parent menu does not exist.
        """
        if data.pid == menu_id:
            raise SelfParentingException("menu", str(menu_id))
        async with self.uow.transaction() as repos:
            menu = await repos.menus.get_by_id(menu_id)
            if menu is None:
                raise ResourceNotFoundException("menu", str(menu_id))
            await self._require_parent(repos, data.pid)
            for key, value in self._fields(data).items():
                setattr(menu, key, value)
            menu.updated_by = actor_id
            return await repos.menus.save(menu)
