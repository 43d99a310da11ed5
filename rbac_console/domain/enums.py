"""Domain enumerations for the console.

Enums represent fixed sets of domain values (e.g. identity status).
"""

from enum import Enum


class Status(str, Enum):
    """Lifecycle status shared by domains, roles, users and menus."""

    ENABLED = "ENABLED"
    DISABLED = "DISABLED"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings.

        Returns:
            List of enum value strings (e.g. for check constraints).
        """
        return [status.value for status in cls]


class MenuType(str, Enum):
    """Menu node kind: a directory groups children, a menu renders a page."""

    DIRECTORY = "directory"
    MENU = "menu"
