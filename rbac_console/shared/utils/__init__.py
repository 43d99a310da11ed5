"""Shared utilities (id generation)."""

from rbac_console.shared.utils.generators import generate_id

__all__ = ["generate_id"]
