"""Core: settings, lifespan, exception handlers, constants and rate limits."""

from rbac_console.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
