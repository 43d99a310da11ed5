"""API v1: routers, dependencies and the route scanner feeding the endpoint catalog."""

from rbac_console.api.v1.router import api_router

__all__ = ["api_router"]
