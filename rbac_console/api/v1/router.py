"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. The first
tag of a guarded route is its controller in the endpoint catalog.
"""

from fastapi import APIRouter

from rbac_console.api.v1.endpoints import (
    auth,
    authorization,
    domains,
    health,
    menus,
    roles,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(
    authorization.router, prefix="/authorization", tags=["authorization"]
)
api_router.include_router(domains.router, prefix="/domains", tags=["domains"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(menus.router, prefix="/menus", tags=["menus"])
