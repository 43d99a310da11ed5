"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (relational store,
policy store, session cache, endpoint catalog, telemetry).
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from rbac_console.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: session factory, policy store (loads every rule), session
    cache, endpoint catalog rebuild from the route table. Telemetry is set up
    in create_app, before the middleware stack is built.
    Shutdown order: session cache, policy store, telemetry, SQL engine.
    """
    settings = get_settings()

    # ---- Startup ----
    from rbac_console.api.v1.route_scan import collect_endpoints
    from rbac_console.application.services import EndpointCatalogService, ScopeLocks
    from rbac_console.infrastructure.authorization import CasbinPolicyStore
    from rbac_console.infrastructure.cache import SessionAuthorityCache
    from rbac_console.infrastructure.persistence import (
        UnitOfWorkFactory,
        get_engine,
        get_session_factory,
    )

    uow = UnitOfWorkFactory(get_session_factory())
    app.state.uow = uow
    app.state.scope_locks = ScopeLocks()

    app.state.policy_store = await CasbinPolicyStore.open(
        settings.policy_store_url or get_engine(),
        timeout_seconds=settings.policy_store_timeout_seconds,
        reload_seconds=settings.policy_reload_seconds,
    )

    cache = SessionAuthorityCache()
    await cache.connect()
    app.state.session_cache = cache

    # Direct call: the scanned route table is the full desired catalog.
    await EndpointCatalogService(uow, app.state.policy_store).rebuild(collect_endpoints(app))

    yield

    # ---- Shutdown ----
    if getattr(app.state, "session_cache", None) is not None:
        await app.state.session_cache.disconnect()

    if getattr(app.state, "policy_store", None) is not None:
        await app.state.policy_store.close()
        app.state.policy_store = None

    from rbac_console.shared.telemetry.telemetry import get_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        logger.info("Telemetry shutdown complete")

    from rbac_console.infrastructure.persistence import dispose_engine

    await dispose_engine()
