"""Process-wide collaborators opened by the lifespan and kept on app.state."""

from __future__ import annotations

from fastapi import Request

from rbac_console.application.interfaces import IPolicyStore, ISessionAuthorityCache
from rbac_console.application.services.scope_locks import ScopeLocks
from rbac_console.domain.exceptions import TransientStoreException
from rbac_console.infrastructure.persistence import UnitOfWorkFactory


def get_uow(request: Request) -> UnitOfWorkFactory:
    """Unit-of-work factory over the shared session factory."""
    uow = getattr(request.app.state, "uow", None)
    if uow is None:
        raise TransientStoreException("database", "not initialized")
    return uow


def get_policy_store(request: Request) -> IPolicyStore:
    store = getattr(request.app.state, "policy_store", None)
    if store is None:
        raise TransientStoreException("policy_store", "not initialized")
    return store


def get_session_cache(request: Request) -> ISessionAuthorityCache:
    cache = getattr(request.app.state, "session_cache", None)
    if cache is None:
        raise TransientStoreException("session_cache", "not initialized")
    return cache


def get_scope_locks(request: Request) -> ScopeLocks:
    """Per-scope locks shared by every reconciler, cascade and sweep call in this process."""
    locks = getattr(request.app.state, "scope_locks", None)
    if locks is None:
        locks = ScopeLocks()
        request.app.state.scope_locks = locks
    return locks
