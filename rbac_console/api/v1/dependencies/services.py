"""Application service dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from rbac_console.api.v1.dependencies.common import (
    get_policy_store,
    get_scope_locks,
    get_session_cache,
    get_uow,
)
from rbac_console.application.interfaces import IPolicyStore, ISessionAuthorityCache
from rbac_console.application.services import (
    AuthorizationService,
    AuthService,
    CascadeService,
    DomainService,
    MenuService,
    PolicySweepService,
    RoleService,
    ScopeLocks,
    UserService,
)
from rbac_console.infrastructure.persistence import UnitOfWorkFactory
from rbac_console.infrastructure.security import BcryptPasswordHasher, JwtTokenService

UowDep = Annotated[UnitOfWorkFactory, Depends(get_uow)]
PolicyStoreDep = Annotated[IPolicyStore, Depends(get_policy_store)]
CacheDep = Annotated[ISessionAuthorityCache, Depends(get_session_cache)]
LocksDep = Annotated[ScopeLocks, Depends(get_scope_locks)]


def get_token_service() -> JwtTokenService:
    return JwtTokenService()


def get_password_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher()


def get_authorization_service(
    uow: UowDep, store: PolicyStoreDep, cache: CacheDep, locks: LocksDep
) -> AuthorizationService:
    return AuthorizationService(uow, store, cache, locks)


def get_cascade_service(
    uow: UowDep, store: PolicyStoreDep, cache: CacheDep, locks: LocksDep
) -> CascadeService:
    return CascadeService(uow, store, cache, locks)


def get_sweep_service(
    uow: UowDep, store: PolicyStoreDep, locks: LocksDep
) -> PolicySweepService:
    return PolicySweepService(uow, store, locks)


def get_domain_service(uow: UowDep, store: PolicyStoreDep) -> DomainService:
    return DomainService(uow, store)


def get_role_service(uow: UowDep, store: PolicyStoreDep, cache: CacheDep) -> RoleService:
    return RoleService(uow, policy_store=store, cache=cache)


def get_menu_service(uow: UowDep) -> MenuService:
    return MenuService(uow)


def get_user_service(
    uow: UowDep,
    hasher: Annotated[BcryptPasswordHasher, Depends(get_password_hasher)],
) -> UserService:
    return UserService(uow, hasher)


def get_auth_service(
    uow: UowDep,
    cache: CacheDep,
    hasher: Annotated[BcryptPasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[JwtTokenService, Depends(get_token_service)],
) -> AuthService:
    return AuthService(uow, hasher, tokens, cache)
