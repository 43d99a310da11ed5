"""Create the schema and seed the built-in domain, default roles and a super admin.

Usage:
    python -m scripts.seed_console <admin_password>
Idempotent: existing rows are left alone. The super role is granted every
catalogued endpoint in the built-in domain.
"""

import asyncio
import sys

from rbac_console.api.v1.route_scan import collect_endpoints
from rbac_console.application.services import (
    AuthorizationService,
    DomainService,
    EndpointCatalogService,
    RoleService,
    UserService,
)
from rbac_console.core.config import get_settings
from rbac_console.infrastructure.authorization import CasbinPolicyStore
from rbac_console.infrastructure.persistence import (
    Base,
    UnitOfWorkFactory,
    dispose_engine,
    get_engine,
    get_session_factory,
)
from rbac_console.infrastructure.security import BcryptPasswordHasher
from rbac_console.main import create_app
from rbac_console.shared.telemetry import setup_logging

SUPER_ROLE_CODE = "ROLE_SUPER"
ADMIN_USERNAME = "admin"


async def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python -m scripts.seed_console <admin_password>", file=sys.stderr)
        sys.exit(1)
    admin_password = sys.argv[1]
    settings = get_settings()
    setup_logging()

    uow = UnitOfWorkFactory(get_session_factory())
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    store = await CasbinPolicyStore.open(
        settings.policy_store_url or get_engine(),
        timeout_seconds=settings.policy_store_timeout_seconds,
    )
    try:
        domain = settings.builtin_domain_code
        async with uow.reader() as repos:
            has_domain = await repos.domains.get_by_code(domain) is not None
            super_role = await repos.roles.get_by_code(SUPER_ROLE_CODE)
            has_user_role = await repos.roles.get_by_code(settings.default_role_code) is not None
            has_admin = await repos.users.get_by_username(ADMIN_USERNAME) is not None
        if not has_domain:
            await DomainService(uow, store).create_domain(domain, "Built-in")
        if super_role is None:
            super_role_id = (await RoleService(uow).create_role(SUPER_ROLE_CODE, "Super admin")).id
        else:
            super_role_id = super_role.id
        if not has_user_role:
            await RoleService(uow).create_role(settings.default_role_code, "User")
        if not has_admin:
            admin = await UserService(uow, BcryptPasswordHasher()).create_user(
                ADMIN_USERNAME, admin_password, domain, "Administrator"
            )
            authz = AuthorizationService(uow, store)
            members = await authz.get_role_user_ids(super_role_id)
            await authz.sync_users(super_role_id, members | {admin.id})

        descriptors = collect_endpoints(create_app())
        await EndpointCatalogService(uow, store).rebuild(descriptors)
        result = await AuthorizationService(uow, store).sync_permissions(
            domain, super_role_id, [d.id for d in descriptors]
        )
        print(f"Seeded {domain}: super role holds {len(descriptors)} endpoints (+{len(result.added)})")
    finally:
        await store.close()
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
