"""Run the reconciliation sweep once: repair orphans and policy drift.

Usage:
    python -m scripts.reconcile_policies
Exit status 1 when any scope could not be repaired (policy store errors).
"""

import asyncio
import sys

from rbac_console.application.services import PolicySweepService
from rbac_console.core.config import get_settings
from rbac_console.infrastructure.authorization import CasbinPolicyStore
from rbac_console.infrastructure.persistence import (
    UnitOfWorkFactory,
    dispose_engine,
    get_engine,
    get_session_factory,
)
from rbac_console.shared.telemetry import setup_logging


async def main() -> int:
    settings = get_settings()
    setup_logging()
    store = await CasbinPolicyStore.open(
        settings.policy_store_url or get_engine(),
        timeout_seconds=settings.policy_store_timeout_seconds,
    )
    try:
        report = await PolicySweepService(
            UnitOfWorkFactory(get_session_factory()), store
        ).sweep()
    finally:
        await store.close()
        await dispose_engine()
    print(
        f"scopes={report.scopes_checked} repaired={report.repaired} "
        f"errors={len(report.errors)}"
    )
    for error in report.errors:
        print(f"  {error}", file=sys.stderr)
    return 1 if report.errors else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
