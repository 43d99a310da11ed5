"""Casbin-backed policy store.

A casbin AsyncEnforcer holds the rules in memory; casbin-async-sqlalchemy-adapter
persists every mutation to sys_policy_rule before the in-memory model changes.
Every adapter round trip is bounded by policy_store_timeout_seconds. Writes
are serialized by one lock. Other workers' mutations become visible on the
next periodic reload (policy_reload_seconds; 0 disables it).
"""

import asyncio
import logging
from collections.abc import Awaitable, Sequence

import casbin
from casbin_async_sqlalchemy_adapter import Adapter
from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from rbac_console.core.constants import POLICY_EFFECT_ALLOW
from rbac_console.domain.exceptions import TransientStoreException
from rbac_console.infrastructure.authorization.model import build_model
from rbac_console.infrastructure.persistence.models.policy_rule import PolicyRule

logger = logging.getLogger(__name__)

STORE_NAME = "policy_store"

# role, resource, action, domain, effect
RULE_FIELD_COUNT = 5

_STORE_ERRORS = (
    sa_exc.OperationalError,
    sa_exc.InterfaceError,
    sa_exc.TimeoutError,
    ConnectionError,
    OSError,
)


def _check_filter(field_index: int, field_values: Sequence[str]) -> None:
    if field_index < 0 or field_index + len(field_values) > RULE_FIELD_COUNT:
        raise ValueError(
            f"Filter at index {field_index} with {len(field_values)} values "
            f"exceeds the {RULE_FIELD_COUNT} rule fields"
        )


class CasbinPolicyStore:
    """IPolicyStore over a casbin AsyncEnforcer.

    Field indexes: 0=role, 1=resource, 2=action, 3=domain, 4=effect. An
    empty filter value matches any value at its position.
    """

    def __init__(
        self,
        enforcer: casbin.AsyncEnforcer,
        *,
        timeout_seconds: float = 5.0,
        reload_seconds: float = 0.0,
        engine: AsyncEngine | None = None,
    ) -> None:
        self._enforcer = enforcer
        self._timeout = timeout_seconds
        self._reload_seconds = reload_seconds
        self._engine = engine
        self._write_lock = asyncio.Lock()
        self._reload_task: asyncio.Task[None] | None = None

    @classmethod
    async def open(
        cls,
        db: str | AsyncEngine,
        *,
        timeout_seconds: float = 5.0,
        reload_seconds: float = 0.0,
    ) -> "CasbinPolicyStore":
        """Create sys_policy_rule if needed, load every rule, start the reload loop.

        Given a URL the store owns its engine (disposed by close); given an
        engine it shares the caller's.
        """
        owned: AsyncEngine | None = None
        if isinstance(db, str):
            owned = create_async_engine(db, pool_pre_ping=True)
        engine = owned or db
        assert isinstance(engine, AsyncEngine)
        enforcer = casbin.AsyncEnforcer(build_model(), Adapter(engine, db_class=PolicyRule))
        store = cls(
            enforcer,
            timeout_seconds=timeout_seconds,
            reload_seconds=reload_seconds,
            engine=owned,
        )
        await store._bounded(store._create_table(engine), "create_table")
        await store.load_policy()
        if reload_seconds > 0:
            store._reload_task = asyncio.create_task(store._reload_forever())
        logger.info("Policy store opened with %d rules", len(enforcer.get_policy()))
        return store

    async def close(self) -> None:
        """Stop the reload loop and release the engine when the store owns one."""
        if self._reload_task is not None:
            self._reload_task.cancel()
            try:
                await self._reload_task
            except asyncio.CancelledError:
                pass
            self._reload_task = None
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
        logger.info("Policy store closed")

    async def _bounded[T](self, awaitable: Awaitable[T], step: str) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except TimeoutError as e:
            raise TransientStoreException(
                STORE_NAME, f"{step} timed out after {self._timeout}s"
            ) from e
        except _STORE_ERRORS as e:
            raise TransientStoreException(STORE_NAME, f"{step} failed: {e}") from e

    @staticmethod
    async def _create_table(engine: AsyncEngine) -> None:
        async with engine.begin() as conn:
            await conn.run_sync(
                lambda sync_conn: PolicyRule.__table__.create(sync_conn, checkfirst=True)
            )

    async def load_policy(self) -> None:
        """Replace the enforcer's rules with the table contents."""
        async with self._write_lock:
            await self._bounded(self._enforcer.load_policy(), "load_policy")

    async def _reload_forever(self) -> None:
        while True:
            await asyncio.sleep(self._reload_seconds)
            try:
                await self.load_policy()
            except TransientStoreException as e:
                logger.warning("Policy reload skipped: %s", e.message)

    def get_filtered_policy(self, field_index: int, *field_values: str) -> list[list[str]]:
        _check_filter(field_index, field_values)
        return sorted(self._enforcer.get_filtered_policy(field_index, *field_values))

    def get_policy(self) -> list[list[str]]:
        return sorted(self._enforcer.get_policy())

    async def add_permission(
        self,
        role: str,
        resource: str,
        action: str,
        domain: str,
        effect: str = POLICY_EFFECT_ALLOW,
    ) -> bool:
        async with self._write_lock:
            try:
                return await self._bounded(
                    self._enforcer.add_permission_for_user(role, resource, action, domain, effect),
                    "add_permission",
                )
            except sa_exc.IntegrityError:
                # Persisted by another worker that this one has not reloaded yet.
                logger.warning(
                    "Policy rule already persisted: %s", (role, resource, action, domain, effect)
                )
                await self._bounded(self._enforcer.load_policy(), "load_policy")
                return False

    async def remove_filtered_policy(self, field_index: int, *field_values: str) -> bool:
        _check_filter(field_index, field_values)
        async with self._write_lock:
            if not self._enforcer.get_filtered_policy(field_index, *field_values):
                return False
            removed = await self._bounded(
                self._enforcer.remove_filtered_policy(field_index, *field_values),
                "remove_filtered_policy",
            )
            if not removed:
                # Rows already deleted elsewhere; resync memory with the table.
                await self._bounded(self._enforcer.load_policy(), "load_policy")
        return True

    def enforce(self, role: str, resource: str, action: str, domain: str) -> bool:
        """Allowed when an allow rule matches exactly and no deny rule does."""
        return bool(self._enforcer.enforce(role, resource, action, domain))
