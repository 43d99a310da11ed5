"""Tests for CasbinPolicyStore on in-memory SQLite: positional filters, enforce, persistence."""

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from rbac_console.domain.exceptions import TransientStoreException
from rbac_console.infrastructure.authorization import CasbinPolicyStore
from rbac_console.infrastructure.persistence.models import PolicyRule


async def _seed(store: CasbinPolicyStore) -> None:
    await store.add_permission("R1", "menu", "read", "built-in")
    await store.add_permission("R1", "menu", "write", "built-in")
    await store.add_permission("R1", "menu", "read", "acme")
    await store.add_permission("R2", "role", "create", "built-in")


async def _row_count(session_factory: async_sessionmaker[AsyncSession]) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(PolicyRule))).scalar_one()


async def test_add_permission_is_idempotent(
    policy_store: CasbinPolicyStore, session_factory: async_sessionmaker[AsyncSession]
) -> None:
    assert await policy_store.add_permission("R1", "menu", "read", "built-in") is True
    assert await policy_store.add_permission("R1", "menu", "read", "built-in") is False
    assert policy_store.get_policy() == [["R1", "menu", "read", "built-in", "allow"]]
    assert await _row_count(session_factory) == 1


async def test_rules_are_persisted_in_casbin_layout(
    policy_store: CasbinPolicyStore, session_factory: async_sessionmaker[AsyncSession]
) -> None:
    await policy_store.add_permission("R1", "menu", "read", "built-in")
    async with session_factory() as session:
        row = (await session.execute(select(PolicyRule))).scalar_one()
    assert (row.ptype, row.v0, row.v1, row.v2, row.v3, row.v4) == (
        "p", "R1", "menu", "read", "built-in", "allow"
    )
    assert str(row) == "p, R1, menu, read, built-in, allow"


async def test_filtered_lookup_by_position(policy_store: CasbinPolicyStore) -> None:
    await _seed(policy_store)
    assert policy_store.get_filtered_policy(0, "R1", "", "", "built-in") == [
        ["R1", "menu", "read", "built-in", "allow"],
        ["R1", "menu", "write", "built-in", "allow"],
    ]
    assert len(policy_store.get_filtered_policy(3, "built-in")) == 3
    assert policy_store.get_filtered_policy(1, "role") == [
        ["R2", "role", "create", "built-in", "allow"]
    ]


async def test_filtered_removal_by_domain(
    policy_store: CasbinPolicyStore, session_factory: async_sessionmaker[AsyncSession]
) -> None:
    await _seed(policy_store)
    assert await policy_store.remove_filtered_policy(3, "built-in") is True
    assert policy_store.get_policy() == [["R1", "menu", "read", "acme", "allow"]]
    assert await _row_count(session_factory) == 1
    assert await policy_store.remove_filtered_policy(3, "built-in") is False


async def test_filtered_removal_of_single_tuple(policy_store: CasbinPolicyStore) -> None:
    await _seed(policy_store)
    await policy_store.remove_filtered_policy(0, "R1", "menu", "write", "built-in")
    assert policy_store.get_filtered_policy(0, "R1", "", "", "built-in") == [
        ["R1", "menu", "read", "built-in", "allow"]
    ]


async def test_filter_longer_than_rule_is_rejected(policy_store: CasbinPolicyStore) -> None:
    with pytest.raises(ValueError):
        policy_store.get_filtered_policy(3, "built-in", "allow", "extra")


async def test_enforce_exact_match_and_deny_override(policy_store: CasbinPolicyStore) -> None:
    await _seed(policy_store)
    assert policy_store.enforce("R1", "menu", "read", "built-in")
    assert not policy_store.enforce("R1", "menu", "delete", "built-in")
    assert not policy_store.enforce("R2", "menu", "read", "built-in")
    assert not policy_store.enforce("R1", "menu", "write", "acme")

    await policy_store.add_permission("R1", "menu", "read", "built-in", "deny")
    assert not policy_store.enforce("R1", "menu", "read", "built-in")


async def test_reopen_loads_persisted_rules(
    policy_store: CasbinPolicyStore, engine: AsyncEngine
) -> None:
    await _seed(policy_store)
    reopened = await CasbinPolicyStore.open(engine)
    assert reopened.get_policy() == policy_store.get_policy()
    assert reopened.enforce("R2", "role", "create", "built-in")
    await reopened.close()


async def test_second_worker_sees_writes_after_reload(
    policy_store: CasbinPolicyStore, engine: AsyncEngine
) -> None:
    other = await CasbinPolicyStore.open(engine)
    await policy_store.add_permission("R1", "menu", "read", "built-in")
    assert not other.enforce("R1", "menu", "read", "built-in")

    await other.load_policy()
    assert other.enforce("R1", "menu", "read", "built-in")

    await policy_store.remove_filtered_policy(0, "R1")
    await other.load_policy()
    assert not other.enforce("R1", "menu", "read", "built-in")
    await other.close()


async def test_reload_loop_picks_up_other_writers(
    policy_store: CasbinPolicyStore, engine: AsyncEngine
) -> None:
    other = await CasbinPolicyStore.open(engine, reload_seconds=0.05)
    await policy_store.add_permission("R1", "menu", "read", "built-in")
    await asyncio.sleep(0.3)
    assert other.enforce("R1", "menu", "read", "built-in")
    await other.close()


async def test_removing_rows_already_gone_resyncs_memory(
    policy_store: CasbinPolicyStore, engine: AsyncEngine
) -> None:
    other = await CasbinPolicyStore.open(engine)
    await policy_store.add_permission("R1", "menu", "read", "built-in")
    await other.load_policy()
    await policy_store.remove_filtered_policy(0, "R1")

    assert await other.remove_filtered_policy(0, "R1") is True
    assert other.get_policy() == []
    await other.close()


async def test_slow_store_call_surfaces_as_transient(policy_store: CasbinPolicyStore) -> None:
    store = CasbinPolicyStore(policy_store._enforcer, timeout_seconds=0.01)
    with pytest.raises(TransientStoreException) as exc_info:
        await store._bounded(asyncio.sleep(1), "add_permission")
    assert exc_info.value.details["store"] == "policy_store"
    assert "timed out" in exc_info.value.details["reason"]


async def test_add_already_persisted_by_other_worker_returns_false(
    policy_store: CasbinPolicyStore, engine: AsyncEngine,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    other = await CasbinPolicyStore.open(engine)
    await policy_store.add_permission("R1", "menu", "read", "built-in")

    assert await other.add_permission("R1", "menu", "read", "built-in") is False
    assert other.enforce("R1", "menu", "read", "built-in")
    assert await _row_count(session_factory) == 1
    await other.close()
