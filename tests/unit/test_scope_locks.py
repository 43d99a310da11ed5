"""Tests for per-scope reconciler locks."""

import asyncio

from rbac_console.application.services import ScopeLocks


async def test_same_scope_runs_one_at_a_time() -> None:
    locks = ScopeLocks()
    order: list[str] = []
    first_entered = asyncio.Event()
    release_first = asyncio.Event()

    async def first() -> None:
        async with locks.hold(("routes", "r1", "built-in")):
            order.append("first:start")
            first_entered.set()
            await release_first.wait()
            order.append("first:end")

    async def second() -> None:
        await first_entered.wait()
        async with locks.hold(("routes", "r1", "built-in")):
            order.append("second")

    t1 = asyncio.create_task(first())
    t2 = asyncio.create_task(second())
    await first_entered.wait()
    await asyncio.sleep(0)
    assert order == ["first:start"]
    release_first.set()
    await asyncio.gather(t1, t2)
    assert order == ["first:start", "first:end", "second"]


async def test_different_scopes_do_not_wait() -> None:
    locks = ScopeLocks()
    async with locks.hold(("routes", "r1", "built-in")):
        await asyncio.wait_for(_enter(locks, ("routes", "r1", "other")), timeout=1)


async def _enter(locks: ScopeLocks, scope: tuple[str, ...]) -> None:
    async with locks.hold(scope):
        pass


async def test_unused_locks_are_dropped() -> None:
    locks = ScopeLocks()
    async with locks.hold(("users", "r1")):
        assert len(locks) == 1
    assert len(locks) == 0
