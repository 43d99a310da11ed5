"""Tests for post-commit policy and cache steps (mocked stores)."""

import logging
from unittest.mock import AsyncMock, MagicMock

from rbac_console.application.dtos import RelationDiff
from rbac_console.application.services.cache_sync import (
    invalidate_cached_authority,
    resync_cached_authority,
)
from rbac_console.application.services.policy_sync import (
    apply_grant_diff,
    current_grants,
    run_policy_step,
)
from rbac_console.domain.exceptions import TransientStoreException


def test_current_grants_filters_by_role_and_domain() -> None:
    store = MagicMock()
    store.get_filtered_policy.return_value = [
        ["R1", "menu", "read", "built-in", "allow"],
        ["R1", "menu", "write", "built-in", "allow"],
    ]
    assert current_grants(store, "R1", "built-in") == {("menu", "read"), ("menu", "write")}
    store.get_filtered_policy.assert_called_once_with(0, "R1", "", "", "built-in")


async def test_apply_grant_diff_removes_before_adding() -> None:
    calls: list[tuple[str, tuple[str, ...]]] = []
    store = MagicMock()
    store.remove_filtered_policy = AsyncMock(
        side_effect=lambda *args: calls.append(("remove", args))
    )
    store.add_permission = AsyncMock(side_effect=lambda *args: calls.append(("add", args)))
    diff = RelationDiff(
        to_add=frozenset({("menu", "delete")}),
        to_remove=frozenset({("menu", "write")}),
    )

    await apply_grant_diff(store, "R1", "built-in", diff)

    assert calls == [
        ("remove", (0, "R1", "menu", "write", "built-in")),
        ("add", ("R1", "menu", "delete", "built-in")),
    ]


async def test_run_policy_step_logs_divergence_instead_of_raising(caplog) -> None:
    failing = AsyncMock(side_effect=TransientStoreException("policy_store", "timed out"))
    with caplog.at_level(logging.ERROR):
        ok = await run_policy_step({"role": "R1"}, "delete_role", failing)
    assert ok is False
    assert "Policy store diverged" in caplog.text
    assert "delete_role" in caplog.text


async def test_run_policy_step_returns_true_on_success() -> None:
    assert await run_policy_step({}, "noop", AsyncMock(return_value=True)) is True


async def test_resync_counts_live_sessions_and_survives_cache_errors(caplog) -> None:
    cache = MagicMock()

    async def resync(user_id: str, codes: set[str]) -> bool:
        if user_id == "broken":
            raise TransientStoreException("session_cache", "down")
        return user_id == "live"

    cache.resync = AsyncMock(side_effect=resync)
    with caplog.at_level(logging.ERROR):
        updated = await resync_cached_authority(
            cache, {"live": {"A"}, "gone": {"A"}, "broken": set()}
        )
    assert updated == 1
    assert "broken" in caplog.text


async def test_cache_steps_are_noops_without_cache() -> None:
    assert await resync_cached_authority(None, {"u1": {"A"}}) == 0
    await invalidate_cached_authority(None, {"u1"})


async def test_invalidate_each_user() -> None:
    cache = MagicMock()
    cache.invalidate = AsyncMock()
    await invalidate_cached_authority(cache, {"u1", "u2"})
    assert {c.args[0] for c in cache.invalidate.await_args_list} == {"u1", "u2"}
