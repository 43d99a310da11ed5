"""Redis-backed Session Authority Cache.

One Redis set per logged-in user holding the role codes the session may act
as, with a TTL equal to the access token lifetime. Entries are always replaced
wholesale (DEL then SADD inside one MULTI/EXEC), never merged, so a revoked
role cannot survive a refresh.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import redis.asyncio as redis

from rbac_console.core.config import get_settings
from rbac_console.domain.exceptions import TransientStoreException
from rbac_console.infrastructure.cache.keys import session_authority_key

logger = logging.getLogger(__name__)

STORE_NAME = "session_cache"

# Optimistic resync attempts before giving up on a contended key.
RESYNC_ATTEMPTS = 3


class SessionAuthorityCache:
    """Async Redis set store with TTL, keyed by user id.

    Call connect() at startup and disconnect() at shutdown. Unlike a plain
    read-through cache, failures are not swallowed: every call bounded by the
    socket timeout and a Redis outage surfaces as TransientStoreException.
    """

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize cache.

        Args:
            redis_client: Optional Redis client for testing or DI.
        """
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self.redis is not None:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=self.settings.redis_password.get_secret_value()
                if self.settings.redis_password
                else None,
                decode_responses=True,
                socket_connect_timeout=self.settings.redis_socket_timeout,
                socket_timeout=self.settings.redis_socket_timeout,
                socket_keepalive=True,
            )
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Session cache connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Session cache connection failed: %s", e)
            self._connected = False
            self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Session cache disconnected")

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    def _client(self) -> redis.Redis:
        if not self.is_available() or self.redis is None:
            raise TransientStoreException(STORE_NAME, "not connected")
        return self.redis

    async def refresh(self, user_id: str, role_codes: Iterable[str], ttl_seconds: int) -> None:
        """Replace the cached role set of user_id and reset its TTL.

        With no role codes the key is removed and not recreated.
        """
        key = session_authority_key(user_id)
        roles = sorted(set(role_codes))
        client = self._client()
        try:
            async with client.pipeline(transaction=True) as pipe:
                pipe.delete(key)
                if roles:
                    pipe.sadd(key, *roles)
                    pipe.expire(key, ttl_seconds)
                await pipe.execute()
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise TransientStoreException(STORE_NAME, str(e)) from e
        logger.debug("Session authority refreshed for %s: %d roles", user_id, len(roles))

    async def resync(self, user_id: str, role_codes: Iterable[str]) -> bool:
        """Replace the role set of a live entry keeping its remaining TTL.

        Returns False (and writes nothing) when user_id has no live entry.
        An empty role set deletes the entry. The key is WATCHed from the TTL
        read to EXEC, so a logout or expiry in between is never undone.
        """
        key = session_authority_key(user_id)
        roles = sorted(set(role_codes))
        client = self._client()
        try:
            async with client.pipeline(transaction=True) as pipe:
                for _ in range(RESYNC_ATTEMPTS):
                    try:
                        await pipe.watch(key)
                        remaining = await self._remaining_ttl(pipe, key)
                        if remaining == -2:
                            return False
                        pipe.multi()
                        pipe.delete(key)
                        if roles:
                            pipe.sadd(key, *roles)
                            pipe.expire(
                                key,
                                remaining if remaining > 0 else self.settings.access_token_ttl_seconds,
                            )
                        await pipe.execute()
                    except redis.WatchError:
                        logger.debug("Session authority for %s changed during resync, retrying", user_id)
                        continue
                    logger.debug("Session authority resynced for %s: %d roles", user_id, len(roles))
                    return True
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise TransientStoreException(STORE_NAME, str(e)) from e
        raise TransientStoreException(
            STORE_NAME, f"resync of {user_id} kept conflicting after {RESYNC_ATTEMPTS} attempts"
        )

    @staticmethod
    async def _remaining_ttl(pipe: redis.client.Pipeline, key: str) -> int:
        """TTL of key read on the watching connection; -2 when absent."""
        return await pipe.ttl(key)

    async def invalidate(self, user_id: str) -> None:
        """Delete the cached role set of user_id."""
        client = self._client()
        try:
            await client.delete(session_authority_key(user_id))
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise TransientStoreException(STORE_NAME, str(e)) from e

    async def read(self, user_id: str) -> set[str]:
        """Return the cached role codes of user_id (empty set on miss)."""
        client = self._client()
        try:
            members = await client.smembers(session_authority_key(user_id))
        except (redis.ConnectionError, redis.TimeoutError) as e:
            raise TransientStoreException(STORE_NAME, str(e)) from e
        return set(members)
