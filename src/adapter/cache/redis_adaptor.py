import asyncio
from typing import Dict, Iterable, Optional

import redis.asyncio as aioredis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from src.domain.exceptions import StoreUnavailable


class RedisAdaptor:
    """
    Thin async wrapper over redis: get/set-with-expiry, hash get/set, delete
    and multi-delete. No business logic.

    Every command is bounded by operation_timeout. Cancelling the awaiting
    task aborts the in-flight command; backend faults surface as
    StoreUnavailable.
    """

    DEFAULT_OPERATION_TIMEOUT = 5.0

    def __init__(
        self,
        client: aioredis.Redis,
        operation_timeout: float = DEFAULT_OPERATION_TIMEOUT,
    ):
        self.client = client
        self.operation_timeout = operation_timeout

    @classmethod
    def from_url(
        cls, redis_url: str, operation_timeout: float = DEFAULT_OPERATION_TIMEOUT
    ) -> "RedisAdaptor":
        client = aioredis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=operation_timeout,
            socket_connect_timeout=operation_timeout,
        )
        return cls(client, operation_timeout)

    async def _run(self, command: str, awaitable):
        try:
            return await asyncio.wait_for(awaitable, timeout=self.operation_timeout)
        except (asyncio.TimeoutError, RedisTimeoutError) as exc:
            raise StoreUnavailable(f"redis {command} timed out") from exc
        except RedisConnectionError as exc:
            raise StoreUnavailable(f"redis {command} failed: connection error") from exc
        except RedisError as exc:
            raise StoreUnavailable(f"redis {command} failed: {exc}") from exc

    async def get(self, key: str) -> Optional[str]:
        return await self._run("GET", self.client.get(key))

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        return bool(await self._run("SET", self.client.set(key, value, ex=ttl_seconds)))

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        """SET NX EX; True only for the caller that created the key"""
        return bool(
            await self._run(
                "SET NX", self.client.set(key, value, ex=ttl_seconds, nx=True)
            )
        )

    async def hget(self, key: str, field: str) -> Optional[str]:
        return await self._run("HGET", self.client.hget(key, field))

    async def hgetall(self, key: str) -> Dict[str, str]:
        return await self._run("HGETALL", self.client.hgetall(key)) or {}

    async def hset(self, key: str, mapping: Dict[str, str]) -> int:
        return await self._run("HSET", self.client.hset(key, mapping=mapping))

    async def delete(self, key: str) -> int:
        return await self._run("DEL", self.client.delete(key))

    async def delete_many(self, keys: Iterable[str]) -> int:
        keys = list(keys)
        if not keys:
            return 0
        return await self._run("DEL", self.client.delete(*keys))

    async def hdelete(self, key: str, fields: Iterable[str]) -> int:
        fields = list(fields)
        if not fields:
            return 0
        return await self._run("HDEL", self.client.hdel(key, *fields))

    async def ping(self) -> bool:
        return bool(await self._run("PING", self.client.ping()))

    async def close(self) -> None:
        await self.client.aclose()
