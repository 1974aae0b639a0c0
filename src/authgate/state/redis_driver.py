"""Redis-backed state driver."""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from authgate.errors import NotFound, StateDriverError
from authgate.observability.metrics import metrics
from authgate.state.base import StateDriver

logger = logging.getLogger(__name__)


class RedisStateDriver(StateDriver):
    """
    State driver over a Redis server.

    Suitable for multi-instance production deployments. Hierarchical keys
    are stored verbatim; read_all walks a prefix with SCAN and fetches the
    values with MGET. write_if_absent maps to SET NX.
    """

    def __init__(self, redis_url: str, client=None):
        self.redis = client or aioredis.from_url(redis_url, decode_responses=False)
        logger.info(f"Redis state driver initialized: {redis_url}")

    async def read(self, key: str) -> bytes:
        metrics.inc_counter("state.read")
        try:
            value = await self.redis.get(key)
        except RedisError as exc:
            raise StateDriverError("read", key, str(exc)) from exc
        if value is None:
            raise NotFound(key)
        return value

    async def write(self, key: str, value: bytes) -> None:
        metrics.inc_counter("state.write")
        try:
            await self.redis.set(key, value)
        except RedisError as exc:
            raise StateDriverError("write", key, str(exc)) from exc

    async def write_if_absent(self, key: str, value: bytes) -> bool:
        metrics.inc_counter("state.write")
        try:
            created = await self.redis.set(key, value, nx=True)
        except RedisError as exc:
            raise StateDriverError("write", key, str(exc)) from exc
        return bool(created)

    async def clear(self, key: str) -> None:
        metrics.inc_counter("state.clear")
        try:
            removed = await self.redis.delete(key)
        except RedisError as exc:
            raise StateDriverError("clear", key, str(exc)) from exc
        if not removed:
            raise NotFound(key)

    async def read_all(self, prefix: str) -> list[bytes]:
        metrics.inc_counter("state.read")
        pattern = prefix.rstrip("/") + "/*"
        try:
            keys = sorted([key async for key in self.redis.scan_iter(match=pattern)])
            if not keys:
                raise NotFound(prefix)
            values = await self.redis.mget(keys)
        except RedisError as exc:
            raise StateDriverError("read_all", prefix, str(exc)) from exc

        # Keys removed between SCAN and MGET come back as None
        values = [value for value in values if value is not None]
        if not values:
            raise NotFound(prefix)
        return values

    async def close(self) -> None:
        await self.redis.aclose()
