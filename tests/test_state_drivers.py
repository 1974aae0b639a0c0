"""
State driver tests: in-memory and Redis-backed single-key operations.
"""

import fnmatch
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from authgate.config import Settings, StateBackend
from authgate.errors import NotFound, StateDriverError
from authgate.observability.metrics import metrics
from authgate.state import InMemoryStateDriver, create_state_driver, get_path
from authgate.state.redis_driver import RedisStateDriver


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the driver."""

    def __init__(self):
        self.data: dict[str, bytes] = {}
        self.closed = False

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, nx=False):
        if nx and key in self.data:
            return None
        self.data[key] = value
        return True

    async def delete(self, key):
        return 1 if self.data.pop(key, None) is not None else 0

    async def mget(self, keys):
        return [self.data.get(key) for key in keys]

    async def scan_iter(self, match=None):
        for key in list(self.data):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key

    async def aclose(self):
        self.closed = True


def test_get_path_builds_hierarchical_keys():
    assert get_path("/authgate", "local_users") == "/authgate/local_users"
    assert get_path("/authgate", "local_users", "alice") == "/authgate/local_users/alice"
    assert get_path("/authgate/", "principals", "p1") == "/authgate/principals/p1"


# ============================================================================
# In-memory driver
# ============================================================================


@pytest.mark.asyncio
async def test_memory_read_missing_key_raises_not_found():
    driver = InMemoryStateDriver()

    with pytest.raises(NotFound) as exc_info:
        await driver.read("/authgate/principals/missing")

    assert exc_info.value.key == "/authgate/principals/missing"


@pytest.mark.asyncio
async def test_memory_write_then_clear():
    driver = InMemoryStateDriver()

    await driver.write("/authgate/principals/p1", b"one")
    assert await driver.read("/authgate/principals/p1") == b"one"

    await driver.clear("/authgate/principals/p1")
    with pytest.raises(NotFound):
        await driver.read("/authgate/principals/p1")
    with pytest.raises(NotFound):
        await driver.clear("/authgate/principals/p1")

    assert driver.write_count == 1
    assert driver.clear_count == 1


@pytest.mark.asyncio
async def test_memory_write_if_absent_never_overwrites():
    driver = InMemoryStateDriver()

    assert await driver.write_if_absent("/authgate/local_users/alice", b"first") is True
    assert await driver.write_if_absent("/authgate/local_users/alice", b"second") is False

    assert await driver.read("/authgate/local_users/alice") == b"first"
    assert driver.write_count == 1


@pytest.mark.asyncio
async def test_memory_read_all_is_scoped_to_the_namespace():
    driver = InMemoryStateDriver()
    await driver.write("/authgate/local_users/bob", b"bob")
    await driver.write("/authgate/local_users/alice", b"alice")
    await driver.write("/authgate/local_users_archive/carol", b"carol")
    await driver.write("/authgate/principals/p1", b"p1")

    values = await driver.read_all("/authgate/local_users")

    assert values == [b"alice", b"bob"]


@pytest.mark.asyncio
async def test_memory_read_all_on_empty_namespace_raises_not_found():
    driver = InMemoryStateDriver()

    with pytest.raises(NotFound):
        await driver.read_all("/authgate/ldap_mappings")


@pytest.mark.asyncio
async def test_memory_driver_counts_operations():
    driver = InMemoryStateDriver()
    await driver.write("/k/a", b"a")
    await driver.read("/k/a")
    await driver.clear("/k/a")

    assert metrics.get_counter("state.write") == 1
    assert metrics.get_counter("state.read") == 1
    assert metrics.get_counter("state.clear") == 1


# ============================================================================
# Redis driver
# ============================================================================


@pytest.mark.asyncio
async def test_redis_read_write_clear():
    client = FakeRedis()
    driver = RedisStateDriver("redis://localhost:6379/0", client=client)

    await driver.write("/authgate/principals/p1", b"one")
    assert await driver.read("/authgate/principals/p1") == b"one"

    await driver.clear("/authgate/principals/p1")
    with pytest.raises(NotFound):
        await driver.read("/authgate/principals/p1")
    with pytest.raises(NotFound):
        await driver.clear("/authgate/principals/p1")


@pytest.mark.asyncio
async def test_redis_write_if_absent_uses_set_nx():
    client = FakeRedis()
    driver = RedisStateDriver("redis://localhost:6379/0", client=client)

    assert await driver.write_if_absent("/authgate/local_users/alice", b"first") is True
    assert await driver.write_if_absent("/authgate/local_users/alice", b"second") is False
    assert client.data["/authgate/local_users/alice"] == b"first"


@pytest.mark.asyncio
async def test_redis_read_all_scans_prefix():
    client = FakeRedis()
    driver = RedisStateDriver("redis://localhost:6379/0", client=client)
    await driver.write("/authgate/ldap_mappings/ops-team", b"ops-team")
    await driver.write("/authgate/ldap_mappings/eng", b"eng")
    await driver.write("/authgate/principals/p1", b"p1")

    assert await driver.read_all("/authgate/ldap_mappings") == [b"eng", b"ops-team"]

    with pytest.raises(NotFound):
        await driver.read_all("/authgate/local_users")


@pytest.mark.asyncio
async def test_redis_errors_become_state_driver_errors():
    client = FakeRedis()
    client.get = AsyncMock(side_effect=RedisConnectionError("connection refused"))
    client.set = AsyncMock(side_effect=RedisConnectionError("connection refused"))
    driver = RedisStateDriver("redis://localhost:6379/0", client=client)

    with pytest.raises(StateDriverError) as exc_info:
        await driver.read("/authgate/principals/p1")
    assert exc_info.value.operation == "read"

    with pytest.raises(StateDriverError):
        await driver.write_if_absent("/authgate/principals/p1", b"one")


@pytest.mark.asyncio
async def test_redis_close_releases_client():
    client = FakeRedis()
    driver = RedisStateDriver("redis://localhost:6379/0", client=client)

    await driver.close()

    assert client.closed is True


# ============================================================================
# Driver selection
# ============================================================================


def test_create_state_driver_defaults_to_memory():
    config = Settings(_env_file=None, state_backend=StateBackend.MEMORY)

    assert isinstance(create_state_driver(config), InMemoryStateDriver)


def test_create_state_driver_builds_redis_driver():
    config = Settings(
        _env_file=None,
        state_backend=StateBackend.REDIS,
        redis_url="redis://localhost:6379/0",
    )

    assert isinstance(create_state_driver(config), RedisStateDriver)
