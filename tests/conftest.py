"""
Pytest fixtures for AuthGate tests.
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Ensure test config is set before importing authgate modules.
os.environ.setdefault("AUTHGATE_ENV", "development")
os.environ.setdefault("AUTHGATE_STATE_BACKEND", "memory")
os.environ.setdefault("AUTHGATE_BCRYPT_ROUNDS", "4")

from authgate.auth.token import TokenManager
from authgate.engine.core import IdentityEngine
from authgate.errors import StateDriverError
from authgate.observability.metrics import metrics
from authgate.state.memory import InMemoryStateDriver

pytest_plugins = ("pytest_asyncio",)

STATE_ROOT = "/authgate"
TEST_SECRET = "test-secret"
ADMIN_PASSWORD = "admin-pass"
OPS_PASSWORD = "ops-pass"


class FailingStateDriver(InMemoryStateDriver):
    """In-memory driver that raises StateDriverError for chosen operations and key prefixes."""

    def __init__(self):
        super().__init__()
        self.failures: list[tuple[str, str]] = []

    def fail(self, operation: str, prefix: str) -> None:
        """Make every `operation` ("read", "write", "clear") on keys under prefix fail."""
        self.failures.append((operation, prefix))

    def heal(self) -> None:
        self.failures.clear()

    def _check(self, operation: str, key: str) -> None:
        for failing_operation, prefix in self.failures:
            if failing_operation == operation and key.startswith(prefix):
                raise StateDriverError(operation, key, "injected failure")

    async def read(self, key: str) -> bytes:
        self._check("read", key)
        return await super().read(key)

    async def write(self, key: str, value: bytes) -> None:
        self._check("write", key)
        await super().write(key, value)

    async def write_if_absent(self, key: str, value: bytes) -> bool:
        self._check("write", key)
        return await super().write_if_absent(key, value)

    async def clear(self, key: str) -> None:
        self._check("clear", key)
        await super().clear(key)

    async def read_all(self, prefix: str) -> list[bytes]:
        self._check("read", prefix)
        return await super().read_all(prefix)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Metrics are process wide; start every test from zero."""
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def driver():
    return InMemoryStateDriver()


@pytest.fixture
def engine(driver):
    """Identity engine over a fresh in-memory store."""
    return IdentityEngine(driver, STATE_ROOT, bcrypt_rounds=4)


@pytest.fixture
def failing_driver():
    return FailingStateDriver()


@pytest.fixture
def failing_engine(failing_driver):
    """Identity engine whose store can be told to fail."""
    return IdentityEngine(failing_driver, STATE_ROOT, bcrypt_rounds=4)


@pytest.fixture
def token_manager():
    return TokenManager(secret=TEST_SECRET, algorithm="HS256", ttl_seconds=3600)


@pytest.fixture
async def bootstrapped_engine(engine):
    """Engine with the built-in admin and ops users in place."""
    await engine.ensure_default_users(ADMIN_PASSWORD, OPS_PASSWORD)
    return engine


@pytest.fixture
async def client(bootstrapped_engine, token_manager):
    """Async test client over an app wired to the test engine."""
    from authgate.main import create_app

    app = create_app()
    app.state.engine = bootstrapped_engine
    app.state.token_manager = token_manager

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def admin_headers(bootstrapped_engine, token_manager):
    role_set = await bootstrapped_engine.authenticate_local_user("admin", ADMIN_PASSWORD)
    return {"X-Auth-Token": token_manager.issue_for(role_set)}


@pytest.fixture
async def ops_headers(bootstrapped_engine, token_manager):
    role_set = await bootstrapped_engine.authenticate_local_user("ops", OPS_PASSWORD)
    return {"X-Auth-Token": token_manager.issue_for(role_set)}
