"""In-memory state driver."""

import asyncio

from authgate.errors import NotFound
from authgate.observability.metrics import metrics
from authgate.state.base import StateDriver


class InMemoryStateDriver(StateDriver):
    """
    Dict-backed state driver.

    Good for development, tests, and single-instance deployments.
    Not suitable for multi-instance production (no shared state).
    write_count and clear_count record every mutation for inspection.
    """

    def __init__(self):
        self._data: dict[str, bytes] = {}
        self._lock = asyncio.Lock()
        self.write_count = 0
        self.clear_count = 0

    async def read(self, key: str) -> bytes:
        metrics.inc_counter("state.read")
        async with self._lock:
            try:
                return self._data[key]
            except KeyError:
                raise NotFound(key) from None

    async def write(self, key: str, value: bytes) -> None:
        metrics.inc_counter("state.write")
        async with self._lock:
            self._data[key] = value
            self.write_count += 1

    async def write_if_absent(self, key: str, value: bytes) -> bool:
        metrics.inc_counter("state.write")
        async with self._lock:
            if key in self._data:
                return False
            self._data[key] = value
            self.write_count += 1
            return True

    async def clear(self, key: str) -> None:
        metrics.inc_counter("state.clear")
        async with self._lock:
            if key not in self._data:
                raise NotFound(key)
            del self._data[key]
            self.clear_count += 1

    async def read_all(self, prefix: str) -> list[bytes]:
        metrics.inc_counter("state.read")
        directory = prefix.rstrip("/") + "/"
        async with self._lock:
            keys = sorted(key for key in self._data if key.startswith(directory))
            if not keys:
                raise NotFound(prefix)
            return [self._data[key] for key in keys]

    def keys(self) -> list[str]:
        """Return all stored keys, sorted."""
        return sorted(self._data)
