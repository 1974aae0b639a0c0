"""State access port: single-key operations against a key-value store."""

import logging
from abc import ABC, abstractmethod

from authgate.config import Settings, StateBackend
from authgate.errors import NotFound

logger = logging.getLogger(__name__)

# Namespaces under the configured state root
PRINCIPALS = "principals"
LOCAL_USERS = "local_users"
LDAP_MAPPINGS = "ldap_mappings"


def get_path(root: str, namespace: str, name: str | None = None) -> str:
    """
    Build a hierarchical key.

    get_path("/authgate", "local_users") -> "/authgate/local_users"
    get_path("/authgate", "local_users", "alice") -> "/authgate/local_users/alice"
    """
    parts = [root.rstrip("/"), namespace]
    if name is not None:
        parts.append(name)
    return "/".join(parts)


class StateDriver(ABC):
    """
    Abstract base class for state drivers.

    Each operation touches exactly one key (read_all touches one prefix) and
    is atomic on its own. Nothing here spans more than one key.
    """

    @abstractmethod
    async def read(self, key: str) -> bytes:
        """
        Read the value stored at key.

        Raises:
            NotFound: key is absent
            StateDriverError: the store could not be reached
        """

    @abstractmethod
    async def write(self, key: str, value: bytes) -> None:
        """Write value at key, overwriting any previous value."""

    @abstractmethod
    async def clear(self, key: str) -> None:
        """
        Remove key.

        Raises:
            NotFound: key is absent
        """

    @abstractmethod
    async def read_all(self, prefix: str) -> list[bytes]:
        """
        Read every value stored directly or indirectly under prefix.

        Raises:
            NotFound: nothing lives under prefix. Hierarchical stores drop a
                directory once its last child is removed, so an empty
                namespace is reported the same way as a missing one.
        """

    async def write_if_absent(self, key: str, value: bytes) -> bool:
        """
        Write value at key only if key is absent.

        Returns True if the value was written. The default implementation is
        a read followed by a write and is NOT atomic; drivers whose store
        offers create-if-absent override it.
        """
        try:
            await self.read(key)
        except NotFound:
            await self.write(key, value)
            return True
        return False

    async def close(self) -> None:
        """Release store connections."""


def create_state_driver(settings: Settings) -> StateDriver:
    """Construct the state driver selected by configuration."""
    if settings.state_backend == StateBackend.REDIS:
        from authgate.state.redis_driver import RedisStateDriver

        return RedisStateDriver(settings.redis_url)

    from authgate.state.memory import InMemoryStateDriver

    logger.info("Using in-memory state driver (dev only)")
    return InMemoryStateDriver()
