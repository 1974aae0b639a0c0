"""AuthGate state access layer."""

from authgate.state.base import (
    LDAP_MAPPINGS,
    LOCAL_USERS,
    PRINCIPALS,
    StateDriver,
    create_state_driver,
    get_path,
)
from authgate.state.memory import InMemoryStateDriver

__all__ = [
    "InMemoryStateDriver",
    "LDAP_MAPPINGS",
    "LOCAL_USERS",
    "PRINCIPALS",
    "StateDriver",
    "create_state_driver",
    "get_path",
]
