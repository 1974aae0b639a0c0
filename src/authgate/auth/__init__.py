"""AuthGate authentication module."""

from authgate.auth.context import ActiveRoleSet
from authgate.auth.passwords import hash_password, verify_password
from authgate.auth.token import TokenManager

__all__ = [
    "ActiveRoleSet",
    "TokenManager",
    "hash_password",
    "verify_password",
]
