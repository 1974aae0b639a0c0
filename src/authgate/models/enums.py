"""AuthGate enumerations."""

from enum import Enum

from authgate.errors import InvalidArgument


class RoleType(str, Enum):
    """Role bound to a principal."""

    ADMIN = "admin"  # can perform any operation
    OPS = "ops"  # restricted to network operations on assigned tenants

    @classmethod
    def parse(cls, value: str) -> "RoleType":
        """Map a human-supplied role string to a role, or raise InvalidArgument."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidArgument(f"Invalid role {value!r}") from None

    @classmethod
    def highest(cls, roles: "list[RoleType]") -> "RoleType | None":
        """Return the most privileged role of roles, or None if empty."""
        if not roles:
            return None
        return min(roles, key=_ROLE_ORDER.index)


_ROLE_ORDER = [RoleType.ADMIN, RoleType.OPS]
