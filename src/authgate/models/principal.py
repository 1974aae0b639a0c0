"""Principal model - an identity bound to a role."""

from uuid import uuid4

from pydantic import BaseModel, Field

from authgate.models.enums import RoleType


def new_principal_id() -> str:
    """Generate a fresh opaque principal identifier."""
    return str(uuid4())


class Principal(BaseModel):
    """
    Represents one identity-role binding.

    A local user maps to exactly one principal. An LDAP group mapping also
    maps to exactly one principal, but since a user can belong to several
    groups, the set of principals for a session (the active role set) is
    only known once authentication has happened.
    """

    id: str = Field(default_factory=new_principal_id)
    role: RoleType

    def __hash__(self) -> int:
        return hash((self.id, self.role))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Principal):
            return False
        return self.id == other.id and self.role == other.role
