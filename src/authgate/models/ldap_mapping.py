"""LDAP group to role mapping models."""

from typing import Optional

from pydantic import BaseModel

from authgate.models.enums import RoleType


class LdapRoleMapping(BaseModel):
    """Persisted mapping; members of group_name receive the principal's role."""

    group_name: str
    principal_id: str


class LdapMappingCreate(BaseModel):
    """Input for adding a group mapping."""

    group_name: str
    role: str


class LdapMappingUpdate(BaseModel):
    """Partial update of a group mapping; an absent role means no change."""

    role: Optional[str] = None


class LdapMappingInfo(BaseModel):
    """Public view of a group mapping."""

    group_name: str
    role: RoleType
