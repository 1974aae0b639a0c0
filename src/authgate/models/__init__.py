"""AuthGate data models."""

from authgate.models.enums import RoleType
from authgate.models.principal import Principal, new_principal_id
from authgate.models.local_user import (
    LocalUser,
    LocalUserCreate,
    LocalUserInfo,
    LocalUserUpdate,
)
from authgate.models.ldap_mapping import (
    LdapMappingCreate,
    LdapMappingInfo,
    LdapMappingUpdate,
    LdapRoleMapping,
)
from authgate.models.authorization import (
    Authorization,
    AuthorizationView,
    to_authorization_view,
)

__all__ = [
    "Authorization",
    "AuthorizationView",
    "LdapMappingCreate",
    "LdapMappingInfo",
    "LdapMappingUpdate",
    "LdapRoleMapping",
    "LocalUser",
    "LocalUserCreate",
    "LocalUserInfo",
    "LocalUserUpdate",
    "Principal",
    "RoleType",
    "new_principal_id",
    "to_authorization_view",
]
