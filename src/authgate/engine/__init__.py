"""AuthGate engine - identity stores and their consistency rules."""

from authgate.engine.compensation import compensate, paired_write
from authgate.engine.core import IdentityEngine
from authgate.engine.ldap_mappings import LdapMappingStore
from authgate.engine.local_users import LocalUserStore
from authgate.engine.principals import PrincipalStore

__all__ = [
    "IdentityEngine",
    "LdapMappingStore",
    "LocalUserStore",
    "PrincipalStore",
    "compensate",
    "paired_write",
]
