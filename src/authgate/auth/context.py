"""Active role set carried by a validated token."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from authgate.models import Authorization, Principal, RoleType
from authgate.principals import GLOBAL_CLAIM_KEY, tenant_claim_key

# Namespace for deterministic ids of tenant claims
_TENANT_CLAIM_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "authgate:tenant-claim")


@dataclass(frozen=True)
class ActiveRoleSet:
    """
    All principals a user acts with during a session.

    A local user carries exactly one principal; an LDAP user carries one per
    mapped group it belongs to. tenants maps tenant name to the role granted
    on that tenant.
    """

    username: str
    principals: tuple[Principal, ...]
    local: bool = False
    tenants: dict[str, RoleType] = field(default_factory=dict)
    expires_at: datetime | None = None

    @property
    def roles(self) -> list[RoleType]:
        return [principal.role for principal in self.principals]

    @property
    def role(self) -> RoleType | None:
        """Highest role among the principals."""
        return RoleType.highest(self.roles)

    @property
    def is_admin(self) -> bool:
        return self.role == RoleType.ADMIN

    def authorizations(self) -> list[Authorization]:
        """One global claim per principal, plus one claim per tenant."""
        claims = [
            Authorization(
                id=principal.id,
                principal_name=self.username,
                claim_key=GLOBAL_CLAIM_KEY,
                claim_value=principal.role.value,
                local=self.local,
            )
            for principal in self.principals
        ]
        for tenant, role in sorted(self.tenants.items()):
            claim_key = tenant_claim_key(tenant)
            claims.append(
                Authorization(
                    id=str(uuid.uuid5(_TENANT_CLAIM_NAMESPACE, f"{self.username}/{claim_key}")),
                    principal_name=self.username,
                    claim_key=claim_key,
                    claim_value=role.value,
                    local=self.local,
                )
            )
        return claims
