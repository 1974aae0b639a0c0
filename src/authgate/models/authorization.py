"""Authorization claim models."""

from pydantic import BaseModel

from authgate.principals import GLOBAL_CLAIM_KEY, tenant_from_claim_key


class Authorization(BaseModel):
    """
    Authorization claim derived from a principal.

    claim_key is empty for a global claim or ``tenant:<name>`` for a claim
    scoped to one tenant; claim_value is the role string.
    """

    id: str
    principal_name: str
    claim_key: str = GLOBAL_CLAIM_KEY
    claim_value: str
    local: bool = False


class AuthorizationView(BaseModel):
    """Display form of an authorization claim."""

    authz_id: str
    principal_name: str
    tenant_name: str
    role: str
    local: bool


def to_authorization_view(claim: Authorization) -> AuthorizationView:
    """Convert a stored claim into its display form."""
    return AuthorizationView(
        authz_id=claim.id,
        principal_name=claim.principal_name,
        tenant_name=tenant_from_claim_key(claim.claim_key),
        role=claim.claim_value,
        local=claim.local,
    )
