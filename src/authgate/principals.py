"""Canonical identity names and claim-key helpers."""

ADMIN_USERNAME = "admin"
OPS_USERNAME = "ops"
BUILTIN_USERNAMES = (ADMIN_USERNAME, OPS_USERNAME)

TENANT_CLAIM_PREFIX = "tenant:"
GLOBAL_CLAIM_KEY = ""


def is_builtin(username: str) -> bool:
    """Return True if username is one of the reserved built-in local users."""
    return username in BUILTIN_USERNAMES


def tenant_claim_key(tenant_name: str) -> str:
    """Return the claim key scoping a claim to tenant_name."""
    return f"{TENANT_CLAIM_PREFIX}{tenant_name}"


def is_tenant_claim_key(claim_key: str) -> bool:
    """Return True if claim_key is tenant scoped rather than global."""
    return claim_key.startswith(TENANT_CLAIM_PREFIX)


def tenant_from_claim_key(claim_key: str) -> str:
    """
    Strip the tenant prefix from a claim key.

    Global claims carry no prefix and map to an empty tenant name.
    """
    if is_tenant_claim_key(claim_key):
        return claim_key[len(TENANT_CLAIM_PREFIX):]
    return GLOBAL_CLAIM_KEY
