"""Bearer token issue and verification."""

import logging
from datetime import timedelta
from typing import Any, Awaitable, Callable, Iterable, Optional

from jose import JWTError, jwt
from pydantic import ValidationError

from authgate.auth.context import ActiveRoleSet
from authgate.errors import BadToken, InvalidArgument
from authgate.models import Principal, RoleType
from authgate.observability.metrics import metrics
from authgate.principals import (
    TENANT_CLAIM_PREFIX,
    is_tenant_claim_key,
    tenant_claim_key,
    tenant_from_claim_key,
)
from authgate.utils.time import from_epoch_seconds, to_epoch_seconds, utc_now

logger = logging.getLogger(__name__)

# Runs after a token decodes; raises BadToken to reject it
PrincipalCheck = Callable[[ActiveRoleSet], Awaitable[None]]

_REQUIRED_CLAIMS = ("sub", "principals", "exp")


class TokenManager:
    """Issues and validates signed JWTs carrying an active role set."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl_seconds: int = 3600,
        principal_checks: Optional[Iterable[PrincipalCheck]] = None,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl_seconds = ttl_seconds
        self.principal_checks: list[PrincipalCheck] = list(principal_checks or [])

    def add_principal_check(self, check: PrincipalCheck) -> None:
        self.principal_checks.append(check)

    def issue(
        self,
        username: str,
        principals: Iterable[Principal],
        local: bool = False,
        tenants: Optional[dict[str, RoleType]] = None,
    ) -> str:
        """
        Build a signed token for username.

        Claims:
            sub: username
            local: True for local users
            principals: [{id, role}] for every principal of the session
            role: highest role among the principals
            tenant:<name>: role granted on that tenant
            iat/exp: issue and expiry time in epoch seconds
        """
        principals = list(principals)
        if not username:
            raise InvalidArgument("Token subject is empty")
        if not principals:
            raise InvalidArgument("Token needs at least one principal")

        issued_at = utc_now()
        claims: dict[str, Any] = {
            "sub": username,
            "local": local,
            "principals": [
                {"id": principal.id, "role": principal.role.value} for principal in principals
            ],
            "role": RoleType.highest([principal.role for principal in principals]).value,
            "iat": to_epoch_seconds(issued_at),
            "exp": to_epoch_seconds(issued_at + timedelta(seconds=self.ttl_seconds)),
        }
        for tenant, role in (tenants or {}).items():
            claims[tenant_claim_key(tenant)] = role.value

        token = jwt.encode(claims, self.secret, algorithm=self.algorithm)
        metrics.inc_counter("tokens.issued")
        logger.debug(f"Issued token for {username!r} with {len(principals)} principal(s)")
        return token

    def issue_for(self, role_set: ActiveRoleSet) -> str:
        return self.issue(
            role_set.username,
            role_set.principals,
            local=role_set.local,
            tenants=role_set.tenants,
        )

    async def parse_token(self, token: str | None) -> ActiveRoleSet:
        """
        Validate token and return the active role set it carries.

        Raises:
            BadToken: empty, undecodable, wrongly signed, expired, or
                structurally incomplete token, or a principal check rejected it
        """
        try:
            role_set = self._decode(token)
            for check in self.principal_checks:
                await check(role_set)
        except BadToken as exc:
            metrics.inc_counter("tokens.rejected")
            logger.info(f"Rejected token: {exc.message}")
            raise
        return role_set

    def _decode(self, token: str | None) -> ActiveRoleSet:
        if not token:
            raise BadToken("Empty token")

        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as exc:
            raise BadToken(f"Invalid token: {exc}") from exc

        missing = [name for name in _REQUIRED_CLAIMS if name not in claims]
        if missing:
            raise BadToken(f"Token is missing claims: {', '.join(missing)}")

        username = claims["sub"]
        if not isinstance(username, str) or not username:
            raise BadToken("Token subject is empty")

        raw_principals = claims["principals"]
        if not isinstance(raw_principals, list) or not raw_principals:
            raise BadToken("Token carries no principals")
        try:
            principals = tuple(Principal.model_validate(item) for item in raw_principals)
        except ValidationError as exc:
            raise BadToken("Token carries a malformed principal") from exc

        tenants = {}
        for key, value in claims.items():
            if not is_tenant_claim_key(key):
                continue
            tenant = tenant_from_claim_key(key)
            if not tenant:
                raise BadToken(f"Token claim {TENANT_CLAIM_PREFIX!r} names no tenant")
            try:
                tenants[tenant] = RoleType.parse(value)
            except InvalidArgument as exc:
                raise BadToken(f"Token claim {key!r} has invalid role") from exc

        return ActiveRoleSet(
            username=username,
            principals=principals,
            local=bool(claims.get("local", False)),
            tenants=tenants,
            expires_at=from_epoch_seconds(claims["exp"]),
        )
