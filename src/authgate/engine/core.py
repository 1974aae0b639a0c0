"""AuthGate identity engine - stores, bootstrap, and login."""

import logging
import secrets
from typing import Iterable, NoReturn

from authgate.auth.context import ActiveRoleSet
from authgate.auth.passwords import hash_password, verify_password
from authgate.engine.ldap_mappings import LdapMappingStore
from authgate.engine.local_users import LocalUserStore
from authgate.engine.principals import PrincipalStore
from authgate.errors import (
    AlreadyExists,
    AuthenticationFailed,
    BadToken,
    InternalError,
    NotFound,
)
from authgate.models import LocalUserCreate, Principal, RoleType
from authgate.observability.metrics import metrics
from authgate.principals import ADMIN_USERNAME, OPS_USERNAME
from authgate.state.base import StateDriver

logger = logging.getLogger(__name__)


class IdentityEngine:
    """Composes the principal, local user, and LDAP mapping stores over one driver."""

    def __init__(self, driver: StateDriver, root: str = "/authgate", bcrypt_rounds: int = 12):
        self.driver = driver
        self.root = root
        self.principals = PrincipalStore(driver, root)
        self.local_users = LocalUserStore(driver, root, self.principals, bcrypt_rounds)
        self.ldap_mappings = LdapMappingStore(driver, root, self.principals)
        self.bcrypt_rounds = bcrypt_rounds
        self._dummy_digest: str | None = None

    async def ensure_default_users(self, admin_password: str, ops_password: str) -> list[str]:
        """
        Create the built-in admin and ops users unless they exist.

        Returns the usernames created by this call.
        """
        created = []
        defaults = [
            (ADMIN_USERNAME, admin_password, RoleType.ADMIN),
            (OPS_USERNAME, ops_password, RoleType.OPS),
        ]
        for username, password, role in defaults:
            try:
                await self.local_users.add_builtin(
                    LocalUserCreate(username=username, password=password, role=role.value)
                )
            except AlreadyExists:
                logger.debug(f"Built-in user {username!r} exists already")
                continue
            created.append(username)
            logger.info(f"Created built-in user {username!r}")
        return created

    async def authenticate_local_user(self, username: str, password: str) -> ActiveRoleSet:
        """
        Check a local user's password and return its active role set.

        Unknown users, wrong passwords, and disabled users all fail the same
        way so callers cannot tell them apart.
        """
        try:
            record = await self.local_users.get_record(username)
        except NotFound:
            # pay the same bcrypt cost as a known user
            verify_password(password, self._unknown_user_digest())
            self._login_failed(username, "no such user")

        if not verify_password(password, record.password_digest):
            self._login_failed(username, "wrong password")
        if record.disabled:
            self._login_failed(username, "user is disabled")

        try:
            principal = await self.principals.get(record.principal_id)
        except NotFound as exc:
            logger.error(f"Local user {username!r} references missing principal {record.principal_id}")
            raise InternalError(f"Inconsistent local user {username!r}") from exc
        return ActiveRoleSet(username=username, principals=(principal,), local=True)

    async def active_role_set_for_groups(
        self,
        username: str,
        groups: Iterable[str],
        tenants: dict[str, RoleType] | None = None,
    ) -> ActiveRoleSet:
        """
        Build the active role set of an LDAP user from the groups it belongs to.

        groups are the group names reported by the directory; unmapped groups
        are ignored. Raises AuthenticationFailed when none is mapped.
        """
        principals: list[Principal] = []
        for group in groups:
            try:
                principal = await self.ldap_mappings.get_principal(group)
            except NotFound:
                logger.debug(f"No role mapping for group {group!r}")
                continue
            if principal not in principals:
                principals.append(principal)

        if not principals:
            self._login_failed(username, "no mapped groups")

        return ActiveRoleSet(
            username=username,
            principals=tuple(principals),
            local=False,
            tenants=dict(tenants or {}),
        )

    async def ensure_active(self, role_set: ActiveRoleSet) -> None:
        """
        Principal check rejecting tokens no longer backed by the store.

        A local user's token is rejected once the user is disabled or deleted;
        any token is rejected once one of its principals is gone.
        """
        if role_set.local:
            try:
                record = await self.local_users.get_record(role_set.username)
            except NotFound:
                raise BadToken(f"User {role_set.username!r} no longer exists") from None
            if record.disabled:
                raise BadToken(f"User {role_set.username!r} is disabled")

        for principal in role_set.principals:
            try:
                await self.principals.get(principal.id)
            except NotFound:
                raise BadToken(f"Principal {principal.id} no longer exists") from None

    def _unknown_user_digest(self) -> str:
        """Digest of a random password, checked when the username is unknown."""
        if self._dummy_digest is None:
            self._dummy_digest = hash_password(secrets.token_hex(16), self.bcrypt_rounds)
        return self._dummy_digest

    def _login_failed(self, username: str, reason: str) -> NoReturn:
        metrics.inc_counter("logins.failed")
        logger.info(f"Login failed for {username!r}: {reason}")
        raise AuthenticationFailed()
