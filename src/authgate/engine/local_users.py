"""
Local user store.

Built-in users (admin, ops) are created at bootstrap and can only be read
afterwards: they cannot be updated, disabled, or deleted.
"""

from authgate.auth.passwords import hash_password
from authgate.engine.principals import PrincipalStore
from authgate.engine.repository import PrincipalBackedStore
from authgate.errors import AlreadyExists, IllegalOperation, InvalidArgument
from authgate.models import (
    LocalUser,
    LocalUserCreate,
    LocalUserInfo,
    LocalUserUpdate,
    Principal,
    RoleType,
)
from authgate.principals import is_builtin
from authgate.state.base import LOCAL_USERS, StateDriver


def _info(record: LocalUser, principal: Principal) -> LocalUserInfo:
    return LocalUserInfo(
        username=record.username,
        role=principal.role,
        disabled=record.disabled,
    )


class LocalUserStore(PrincipalBackedStore[LocalUser]):
    """Local users keyed by username, each owning one principal."""

    namespace = LOCAL_USERS
    model = LocalUser
    entity = "local user"

    def __init__(
        self,
        driver: StateDriver,
        root: str,
        principals: PrincipalStore,
        bcrypt_rounds: int = 12,
    ):
        super().__init__(driver, root, principals)
        self.bcrypt_rounds = bcrypt_rounds

    async def get_record(self, username: str) -> LocalUser:
        """Return the stored record, digest included. Never hand this to a caller."""
        return await self._load(username)

    async def get(self, username: str) -> LocalUserInfo:
        record = await self._load(username)
        principal = await self._principal_of(username, record.principal_id)
        return _info(record, principal)

    async def get_all(self) -> list[LocalUserInfo]:
        return [_info(record, principal) for record, principal in await self._load_all_with_principals()]

    async def add(self, user: LocalUserCreate) -> LocalUserInfo:
        """
        Add a local user and its principal.

        Raises:
            InvalidArgument: empty username/password, a "/" in the username,
                or unknown role
            IllegalOperation: username is reserved for a built-in user
            AlreadyExists: username is taken
            InternalError: the store failed; any principal written is removed
        """
        if is_builtin(user.username):
            raise IllegalOperation(f"Cannot add built-in user {user.username!r}")
        return await self._add(user)

    async def add_builtin(self, user: LocalUserCreate) -> LocalUserInfo:
        """Add one of the reserved users; only used by bootstrap."""
        if not is_builtin(user.username):
            raise InvalidArgument(f"{user.username!r} is not a built-in user")
        return await self._add(user)

    async def _add(self, user: LocalUserCreate) -> LocalUserInfo:
        if not user.username or not user.password:
            raise InvalidArgument("username/password is empty")
        if "/" in user.username:
            raise InvalidArgument("username must not contain '/'")
        role = RoleType.parse(user.role)

        if await self._exists(user.username):
            raise AlreadyExists(self.key(user.username))

        # raw password will never be stored in the store
        digest = hash_password(user.password, self.bcrypt_rounds)

        principal = Principal(role=role)
        record = LocalUser(
            username=user.username,
            password_digest=digest,
            disabled=user.disabled,
            principal_id=principal.id,
        )
        await self._insert(user.username, record, principal)
        return _info(record, principal)

    async def delete(self, username: str) -> None:
        """
        Delete a local user and its principal.

        Raises:
            IllegalOperation: username is a built-in user
            NotFound: no such user
            InternalError: the store failed
        """
        if is_builtin(username):
            raise IllegalOperation(f"Cannot delete built-in user {username!r}")
        await self._delete(username)

    async def update(self, username: str, changes: LocalUserUpdate) -> LocalUserInfo:
        """
        Update password, role, and/or disabled state.

        Unset fields keep their current value. When nothing differs the
        current view is returned without touching the store.

        Raises:
            IllegalOperation: username is a built-in user
            NotFound: no such user
            InvalidArgument: unknown role or unusable password
            InternalError: the store failed
        """
        if is_builtin(username):
            raise IllegalOperation(f"Cannot update built-in user {username!r}")

        current = await self._load(username)
        principal = await self._principal_of(username, current.principal_id)

        role = RoleType.parse(changes.role) if changes.role else principal.role
        disabled = current.disabled if changes.disabled is None else changes.disabled

        if role == principal.role and not changes.password and disabled == current.disabled:
            # nothing needs to be updated; save the data store round trips
            return _info(current, principal)

        digest = current.password_digest
        if changes.password:
            digest = hash_password(changes.password, self.bcrypt_rounds)

        updated_principal = Principal(id=principal.id, role=role)
        updated = LocalUser(
            username=username,
            password_digest=digest,
            disabled=disabled,
            principal_id=principal.id,
        )
        await self._replace(username, updated, updated_principal)
        return _info(updated, updated_principal)
