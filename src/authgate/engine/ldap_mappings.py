"""LDAP group to role mapping store."""

from authgate.engine.repository import PrincipalBackedStore
from authgate.errors import AlreadyExists, InvalidArgument
from authgate.models import (
    LdapMappingCreate,
    LdapMappingInfo,
    LdapMappingUpdate,
    LdapRoleMapping,
    Principal,
    RoleType,
)
from authgate.state.base import LDAP_MAPPINGS


def _info(mapping: LdapRoleMapping, principal: Principal) -> LdapMappingInfo:
    return LdapMappingInfo(group_name=mapping.group_name, role=principal.role)


class LdapMappingStore(PrincipalBackedStore[LdapRoleMapping]):
    """
    Group mappings keyed by group name (usually the group's DN).

    There is always a one-to-one mapping between a group and its principal.
    """

    namespace = LDAP_MAPPINGS
    model = LdapRoleMapping
    entity = "LDAP mapping"

    async def get(self, group_name: str) -> LdapMappingInfo:
        mapping = await self._load(group_name)
        principal = await self._principal_of(group_name, mapping.principal_id)
        return _info(mapping, principal)

    async def get_principal(self, group_name: str) -> Principal:
        """Return the principal members of group_name receive."""
        mapping = await self._load(group_name)
        return await self._principal_of(group_name, mapping.principal_id)

    async def get_all(self) -> list[LdapMappingInfo]:
        return [_info(mapping, principal) for mapping, principal in await self._load_all_with_principals()]

    async def add(self, mapping: LdapMappingCreate) -> LdapMappingInfo:
        """
        Add a group mapping and its principal.

        Raises:
            InvalidArgument: empty group name or unknown role
            AlreadyExists: the group is mapped already
            InternalError: the store failed; any principal written is removed
        """
        if not mapping.group_name:
            raise InvalidArgument("Empty group name")
        role = RoleType.parse(mapping.role)

        if await self._exists(mapping.group_name):
            raise AlreadyExists(self.key(mapping.group_name))

        principal = Principal(role=role)
        record = LdapRoleMapping(group_name=mapping.group_name, principal_id=principal.id)
        await self._insert(mapping.group_name, record, principal)
        return _info(record, principal)

    async def delete(self, group_name: str) -> None:
        """
        Delete a group mapping and its principal.

        Raises:
            NotFound: the group is not mapped
            InternalError: the store failed
        """
        await self._delete(group_name)

    async def update(self, group_name: str, changes: LdapMappingUpdate) -> LdapMappingInfo:
        """
        Change the role a group maps to.

        An unset or unchanged role returns the current view without writing.
        """
        current = await self._load(group_name)
        principal = await self._principal_of(group_name, current.principal_id)

        role = RoleType.parse(changes.role) if changes.role else principal.role
        if role == principal.role:
            return _info(current, principal)

        updated_principal = Principal(id=principal.id, role=role)
        updated = LdapRoleMapping(group_name=group_name, principal_id=principal.id)
        await self._replace(group_name, updated, updated_principal)
        return _info(updated, updated_principal)
