"""Principal store."""

import logging

from authgate.engine.repository import Repository
from authgate.errors import AlreadyExists, NotFound
from authgate.models import Principal
from authgate.state.base import PRINCIPALS

logger = logging.getLogger(__name__)


class PrincipalStore(Repository[Principal]):
    """
    CRUD over principals keyed by principal id.

    Principals are only created or destroyed as a side effect of adding or
    deleting the local user or LDAP mapping that owns them.
    """

    namespace = PRINCIPALS
    model = Principal
    entity = "principal"

    async def get(self, principal_id: str) -> Principal:
        return await self._load(principal_id)

    async def get_all(self) -> list[Principal]:
        return await self._load_all()

    async def create(self, principal: Principal) -> None:
        """
        Write a new principal.

        Raises:
            AlreadyExists: a principal with this id is stored already
        """
        try:
            await self._load(principal.id)
        except NotFound:
            await self._store_new(principal.id, principal)
            logger.debug(f"Created principal {principal.id} ({principal.role.value})")
            return

        raise AlreadyExists(self.key(principal.id))

    async def delete(self, principal_id: str) -> None:
        """
        Remove a principal.

        Raises:
            NotFound: no principal with this id exists
        """
        await self._remove(principal_id)
        logger.debug(f"Deleted principal {principal_id}")
