"""Key-value repositories for AuthGate records."""

import logging
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError

from authgate.engine.compensation import paired_write
from authgate.errors import AlreadyExists, InternalError, NotFound, StateDriverError
from authgate.models import Principal
from authgate.state.base import StateDriver, get_path

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class Repository(Generic[RecordT]):
    """
    JSON records of one model type under one namespace of the state root.

    Translates driver failures and undecodable records into InternalError;
    NotFound passes through untouched.
    """

    namespace: str
    model: type[RecordT]
    entity: str

    def __init__(self, driver: StateDriver, root: str):
        self.driver = driver
        self.root = root

    def key(self, name: str | None = None) -> str:
        return get_path(self.root, self.namespace, name)

    def _encode(self, record: RecordT) -> bytes:
        return record.model_dump_json().encode("utf-8")

    def _decode(self, raw: bytes, name: str) -> RecordT:
        try:
            return self.model.model_validate_json(raw)
        except ValidationError as exc:
            logger.error(f"Failed to decode {self.entity} {name!r}: {exc}")
            raise InternalError(f"Failed to read {self.entity} {name!r}") from exc

    async def _load(self, name: str) -> RecordT:
        try:
            raw = await self.driver.read(self.key(name))
        except StateDriverError as exc:
            logger.error(f"Failed to read {self.entity} {name!r} from store: {exc}")
            raise InternalError(f"Failed to read {self.entity} {name!r}") from exc
        return self._decode(raw, name)

    async def _exists(self, name: str) -> bool:
        try:
            await self._load(name)
        except NotFound:
            return False
        return True

    async def _load_all(self) -> list[RecordT]:
        try:
            raw_records = await self.driver.read_all(self.key())
        except NotFound:
            # An empty namespace is reported as missing by the store
            return []
        except StateDriverError as exc:
            logger.debug(f"Couldn't fetch {self.entity} records: {exc}")
            raise InternalError(f"Couldn't fetch {self.entity} records from data store") from exc
        return [self._decode(raw, self.namespace) for raw in raw_records]

    async def _store_new(self, name: str, record: RecordT) -> None:
        """Create the record; AlreadyExists if another writer holds the key."""
        try:
            created = await self.driver.write_if_absent(self.key(name), self._encode(record))
        except StateDriverError as exc:
            raise InternalError(f"Failed to write {self.entity} {name!r}") from exc
        if not created:
            raise AlreadyExists(self.key(name))

    async def _remove(self, name: str) -> None:
        try:
            await self.driver.clear(self.key(name))
        except StateDriverError as exc:
            raise InternalError(f"Failed to clear {self.entity} {name!r}") from exc


class PrincipalBackedStore(Repository[RecordT]):
    """
    Records that each own exactly one principal.

    Creating or deleting a record touches two keys (principal + record); both
    go through paired_write so a failed second step undoes the first.
    """

    def __init__(self, driver: StateDriver, root: str, principals):
        super().__init__(driver, root)
        self.principals = principals

    async def _principal_of(self, name: str, principal_id: str) -> Principal:
        try:
            return await self.principals.get(principal_id)
        except NotFound as exc:
            logger.error(f"{self.entity} {name!r} references missing principal {principal_id}")
            raise InternalError(f"Inconsistent {self.entity} {name!r}") from exc

    async def _load_all_with_principals(self) -> list[tuple[RecordT, Principal]]:
        records = await self._load_all()
        if not records:
            return []

        by_id = {principal.id: principal for principal in await self.principals.get_all()}
        pairs = []
        for record in records:
            principal = by_id.get(record.principal_id)
            if principal is None:
                logger.error(
                    f"Skipping {self.entity} record referencing missing principal "
                    f"{record.principal_id}"
                )
                continue
            pairs.append((record, principal))
        return pairs

    async def _insert(self, name: str, record: RecordT, principal: Principal) -> None:
        """Create principal, then record; remove the principal if the record write fails."""
        await paired_write(
            forward=lambda: self.principals.create(principal),
            dependent=lambda: self._store_new(name, record),
            undo_forward=lambda: self.principals.delete(principal.id),
            description=f"remove principal {principal.id} of {self.entity} {name!r}",
            failure_message=f"Failed to write {self.entity} {name!r} to data store",
        )
        logger.info(f"Added {self.entity} {name!r} (principal {principal.id})")

    async def _delete(self, name: str) -> None:
        """Delete principal, then record; recreate the principal if the record delete fails."""
        record = await self._load(name)
        principal = await self._principal_of(name, record.principal_id)

        try:
            await paired_write(
                forward=lambda: self.principals.delete(principal.id),
                dependent=lambda: self._remove(name),
                undo_forward=lambda: self.principals.create(principal),
                description=f"restore principal {principal.id} of {self.entity} {name!r}",
                failure_message=f"Failed to delete {self.entity} {name!r} from store",
            )
        except NotFound as exc:
            # The principal vanished between our read and its delete
            raise InternalError(f"Failed to delete {self.entity} {name!r} from store") from exc
        logger.info(f"Deleted {self.entity} {name!r} (principal {principal.id})")

    async def _replace(self, name: str, record: RecordT, principal: Principal) -> None:
        """
        Replace a record as delete followed by add.

        Not atomic: a concurrent update of the same key can be lost, and a
        failed add after a successful delete leaves the record absent.
        """
        try:
            await self._delete(name)
        except InternalError as exc:
            # this should never be leaked to the caller
            logger.debug(f"Failed to delete {self.entity} {name!r} as part of update: {exc!r}")
            raise InternalError(f"Couldn't update {self.entity} information: {name!r}") from exc

        try:
            await self._insert(name, record, principal)
        except InternalError as exc:
            logger.error(f"{self.entity} {name!r} was removed but could not be re-added: {exc!r}")
            raise InternalError(f"Couldn't update {self.entity} information: {name!r}") from exc
