"""
Typed results for the HTTP layer.

Each helper runs one store operation and turns its outcome into a
(StatusCategory, payload) pair. NotFound carries no payload; caller errors
carry {"error": message}; anything unexpected is logged here and reported
with a generic message.
"""

import logging
from enum import Enum
from time import perf_counter
from typing import Any, Awaitable, Callable, Optional

from authgate.engine.core import IdentityEngine
from authgate.errors import (
    AlreadyExists,
    IllegalOperation,
    InvalidArgument,
    NotFound,
)
from authgate.models import (
    LdapMappingCreate,
    LdapMappingUpdate,
    LocalUserCreate,
    LocalUserUpdate,
)
from authgate.observability.metrics import metrics

logger = logging.getLogger("authgate.api")

GENERIC_ERROR = "Internal server error"


class StatusCategory(str, Enum):
    """Outcome category of an operation, independent of transport."""

    CREATED = "created"
    OK = "ok"
    NO_CONTENT = "no_content"
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    INTERNAL_ERROR = "internal_error"


Result = tuple[StatusCategory, Optional[Any]]


async def run_operation(
    operation: Callable[[], Awaitable[Any]],
    success: StatusCategory,
    description: str,
) -> Result:
    """Await operation and categorize its outcome."""
    start = perf_counter()
    try:
        payload = await operation()
    except NotFound:
        return StatusCategory.NOT_FOUND, None
    except (AlreadyExists, IllegalOperation, InvalidArgument) as exc:
        return StatusCategory.BAD_REQUEST, {"error": exc.message}
    except Exception as exc:
        logger.error(f"Failed to {description}: {exc!r}", exc_info=exc)
        return StatusCategory.INTERNAL_ERROR, {"error": GENERIC_ERROR}
    finally:
        metrics.observe("operation.duration_ms", (perf_counter() - start) * 1000)

    if success == StatusCategory.NO_CONTENT:
        return success, None
    return success, _dump(payload)


def _dump(payload: Any) -> Any:
    if isinstance(payload, list):
        return [_dump(item) for item in payload]
    if hasattr(payload, "model_dump"):
        return payload.model_dump(mode="json")
    return payload


# ============================================================================
# Local users
# ============================================================================


async def get_local_users(engine: IdentityEngine) -> Result:
    return await run_operation(engine.local_users.get_all, StatusCategory.OK, "list local users")


async def get_local_user(engine: IdentityEngine, username: str) -> Result:
    return await run_operation(
        lambda: engine.local_users.get(username),
        StatusCategory.OK,
        f"get local user {username!r}",
    )


async def add_local_user(engine: IdentityEngine, request: LocalUserCreate) -> Result:
    return await run_operation(
        lambda: engine.local_users.add(request),
        StatusCategory.CREATED,
        f"add local user {request.username!r}",
    )


async def update_local_user(
    engine: IdentityEngine, username: str, request: LocalUserUpdate
) -> Result:
    return await run_operation(
        lambda: engine.local_users.update(username, request),
        StatusCategory.OK,
        f"update local user {username!r}",
    )


async def delete_local_user(engine: IdentityEngine, username: str) -> Result:
    return await run_operation(
        lambda: engine.local_users.delete(username),
        StatusCategory.NO_CONTENT,
        f"delete local user {username!r}",
    )


# ============================================================================
# LDAP mappings
# ============================================================================


async def get_ldap_mappings(engine: IdentityEngine) -> Result:
    return await run_operation(
        engine.ldap_mappings.get_all, StatusCategory.OK, "list LDAP mappings"
    )


async def get_ldap_mapping(engine: IdentityEngine, group_name: str) -> Result:
    return await run_operation(
        lambda: engine.ldap_mappings.get(group_name),
        StatusCategory.OK,
        f"get LDAP mapping {group_name!r}",
    )


async def add_ldap_mapping(engine: IdentityEngine, request: LdapMappingCreate) -> Result:
    return await run_operation(
        lambda: engine.ldap_mappings.add(request),
        StatusCategory.CREATED,
        f"add LDAP mapping {request.group_name!r}",
    )


async def update_ldap_mapping(
    engine: IdentityEngine, group_name: str, request: LdapMappingUpdate
) -> Result:
    return await run_operation(
        lambda: engine.ldap_mappings.update(group_name, request),
        StatusCategory.OK,
        f"update LDAP mapping {group_name!r}",
    )


async def delete_ldap_mapping(engine: IdentityEngine, group_name: str) -> Result:
    return await run_operation(
        lambda: engine.ldap_mappings.delete(group_name),
        StatusCategory.NO_CONTENT,
        f"delete LDAP mapping {group_name!r}",
    )
