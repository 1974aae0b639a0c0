"""
Forward/compensate write pairs over a single-key store.

A local user or LDAP mapping and its principal are two keys that form one
logical entity. The store can only change one key atomically, so every
create or delete is a pair of writes: a forward step on the principal, then
a dependent step on the owning record. If the dependent step fails, the
forward step is undone exactly once. A failed undo leaves an orphan behind;
it is logged and counted, never raised, and never retried.
"""

import logging
from typing import Awaitable, Callable

from authgate.errors import AlreadyExists, InternalError
from authgate.observability.metrics import metrics

logger = logging.getLogger(__name__)

Step = Callable[[], Awaitable[None]]


async def compensate(undo: Step, description: str) -> bool:
    """
    Run undo once. Returns True on success.

    Failures are reported through the log and the compensation.failed
    counter only.
    """
    metrics.inc_counter("compensation.attempted")
    try:
        await undo()
    except Exception as exc:
        metrics.inc_counter("compensation.failed")
        logger.error(
            f"Compensation failed ({description}); state store is now inconsistent: {exc!r}"
        )
        return False

    metrics.inc_counter("compensation.succeeded")
    logger.warning(f"Compensation applied ({description})")
    return True


async def paired_write(
    forward: Step,
    dependent: Step,
    undo_forward: Step,
    description: str,
    failure_message: str,
) -> None:
    """
    Run forward, then dependent; undo forward if dependent fails.

    Errors from forward propagate untouched (nothing to undo). Errors from
    dependent are surfaced after compensation: AlreadyExists as-is (a racing
    writer won the key), anything else as InternalError(failure_message)
    with the cause chained and logged.
    """
    await forward()

    try:
        await dependent()
    except AlreadyExists:
        await compensate(undo_forward, description)
        raise
    except Exception as exc:
        logger.error(f"{failure_message}: {exc!r}")
        await compensate(undo_forward, description)
        raise InternalError(failure_message) from exc
