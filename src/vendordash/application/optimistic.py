"""Optimistic update discipline shared by every immediate write.

1. Apply the change locally so the view reflects it at once.
2. Await the store write.
3. On a store failure restore the exact prior value and log; no retry.
4. On success keep the local value as authoritative (no re-fetch).

Validation failures in step 1 never reach the store: they are logged
and reported as REJECTED, with nothing to roll back.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from vendordash.domain.exceptions import StoreError, ValidationError

logger = logging.getLogger(__name__)


class MutationOutcome(Enum):
    APPLIED = "APPLIED"
    REJECTED = "REJECTED"
    ROLLED_BACK = "ROLLED_BACK"


async def apply_optimistically(
    apply: Callable[[], None],
    rollback: Callable[[], None],
    commit: Callable[[], Awaitable[object]],
    *,
    description: str,
) -> MutationOutcome:
    """Run *apply*, then *commit*; undo with *rollback* if the commit fails.

    *commit* is called only after *apply* succeeded, so it can read the
    freshly applied local state.
    """
    try:
        apply()
    except ValidationError as exc:
        logger.info("rejected %s: %s", description, exc)
        return MutationOutcome.REJECTED

    try:
        await commit()
    except StoreError as exc:
        rollback()
        logger.warning("rolled back %s: %s", description, exc)
        return MutationOutcome.ROLLED_BACK

    logger.debug("committed %s", description)
    return MutationOutcome.APPLIED
