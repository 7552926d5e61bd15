"""
In-flight request guard.

Identification and deck suggestion take seconds to complete. A screen runs
at most one of each at a time; a second request from the same user while
the first is pending is rejected rather than queued.

The guard lives in process memory and assumes a single event loop.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dexkeep.models.failure import RequestInProgressError

logger = logging.getLogger(__name__)


class InFlightGuard:
    """Tracks which (operation, caller) pairs have a request pending."""

    def __init__(self) -> None:
        self._pending: set[tuple[str, str]] = set()

    def is_pending(self, operation: str, caller_id: str) -> bool:
        return (operation, caller_id) in self._pending

    @asynccontextmanager
    async def hold(self, operation: str, caller_id: str) -> AsyncIterator[None]:
        """
        Hold the slot for one request.

        Raises:
            RequestInProgressError: If the caller already has this operation pending
        """
        key = (operation, caller_id)
        if key in self._pending:
            logger.warning("Rejected overlapping %s request for %s", operation, caller_id)
            raise RequestInProgressError(operation)

        self._pending.add(key)
        try:
            yield
        finally:
            # Released on cancellation too
            self._pending.discard(key)


_guard: InFlightGuard | None = None


def get_in_flight_guard() -> InFlightGuard:
    """Get the process-wide guard."""
    global _guard
    if _guard is None:
        _guard = InFlightGuard()
    return _guard


def reset_in_flight_guard() -> None:
    """Reset the guard (for testing)."""
    global _guard
    _guard = None
