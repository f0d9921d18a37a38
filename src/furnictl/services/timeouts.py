"""Stop-waiting timeout for calls to the hosted backend.

:func:`with_timeout` races an awaitable against a timer.  When the timer
wins, the caller gets :class:`RequestTimeoutError` but the underlying
operation is *not* cancelled: it keeps running in the background and its
eventual outcome is discarded.  Retries belong to the caller.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

import structlog

log = structlog.get_logger("furnictl.timeouts")

DEFAULT_TIMEOUT_MS = 10000

_T = TypeVar("_T")


class RequestTimeoutError(TimeoutError):
    """The awaited operation did not settle within the allotted time."""

    def __init__(self, timeout_ms: float) -> None:
        super().__init__("Request timeout")
        self.timeout_ms = timeout_ms


def _discard_outcome(task: asyncio.Future[object]) -> None:
    # Retrieve the exception so asyncio does not warn about it never being read.
    if not task.cancelled():
        task.exception()


async def with_timeout(
    awaitable: Awaitable[_T],
    timeout_ms: float = DEFAULT_TIMEOUT_MS,
) -> _T:
    """Await *awaitable*, giving up after *timeout_ms* milliseconds.

    Returns the awaitable's result or re-raises its exception if it settles
    first.

    Raises:
        RequestTimeoutError: If the timer fires first.
    """
    task = asyncio.ensure_future(awaitable)
    try:
        return await asyncio.wait_for(asyncio.shield(task), timeout=timeout_ms / 1000)
    except TimeoutError:
        if task.done():
            # The operation itself raised TimeoutError.
            raise
        task.add_done_callback(_discard_outcome)
        log.warning("request.timeout", timeout_ms=timeout_ms)
        raise RequestTimeoutError(timeout_ms) from None
