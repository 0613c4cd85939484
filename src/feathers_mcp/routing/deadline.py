"""
Deadline guard for asynchronous tool handlers.

A timeout abandons the operation, it does not cancel it: the handler keeps
running in the background and whatever it eventually produces is dropped.
Abandoned tasks are held in ``_ABANDONED`` until they finish so the event
loop does not garbage-collect them mid-flight, and their outcome is consumed
in a done-callback so nothing is reported as "never retrieved".
"""

import asyncio
from typing import Any, Awaitable, Callable, Set, TypeVar

from feathers_mcp.shared.config import DEFAULT_TIMEOUT_MS
from feathers_mcp.shared.observability import get_logger
from feathers_mcp.shared.observability.metrics import abandoned_handlers_total

from .errors import TimeoutFailure

logger = get_logger(__name__)

T = TypeVar("T")

_ABANDONED: Set["asyncio.Future[Any]"] = set()


def pending_abandoned() -> int:
    """Number of abandoned operations that are still running."""
    return len(_ABANDONED)


def _reap(task: "asyncio.Future[Any]") -> None:
    _ABANDONED.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        abandoned_handlers_total.labels(outcome="failed").inc()
        logger.debug("abandoned_operation_failed", error=repr(exc))
    else:
        abandoned_handlers_total.labels(outcome="completed").inc()
        logger.debug("abandoned_operation_completed")


def _abandon(task: "asyncio.Future[Any]") -> None:
    _ABANDONED.add(task)
    task.add_done_callback(_reap)


async def with_deadline(
    operation: Callable[[], Awaitable[T]], timeout_ms: int = DEFAULT_TIMEOUT_MS
) -> T:
    """
    Await ``operation()`` for at most ``timeout_ms`` milliseconds.

    Returns the operation's value or re-raises its exception if it settles
    first; raises ``TimeoutFailure`` if the timer fires first.
    """
    if timeout_ms is None or timeout_ms <= 0:
        raise ValueError(f"timeout_ms must be positive, got {timeout_ms}")

    task = asyncio.ensure_future(operation())
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)
    except asyncio.CancelledError:
        # The waiter went away; the operation is left to finish on its own
        _abandon(task)
        raise

    if task in done:
        if task.cancelled():
            # Cancelled from inside the operation; the waiter itself is still live
            raise RuntimeError("Operation was cancelled")
        return task.result()

    _abandon(task)
    logger.warning("operation_deadline_exceeded", timeout_ms=timeout_ms)
    raise TimeoutFailure(f"Operation timed out after {timeout_ms}ms")
