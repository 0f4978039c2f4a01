"""Deadline budgets and non-cancelling races.

A DeadlineBudget is created once at the outermost boundary (tool dispatch)
and handed down; inner stages take child() budgets so the same logical
operation is never raced twice against independent clocks.

race_with_deadline() stops the caller from waiting but never cancels the
work itself: a late result or error is logged and discarded.
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Coroutine, Optional, Set, TypeVar

from src.utils.errors import DeadlineExceeded
from src.utils.logger import logger

T = TypeVar("T")

# Strong references to detached tasks; asyncio only keeps weak ones
_BACKGROUND_TASKS: Set[asyncio.Task] = set()


class DeadlineBudget:
    """Wall-clock allowance for an operation and everything it calls.

    Args:
        total_seconds: Allowance starting now.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(self, total_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.total_seconds = max(0.0, total_seconds)
        self._clock = clock
        self._started_at = clock()

    def elapsed(self) -> float:
        return self._clock() - self._started_at

    def remaining(self) -> float:
        return max(0.0, self.total_seconds - self.elapsed())

    def expired(self) -> bool:
        return self.remaining() <= 0

    def child(self, seconds: Optional[float] = None) -> "DeadlineBudget":
        """Budget for a sub-stage: the tighter of `seconds` and what remains here."""
        remaining = self.remaining()
        bound = remaining if seconds is None else min(seconds, remaining)
        return DeadlineBudget(bound, clock=self._clock)

    def __repr__(self) -> str:
        return f"DeadlineBudget(total={self.total_seconds:.1f}s, remaining={self.remaining():.1f}s)"


def _discard_late_result(operation_name: str) -> Callable[[asyncio.Task], None]:
    def _callback(task: asyncio.Task) -> None:
        _BACKGROUND_TASKS.discard(task)
        if task.cancelled():
            logger.debug(f"{operation_name}: abandoned work was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.debug(f"{operation_name}: abandoned work failed late: {exc}")
        else:
            logger.debug(f"{operation_name}: abandoned work finished late, result discarded")

    return _callback


async def race_with_deadline(awaitable: Awaitable[T], timeout: float, operation_name: str) -> T:
    """Wait for `awaitable` up to `timeout` seconds without cancelling it.

    Args:
        awaitable: Coroutine or future doing the work.
        timeout: Seconds the caller is willing to wait.
        operation_name: Description for logging.

    Returns:
        The work's result if it settles first.

    Raises:
        DeadlineExceeded: If the timer fires first. The work keeps running.
        Exception: Whatever the work raised, if it failed before the deadline.
    """
    task = asyncio.ensure_future(awaitable)
    if timeout <= 0:
        done = set()
    else:
        done, _ = await asyncio.wait({task}, timeout=timeout)

    if task in done:
        return task.result()

    _BACKGROUND_TASKS.add(task)
    task.add_done_callback(_discard_late_result(operation_name))
    logger.warning(f"⏱ {operation_name} exceeded {timeout:.1f}s deadline, continuing without it")
    raise DeadlineExceeded(operation_name, timeout)


def spawn_background(coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
    """Detach `coro` from the request path with its own error channel.

    Failures are logged, never re-raised; callers do not await the task.
    """
    task = asyncio.ensure_future(coro)
    _BACKGROUND_TASKS.add(task)

    def _report(done: asyncio.Task) -> None:
        _BACKGROUND_TASKS.discard(done)
        if done.cancelled():
            logger.warning(f"Background task cancelled: {name}")
            return
        exc = done.exception()
        if exc is not None:
            logger.error(f"Background task failed: {name}: {exc}")

    task.add_done_callback(_report)
    return task


def pending_background_tasks() -> Set[asyncio.Task]:
    """Snapshot of detached tasks still running (used on shutdown and in tests)."""
    return set(_BACKGROUND_TASKS)
