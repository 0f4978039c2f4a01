"""Error taxonomy and graceful-degradation helpers.

Every resolution pipeline recovers from these locally by dropping to its
next fallback tier. Only session-level concerns may surface to a user.
"""

from typing import Any, Awaitable, Callable, Optional

from src.utils.logger import logger


class RecipeAssistantError(Exception):
    """Base class for recoverable pipeline errors."""


class UpstreamTimeout(RecipeAssistantError):
    """An external call exceeded its allotted bound."""


class UpstreamUnavailable(RecipeAssistantError):
    """Non-2xx response, empty result set, or unparseable payload."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class GenerationFailure(RecipeAssistantError):
    """The LLM call raised or returned an unusable structure."""


class PersistenceConflict(RecipeAssistantError):
    """Duplicate-key error while saving a recipe record."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f"Recipe record already exists: {record_id}")
        self.record_id = record_id


class DeadlineExceeded(UpstreamTimeout):
    """A deadline budget ran out before the guarded work settled."""

    def __init__(self, operation_name: str, timeout: float) -> None:
        super().__init__(f"{operation_name} exceeded {timeout:.1f}s deadline")
        self.operation_name = operation_name
        self.timeout = timeout


def _log_error(operation_name: str, exception: Exception, log_level: str = "warning") -> None:
    """Log error with appropriate level. Helper to reduce duplication.

    Args:
        operation_name: Description for logging
        exception: Exception that occurred
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
    """
    msg = f"{operation_name}: {exception}"
    if log_level == "debug":
        logger.debug(msg)
    elif log_level == "error":
        logger.error(msg)
    else:
        logger.warning(msg)


async def safe_execute_async(
    coro: Awaitable,
    operation_name: str,
    log_level: str = "warning",
    default_return: Any = None,
    reraise: bool = False,
) -> Any:
    """Safely execute async operation with consistent error logging.

    Consolidates the try/except/log pattern for tiers that should degrade
    gracefully, e.g. a catalog lookup whose failure just means "no result".

    Args:
        coro: Awaitable coroutine to execute.
        operation_name: Description for logging (e.g., "Spoonacular ingredient lookup").
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None.
        reraise: If True, re-raise exception after logging. Default: False.

    Returns:
        Result of coroutine if successful, default_return on exception if reraise=False.

    Raises:
        Exception: Original exception if reraise=True.

    Example:
        url = await safe_execute_async(client.search_ingredient_image(name), "Catalog lookup", log_level="debug")
    """
    try:
        return await coro
    except Exception as e:
        _log_error(operation_name, e, log_level)
        if reraise:
            raise
        return default_return


def safe_execute_sync(
    func: Callable[[], Any],
    operation_name: str,
    log_level: str = "warning",
    default_return: Any = None,
    reraise: bool = False,
) -> Any:
    """Safely execute sync operation with consistent error logging.

    Synchronous version of safe_execute_async. Same behavior and patterns.

    Args:
        func: Callable to execute (no args).
        operation_name: Description for logging.
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None.
        reraise: If True, re-raise exception after logging. Default: False.

    Returns:
        Result of func if successful, default_return on exception if reraise=False.

    Raises:
        Exception: Original exception if reraise=True.
    """
    try:
        return func()
    except Exception as e:
        _log_error(operation_name, e, log_level)
        if reraise:
            raise
        return default_return
