"""Tool-hooks for the Recipe Assistant agent.

Tool-hook Pipeline (runs around every tool execution):
1. log_tool_call_hook - Logs tool name, arguments, duration and failures
"""

import time
from typing import Any, Callable, Dict, List

from agno.run import RunContext

from src.utils.logger import logger


async def log_tool_call_hook(
    run_context: RunContext,
    function_name: str,
    function_call: Callable,
    arguments: Dict[str, Any],
):
    """Tool-hook: Time and log each tool call.

    Tool results pass through untouched; exceptions are logged and re-raised
    so the agent's own retry handling sees them.
    """
    visible_args = {k: v for k, v in arguments.items() if k != "run_context"}
    logger.info(f"Tool-hook: '{function_name}' called with {visible_args}", extra={"tool": function_name})
    started = time.perf_counter()
    try:
        result = await function_call(**arguments)
    except Exception as e:
        elapsed = time.perf_counter() - started
        logger.error(
            f"Tool-hook: '{function_name}' failed after {elapsed:.2f}s: {e}",
            extra={"tool": function_name, "elapsed_ms": round(elapsed * 1000)},
        )
        raise
    elapsed = time.perf_counter() - started
    logger.info(
        f"✓ Tool-hook: '{function_name}' finished in {elapsed:.2f}s",
        extra={"tool": function_name, "elapsed_ms": round(elapsed * 1000)},
    )
    return result


def get_tool_hooks() -> List:
    """Get list of tool-hooks to run around tool execution.

    Returns:
        List of tool-hooks to register with agent.
    """
    hooks: List = [log_tool_call_hook]
    logger.info("Registered tool-call logging hook")
    return hooks
