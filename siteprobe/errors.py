"""
Probe Error Handling

Defines exceptions raised by the probing engine and the timeout wrapper
shared by the probes.
"""

import asyncio
from typing import Any, Awaitable


class ProbeError(Exception):
    """Raised when a probe fails"""
    pass


class ProbeTimeoutError(ProbeError):
    """Raised when a probe exceeds its time budget"""
    pass


class InvalidTargetError(ProbeError, ValueError):
    """Raised when a target URL is malformed"""
    pass


async def run_with_timeout(
    awaitable: Awaitable[Any],
    timeout_seconds: float,
    message: str = "Request timed out",
) -> Any:
    """
    Await *awaitable*, cancelling it once *timeout_seconds* have elapsed.

    Args:
        awaitable: Coroutine or future to run
        timeout_seconds: Budget for the whole operation
        message: Error message used when the budget is exceeded

    Raises:
        ProbeTimeoutError: If the budget is exceeded
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        raise ProbeTimeoutError(message)


def describe_error(exc: BaseException) -> str:
    """Human-readable message for *exc*, falling back to its class name."""
    message = str(exc).strip()
    return message or type(exc).__name__
