"""Utility functions for generation calls with timeout handling."""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar
from medagent.config.settings import settings
from medagent.utils.errors import RetrievalError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def invoke_with_timeout(
    call: Awaitable[T],
    timeout: Optional[float] = None,
) -> T:
    """
    Await a generation call with an overall time budget.

    Args:
        call: Awaitable performing the request
        timeout: Timeout in seconds (defaults to settings.advisory_timeout_seconds)

    Returns:
        Whatever the call returns

    Raises:
        RetrievalError: If the budget runs out
    """
    if timeout is None:
        timeout = settings.advisory_timeout_seconds

    logger.debug(f"Invoking generation call with timeout: {timeout}s")

    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(f"⏱️ Generation call timed out after {timeout}s")
        raise RetrievalError(f"Generation call timed out after {timeout}s")
