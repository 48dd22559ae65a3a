"""Rate-limit detection and waiting for throttled API calls."""

import asyncio
import logging
from typing import Awaitable, Callable

from .clients.base import THROTTLED
from .config import DEFAULT_RETRY_AFTER_MS


logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def is_rate_limited(error: BaseException) -> bool:
    """True when the error carries the THROTTLED classification code."""
    return getattr(error, "code", None) == THROTTLED


def retry_after_ms(error: BaseException, default_ms: int = DEFAULT_RETRY_AFTER_MS) -> int:
    """Server-suggested delay for a throttled error, or the default."""
    suggested = getattr(error, "retry_after_ms", None)
    return suggested if suggested else default_ms


async def handle_rate_limit(
    error: BaseException,
    sleep: Sleep = asyncio.sleep,
    default_ms: int = DEFAULT_RETRY_AFTER_MS
) -> None:
    """Wait out a rate-limit rejection, or re-raise any other error.
    
    Returning normally means the caller may retry the whole operation.
    """
    if not is_rate_limited(error):
        raise error
    
    wait_ms = retry_after_ms(error, default_ms)
    logger.warning("Rate limited! Waiting for %d ms before retrying...", wait_ms)
    await sleep(wait_ms / 1000)
