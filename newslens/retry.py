"""Retry logic with exponential backoff for provider calls."""

from __future__ import annotations

import asyncio
import logging

import httpx

logger = logging.getLogger(__name__)

RETRYABLE_HTTP_CODES = {429, 500, 502, 503, 504}
RETRYABLE_EXCEPTIONS = (
    httpx.TimeoutException,
    httpx.ConnectError,
    httpx.RemoteProtocolError,
    ConnectionError,
    TimeoutError,
)


def _backoff(attempt: int, base_delay: float, max_delay: float) -> float:
    return min(base_delay * (2**attempt), max_delay)


async def retry_async(
    fn,
    *args,
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    **kwargs,
):
    """Call an async function with exponential backoff on transient failures.

    Retries on httpx timeout/connection errors and on HTTP 429 / 5xx, honouring
    a numeric Retry-After header. Anything else is raised immediately.
    """
    last_exc = None
    for attempt in range(max_retries + 1):
        try:
            return await fn(*args, **kwargs)
        except RETRYABLE_EXCEPTIONS as exc:
            last_exc = exc
            if attempt == max_retries:
                break
            delay = _backoff(attempt, base_delay, max_delay)
            logger.warning(
                "Retry %d/%d after %s: %s (waiting %.1fs)",
                attempt + 1, max_retries, type(exc).__name__, exc, delay,
            )
            await asyncio.sleep(delay)
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code not in RETRYABLE_HTTP_CODES:
                raise
            last_exc = exc
            if attempt == max_retries:
                break
            retry_after = exc.response.headers.get("retry-after")
            try:
                delay = min(float(retry_after), max_delay) if retry_after else None
            except ValueError:
                delay = None
            if delay is None:
                delay = _backoff(attempt, base_delay, max_delay)
            logger.warning(
                "Retry %d/%d after HTTP %d (waiting %.1fs)",
                attempt + 1, max_retries, exc.response.status_code, delay,
            )
            await asyncio.sleep(delay)

    raise last_exc  # type: ignore[misc]
