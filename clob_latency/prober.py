"""
HTTP prober.

Issues a single timed GET and turns the outcome into a Measurement. Every
failure mode is captured in the returned record; nothing is raised.
"""

import asyncio
import logging
import time
from typing import Mapping, Optional

import aiohttp

from .types import Measurement, utc_timestamp

logger = logging.getLogger(__name__)

ERROR_SNIPPET_CHARS = 50


def _error_snippet(status: int, body: str) -> str:
    snippet = body[:ERROR_SNIPPET_CHARS].replace("\r", " ").replace("\n", " ")
    return f"HTTP {status}: {snippet}"


async def measure_request(
    session: aiohttp.ClientSession,
    label: str,
    url: str,
    iteration: int,
    headers: Optional[Mapping[str, str]] = None,
) -> Measurement:
    """
    Time one GET request, including the full body read.

    Args:
        session: Shared HTTP session
        label: Endpoint label recorded on the measurement
        url: Fully built request URL
        iteration: Iteration number recorded as the measurement id
        headers: Headers sent with the request

    Returns:
        Measurement for the call
    """
    status = 0
    size = 0
    success = False
    error_msg = ""

    start = time.perf_counter()
    try:
        async with session.get(url, headers=headers) as resp:
            status = resp.status
            if 200 <= status < 300:
                body = await resp.read()
                size = len(body)
                success = True
            else:
                text = await resp.text(errors="replace")
                error_msg = _error_snippet(status, text)
    except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
        status = 0
        error_msg = f"NET: {str(e) or type(e).__name__}"
        logger.debug(f"{label} #{iteration} network failure: {error_msg}")
    end = time.perf_counter()

    return Measurement(
        id=iteration,
        label=label,
        timestamp=utc_timestamp(),
        duration_ms=round((end - start) * 1000, 2),
        status=status,
        size_b=size,
        success=success,
        error_details=error_msg,
    )
