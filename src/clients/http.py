"""Thin aiohttp helpers shared by the upstream clients.

Maps transport failures onto the error taxonomy so callers only ever see
UpstreamTimeout or UpstreamUnavailable.
"""

import asyncio
import json
from typing import Any, Optional

import aiohttp

from src.utils.errors import UpstreamTimeout, UpstreamUnavailable
from src.utils.logger import logger


async def fetch_json(
    url: str,
    *,
    method: str = "GET",
    params: Optional[dict[str, Any]] = None,
    headers: Optional[dict[str, str]] = None,
    json_body: Optional[dict[str, Any]] = None,
    timeout: float = 5.0,
) -> Any:
    """Request `url` and decode a JSON body.

    Args:
        url: Absolute URL.
        method: HTTP method. Default: GET.
        params: Query string parameters.
        headers: Extra request headers.
        json_body: JSON payload for POST requests.
        timeout: Total seconds for connect + read.

    Returns:
        Decoded JSON payload.

    Raises:
        UpstreamTimeout: If the request exceeds `timeout`.
        UpstreamUnavailable: On connection errors, non-2xx status, or a body that is not JSON.
    """
    try:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
            async with session.request(method, url, params=params, headers=headers, json=json_body) as response:
                if response.status < 200 or response.status >= 300:
                    raise UpstreamUnavailable(f"{method} {url} returned {response.status}", status=response.status)
                text = await response.text()
    except asyncio.TimeoutError as e:
        raise UpstreamTimeout(f"{method} {url} timed out after {timeout}s") from e
    except aiohttp.ClientError as e:
        raise UpstreamUnavailable(f"{method} {url} failed: {e}") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise UpstreamUnavailable(f"{method} {url} returned malformed JSON") from e


async def probe_url(url: str, timeout: float = 5.0, headers: Optional[dict[str, str]] = None) -> bool:
    """HEAD `url` and report whether it answered 2xx. Never raises."""
    try:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
            async with session.head(url, headers=headers, allow_redirects=True) as response:
                return 200 <= response.status < 300
    except (asyncio.TimeoutError, aiohttp.ClientError) as e:
        logger.debug(f"Probe failed for {url}: {e}")
        return False
