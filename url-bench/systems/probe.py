"""
Reachability probe run once per load test before any attempt is issued.
"""

import asyncio
import logging
from typing import Optional
from urllib.parse import urlsplit

import aiohttp

from configuration import (
    LOCALHOST_NAME,
    PSEUDO_TLD_LENGTH,
    PROBE_MAX_STATUS,
    PROBE_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


async def _resolve(hostname: str) -> bool:
    """Resolve a host name through the event loop's resolver."""
    loop = asyncio.get_running_loop()
    addresses = await loop.getaddrinfo(hostname, None)
    return bool(addresses)


async def _head_status(url: str, timeout_seconds: float = PROBE_TIMEOUT_SECONDS) -> int:
    """Send a HEAD request without following redirects and return its status."""
    timeout = aiohttp.ClientTimeout(total=timeout_seconds)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.head(url, allow_redirects=False) as response:
            return response.status


async def is_reachable(url: str) -> bool:
    """Decide whether a URL is worth spending request budget on.

    The checks run in order and stop at the first failure:
    the URL must parse with a scheme and a host; ``localhost`` (with or
    without a port) is accepted outright; otherwise the host name needs at
    least two labels, a last label of 2 to 6 characters, a DNS answer, and a
    HEAD response below 400 (redirects are not followed).

    Never raises; any error counts as unreachable.

    Args:
        url: Absolute URL of the load test target

    Returns:
        True if the target looks reachable
    """
    try:
        parsed = urlsplit(url)
        if not parsed.scheme or not parsed.netloc:
            logger.info(f"Rejecting {url!r}: missing scheme or host")
            return False

        host = parsed.netloc.rpartition("@")[2]
        if host == LOCALHOST_NAME or host.startswith(f"{LOCALHOST_NAME}:"):
            return True

        hostname: Optional[str] = parsed.hostname
        if not hostname:
            logger.info(f"Rejecting {url!r}: empty host name")
            return False

        labels = hostname.split(".")
        if len(labels) < 2:
            logger.info(f"Rejecting {url!r}: host {hostname!r} has no domain part")
            return False

        min_len, max_len = PSEUDO_TLD_LENGTH
        if not min_len <= len(labels[-1]) <= max_len:
            logger.info(f"Rejecting {url!r}: implausible top-level domain {labels[-1]!r}")
            return False

        if not await _resolve(hostname):
            logger.info(f"Rejecting {url!r}: {hostname} did not resolve")
            return False

        status = await _head_status(url)
        if status >= PROBE_MAX_STATUS:
            logger.info(f"Rejecting {url!r}: HEAD returned {status}")
            return False

        return True

    except Exception as e:
        logger.info(f"Rejecting {url!r}: probe failed: {e}")
        return False
