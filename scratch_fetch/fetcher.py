# scratch_fetch/fetcher.py
"""
Fetcher module: one plain HTTPS GET with the network stack's defaults.

No retries and no timeout tuning: aiohttp's default timeouts, redirect
following and certificate verification apply unchanged.
"""
from __future__ import annotations

import ssl
from typing import Optional

from aiohttp import ClientSession

from scratch_fetch.logger import logger
from scratch_fetch.models import PageData


async def fetch(url: str, ssl_context: Optional[ssl.SSLContext] = None) -> PageData:
    """
    Fetch *url* and return the whole body.

    *ssl_context* replaces the default verifying context (tests use it to trust
    a private CA). Errors from aiohttp and the TLS layer propagate to the caller.
    """
    logger.debug("GET %s", url)
    async with ClientSession() as session:
        async with session.get(url, ssl=ssl_context or True) as resp:
            body = await resp.read()
            logger.debug("%s -> HTTP %s, %d bytes", resp.url, resp.status, len(body))
    return PageData(url, body)
