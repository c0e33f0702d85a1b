# site_graph/crawler/fetcher.py
"""
Fetcher module: issues a single GET per page, no retries.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError, ClientSession

from site_graph.crawler.errors import FetchError
from site_graph.crawler.models import FetchResult
from site_graph.logger import logger


class Fetcher:
    """Thin wrapper around :class:`aiohttp.ClientSession` for the crawler."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session
        self.requests = 0

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch *url* and return status, content type and body.

        Any status is returned as-is; the body is only read for 2xx
        responses. Connection errors and timeouts raise FetchError.
        """
        self.requests += 1
        logger.debug("crawling %s ...", url)
        try:
            async with self.session.get(url, raise_for_status=False) as resp:
                ctype = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                result = FetchResult(url=url, status=resp.status, content_type=ctype)
                if result.ok:
                    result.body = await resp.read()
                return result
        except asyncio.TimeoutError as exc:
            raise FetchError(url, exc) from exc
        except ClientError as exc:
            raise FetchError(url, exc) from exc
