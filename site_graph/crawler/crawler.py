# === FILE: site_graph/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import List, Optional, Sequence

from aiohttp import ClientSession, ClientTimeout

from site_graph.config import CrawlerConfig
from site_graph.crawler.canonical import SiteRoot, canonicalize
from site_graph.crawler.errors import CrawlCancelledError, CrawlError
from site_graph.crawler.fetcher import Fetcher
from site_graph.crawler.limiter import ConcurrencyLimiter
from site_graph.crawler.link_extractor import extract_links
from site_graph.crawler.models import CrawlStats, Link, Page
from site_graph.crawler.registry import PageRegistry
from site_graph.logger import logger, restore_level, set_verbose

__all__ = ("AsyncCrawler", "ROOT_DESCRIPTION")

ROOT_DESCRIPTION = "site root"


class AsyncCrawler:
    """Асинхронный краулер: строит граф страниц одного сайта.

    Каждая страница загружается не более одного раза. Ссылки страницы
    обходятся параллельно, общее число одновременных запросов ограничено
    одним лимитером на весь обход. Первая фатальная ошибка отменяет
    оставшиеся задачи и возвращается вызывающему.
    """

    def __init__(self, config: CrawlerConfig) -> None:
        self.config = config
        self.root = SiteRoot.from_url(str(config.base_url))
        self.registry = PageRegistry()
        self.limiter = ConcurrencyLimiter(config.max_concurrent_fetches)
        self.stats = CrawlStats()
        self.session: Optional[ClientSession] = None
        self.fetcher: Optional[Fetcher] = None
        self._failure: Optional[CrawlError] = None

    async def __aenter__(self) -> AsyncCrawler:
        timeout = ClientTimeout(total=self.config.timeout)
        self.session = ClientSession(
            timeout=timeout,
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        self.fetcher = Fetcher(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> Page:
        """Обходит сайт от ``config.base_url`` и возвращает корневую страницу графа."""
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        previous_level = set_verbose(self.config.verbose)
        logger.info("Старт обхода: %s", self.config.base_url)
        start = time.monotonic()
        cancel = asyncio.Event()
        try:
            page = await self._crawl(None, str(self.config.base_url), ROOT_DESCRIPTION, cancel)
        except CrawlCancelledError:
            if self._failure is None:
                raise
            raise self._failure
        finally:
            self.stats.pages = len(self.registry)
            self.stats.fetches = self.fetcher.requests
            self.stats.peak_in_flight = self.limiter.peak
            restore_level(previous_level)
        if page is None:
            raise RuntimeError(f"seed url {self.config.base_url} produced no page")
        duration = time.monotonic() - start
        logger.info(
            "Завершено: %d страниц, %d запросов за %.2f с (пик одновременных: %d)",
            self.stats.pages, self.stats.fetches, duration, self.stats.peak_in_flight,
        )
        if self.stats.status_failures:
            logger.info("Ответы с ошибкой: %s", self.stats.status_failures)
        return page

    async def _crawl(
        self, current: Optional[str], href: str, description: str, cancel: asyncio.Event
    ) -> Optional[Page]:
        try:
            return await self._visit(current, href, description, cancel)
        except CrawlCancelledError:
            raise
        except CrawlError as exc:
            self._abort(exc, cancel)
            raise

    async def _visit(
        self, current: Optional[str], href: str, description: str, cancel: asyncio.Event
    ) -> Optional[Page]:
        resolved = canonicalize(current, href, self.root)
        if resolved is None:
            self.stats.skipped += 1
            logger.debug("!!!skipping link to another host %s", href)
            return None
        if not resolved.supported:
            self.stats.skipped += 1
            logger.debug("!!!unsupported scheme %s at url %s", resolved.scheme, resolved.url)
            return None

        page, existed = await self.registry.resolve_or_create(resolved.key, description)
        if existed:
            return page

        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        if cancel.is_set():
            raise CrawlCancelledError(resolved.url)
        async with self.limiter:
            # the crawl may have failed while this task waited for a permit
            if cancel.is_set():
                raise CrawlCancelledError(resolved.url)
            result = await self.fetcher.fetch(resolved.url)

        if not result.ok:
            logger.debug("!!!server returned %d for %s", result.status, resolved.url)
            self.stats.record_status(result.status)
            page.description = f"{description} ({result.status})"
            return page
        if not result.is_html:
            logger.debug("not html (%s), not following links of %s", result.content_type, resolved.url)
            return page

        links = extract_links(resolved.url, result.body)
        page.links = await self._fan_out(resolved.url, links, cancel)
        return page

    async def _fan_out(self, current: str, links: Sequence[Link], cancel: asyncio.Event) -> List[Page]:
        """Обходит ссылки страницы параллельно, результат в порядке ссылок в документе."""
        if not links:
            return []
        if cancel.is_set():
            raise CrawlCancelledError(current)

        tasks = [
            asyncio.create_task(self._crawl(current, link.href, link.text, cancel))
            for link in links
        ]
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            pending = [t for t in tasks if not t.done()]
            for t in pending:
                t.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        errors = [t.exception() for t in tasks if not t.cancelled() and t.exception() is not None]
        if errors:
            raise next((e for e in errors if not isinstance(e, CrawlCancelledError)), errors[0])
        return [page for page in (t.result() for t in tasks) if page is not None]

    def _abort(self, exc: CrawlError, cancel: asyncio.Event) -> None:
        if self._failure is None:
            self._failure = exc
            logger.debug("cancelling crawl: %s", exc)
        cancel.set()
