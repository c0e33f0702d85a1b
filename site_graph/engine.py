# File: site_graph/engine.py
"""site_graph.engine: точка входа для запуска обхода из CLI, тестов и других сервисов."""

from __future__ import annotations

import asyncio
from typing import Optional

from site_graph.config import CrawlerConfig
from site_graph.crawler.canonical import SiteRoot
from site_graph.crawler.crawler import AsyncCrawler
from site_graph.crawler.errors import CrawlError
from site_graph.crawler.limiter import DEFAULT_CAPACITY
from site_graph.crawler.models import Page
from site_graph.logger import logger

__all__ = ["start_crawl", "crawl"]


async def start_crawl(cfg: CrawlerConfig) -> Page:
    """
    Запускает асинхронный краулер в контексте и возвращает корень графа.

    Parameters
    ----------
    cfg : CrawlerConfig
        Конфигурация обхода.

    Returns
    -------
    Page
        Корневая страница; все остальные достижимы через ``links``.
    """
    async with AsyncCrawler(cfg) as crawler:
        return await crawler.crawl()


def crawl(
    seed_url: str,
    *,
    max_concurrent_fetches: int = DEFAULT_CAPACITY,
    verbose: bool = False,
    timeout: float = 10.0,
    user_agent: Optional[str] = None,
) -> Page:
    """Синхронная обёртка: обходит сайт от *seed_url* и возвращает граф страниц.

    Raises the first fatal :class:`~site_graph.crawler.errors.CrawlError`.
    """
    SiteRoot.from_url(seed_url)
    params = dict(
        base_url=seed_url.strip(),
        max_concurrent_fetches=max_concurrent_fetches,
        verbose=verbose,
        timeout=timeout,
    )
    if user_agent:
        params["user_agent"] = user_agent
    cfg = CrawlerConfig(**params)

    try:
        return asyncio.run(start_crawl(cfg))
    except CrawlError as exc:
        logger.error("failed to crawl %s: %s", seed_url, exc)
        raise
