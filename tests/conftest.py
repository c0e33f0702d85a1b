import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Union

import pytest
import pytest_asyncio
from aiohttp import web

from site_graph.config import CrawlerConfig
from site_graph.crawler.models import Page


@dataclass
class Route:
    """One page of a test site."""

    body: str = ""
    status: int = 200
    delay: float = 0.0
    content_type: str = "text/html"
    drop: bool = False


@dataclass
class SiteServer:
    """A running test server plus request bookkeeping."""

    url: str
    hits: Counter = field(default_factory=Counter)
    active: int = 0
    max_active: int = 0

    def config(self, **kwargs) -> CrawlerConfig:
        params = {"base_url": self.url, "timeout": 5.0}
        params.update(kwargs)
        return CrawlerConfig(**params)


def links_html(*hrefs: Union[str, tuple]) -> str:
    """Build an HTML page with one anchor per href (``(href, text)`` or href)."""
    anchors = []
    for item in hrefs:
        href, text = item if isinstance(item, tuple) else (item, item.strip("/") or "home")
        anchors.append(f'<a href="{href}">{text}</a>')
    return "<!DOCTYPE html><html><head></head><body>" + "".join(anchors) + "</body></html>"


def _build_app(site: SiteServer, routes: Dict[str, Route]) -> web.Application:
    app = web.Application()

    def make_handler(route: Route):
        async def handler(request: web.Request) -> web.Response:
            site.hits[request.path_qs] += 1
            site.active += 1
            site.max_active = max(site.max_active, site.active)
            try:
                if route.drop:
                    # connection reset before any response
                    request.transport.close()
                    return web.Response()
                if route.delay:
                    await asyncio.sleep(route.delay)
                if route.status >= 300:
                    return web.Response(status=route.status)
                return web.Response(text=route.body, content_type=route.content_type)
            finally:
                site.active -= 1

        return handler

    for path, route in routes.items():
        app.router.add_get(path, make_handler(route))
    return app


@pytest_asyncio.fixture
async def make_site(unused_tcp_port_factory) -> AsyncIterator[Callable[[Dict[str, Route]], Awaitable[SiteServer]]]:
    """Factory fixture: ``site = await make_site({"/": Route(...)})``."""
    runners: List[web.AppRunner] = []

    async def _make(routes: Dict[str, Route]) -> SiteServer:
        port = unused_tcp_port_factory()
        site = SiteServer(url=f"http://localhost:{port}")
        runner = web.AppRunner(_build_app(site, routes))
        await runner.setup()
        await web.TCPSite(runner, "localhost", port).start()
        runners.append(runner)
        return site

    yield _make
    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def sample_graph() -> Page:
    """The graph of the home/about/products/career site, built by hand."""
    root = Page(uri="/", description="site root")
    about = Page(uri="/about", description="about")
    products = Page(uri="/products", description="products (404)")
    career = Page(uri="/career", description="career")
    root.links = [root, about, products]
    about.links = [root, career]
    return root


@pytest.fixture(autouse=True)
def reset_logger():
    """CLI tests attach handlers to streams that are closed afterwards."""
    yield
    lg = logging.getLogger("SiteGraph")
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
    lg.setLevel(logging.NOTSET)
    lg.propagate = True
