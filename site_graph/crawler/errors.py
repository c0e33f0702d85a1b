"""
Exceptions raised by the SiteGraph crawler.

Every fatal failure of a crawl is a :class:`CrawlError`. Non-2xx responses and
links with unsupported schemes are not errors: they are recorded in the graph
(or left out of it) and never raised.
"""
from __future__ import annotations

from typing import Optional

__all__ = (
    "CrawlError",
    "InvalidURLError",
    "RootUndeterminedError",
    "FetchError",
    "ParseError",
    "CrawlCancelledError",
)


class CrawlError(Exception):
    """Base class for fatal crawl failures."""


class InvalidURLError(CrawlError):
    """Malformed URL or href."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        msg = f"invalid url {url!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class RootUndeterminedError(CrawlError):
    """A URL had to be resolved before any site root was known."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"unable to recognise site root url for {url!r}")


class FetchError(CrawlError):
    """Transport-level failure (connection error, timeout)."""

    def __init__(self, url: str, reason: Optional[BaseException] = None) -> None:
        self.url = url
        detail = f": {reason}" if reason is not None and str(reason) else ""
        if reason is not None and not detail:
            detail = f": {type(reason).__name__}"
        super().__init__(f"failed to fetch {url}{detail}")


class ParseError(CrawlError):
    """Response body could not be parsed as HTML."""

    def __init__(self, url: str, reason: Optional[BaseException] = None) -> None:
        self.url = url
        detail = f": {reason}" if reason is not None else ""
        super().__init__(f"unable to parse html from {url}{detail}")


class CrawlCancelledError(CrawlError):
    """A branch stopped because another branch of the same crawl failed."""

    def __init__(self, url: str = "") -> None:
        self.url = url
        super().__init__(f"crawl cancelled before {url}" if url else "crawl cancelled")
