"""
Data models for the SiteGraph crawler.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterator, List


@dataclass(slots=True, eq=False)
class Page:
    """Node of the result graph.

    Nodes are compared by identity: every link to the same canonical key
    points to the same :class:`Page` instance, and a page may link back to
    itself or to an ancestor.
    """

    uri: str
    description: str
    links: List[Page] = field(default_factory=list)

    def walk(self) -> Iterator[Page]:
        """Yield every node reachable from *self* once, breadth-first."""
        seen: set[int] = {id(self)}
        queue = deque([self])
        while queue:
            page = queue.popleft()
            yield page
            for link in page.links:
                if id(link) not in seen:
                    seen.add(id(link))
                    queue.append(link)

    def __repr__(self) -> str:
        return f"Page(uri={self.uri!r}, description={self.description!r}, links={len(self.links)})"


@dataclass(slots=True, frozen=True)
class Link:
    """One anchor found in a page: raw href and its text."""

    href: str
    text: str


@dataclass(slots=True)
class FetchResult:
    """Response of a single GET request."""

    url: str
    status: int
    content_type: str = ""
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_html(self) -> bool:
        # servers that send no content type are treated as HTML
        return not self.content_type or "html" in self.content_type


@dataclass(slots=True)
class CrawlStats:
    """Statistics collected during a crawl for the summary log line."""

    pages: int = 0
    fetches: int = 0
    skipped: int = 0
    peak_in_flight: int = 0
    status_failures: Dict[int, int] = field(default_factory=dict)

    def record_status(self, status: int) -> None:
        self.status_failures[status] = self.status_failures.get(status, 0) + 1
