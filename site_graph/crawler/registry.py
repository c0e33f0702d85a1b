"""
Page registry: dedup table and memo of in-flight and finished pages.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional, Tuple

from site_graph.crawler.models import Page

__all__ = ("PageRegistry",)


class PageRegistry:
    """Maps canonical keys to the single :class:`Page` node of each key.

    The registry is the only place pages are created. The first caller to
    register a key gets ``already_existed=False`` and owns the fetch; every
    later caller gets the same node back, possibly still without links.
    """

    def __init__(self) -> None:
        self._pages: Dict[str, Page] = {}
        self._lock = asyncio.Lock()

    async def resolve_or_create(self, key: str, description: str) -> Tuple[Page, bool]:
        async with self._lock:
            existing = self._pages.get(key)
            if existing is not None:
                return existing, True
            page = Page(uri=key, description=description)
            self._pages[key] = page
            return page, False

    def get(self, key: str) -> Optional[Page]:
        return self._pages.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._pages

    def __len__(self) -> int:
        return len(self._pages)
