# site_graph/crawler/link_extractor.py
"""
Link extraction for SiteGraph.
"""
from __future__ import annotations

from typing import List, Union
from urllib.parse import urlsplit

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import Tag

from site_graph.crawler.canonical import SiteRoot
from site_graph.crawler.errors import ParseError
from site_graph.crawler.models import Link


def extract_links(base_url: str, body: Union[str, bytes]) -> List[Link]:
    """
    Extract ``<a href>`` links from an HTML body in document order.

    Relative hrefs are passed through unresolved, absolute hrefs are kept
    only when they point to the host of *base_url*. Hosts are compared as
    :meth:`SiteRoot.owns` compares them, so userinfo, letter case and a
    default port do not matter. The anchor text is the link description,
    or the href itself when the anchor has no text.
    Duplicates are kept.
    """
    try:
        soup = BeautifulSoup(body, "html.parser")
    except ParserRejectedMarkup as exc:
        raise ParseError(base_url, exc) from exc

    root = SiteRoot.from_url(base_url)
    links: List[Link] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        href = href_val.strip()
        if not href:
            continue
        try:
            parts = urlsplit(href)
            foreign = bool(parts.netloc) and not root.owns(parts)
        except ValueError:
            # left for the canonicalizer to reject
            foreign = False
        if foreign:
            continue
        text = " ".join(tag.get_text(" ", strip=True).split())
        links.append(Link(href=href, text=text or href))
    return links
