"""
URL canonicalization for SiteGraph.

Every href found on a page is turned into a host-relative *canonical key*
(``/about``, ``/search?q=1``) which is used for deduplication. The site root
is fixed once from the seed URL and threaded explicitly into every call.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import SplitResult, urljoin, urlsplit, urlunsplit

from site_graph.crawler.errors import InvalidURLError, RootUndeterminedError

__all__ = ("SiteRoot", "ResolvedURL", "canonicalize", "SUPPORTED_SCHEMES")

SUPPORTED_SCHEMES = frozenset(("http", "https"))
_DEFAULT_PORTS = {"http": 80, "https": 443}


def _split(url: str) -> SplitResult:
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a bad port
    except ValueError as exc:
        raise InvalidURLError(url, str(exc)) from exc
    return parts


def _host(parts: SplitResult) -> str:
    """Lower-cased ``host[:port]`` with the scheme's default port dropped."""
    hostname = (parts.hostname or "").lower()
    if ":" in hostname:
        hostname = f"[{hostname}]"
    port = parts.port
    if port is None or port == _DEFAULT_PORTS.get(parts.scheme.lower()):
        return hostname
    return f"{hostname}:{port}"


def _squash(text: str) -> str:
    return "".join(text.split())


@dataclass(slots=True, frozen=True)
class SiteRoot:
    """Scheme and host every crawled link is checked against."""

    scheme: str
    host: str

    @classmethod
    def from_url(cls, url: str) -> SiteRoot:
        parts = _split(url.strip())
        if not parts.scheme or not parts.netloc:
            raise RootUndeterminedError(url)
        if parts.scheme.lower() not in SUPPORTED_SCHEMES:
            raise InvalidURLError(url, f"unsupported scheme {parts.scheme!r}")
        return cls(scheme=parts.scheme.lower(), host=_host(parts))

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}/"

    def owns(self, parts: SplitResult) -> bool:
        return _host(parts) == self.host


@dataclass(slots=True, frozen=True)
class ResolvedURL:
    """Result of resolving one href.

    ``key`` is the canonical host-relative path (dedup key), ``url`` the
    absolute URL to request.
    """

    scheme: str
    key: str
    url: str

    @property
    def supported(self) -> bool:
        return self.scheme in SUPPORTED_SCHEMES


def canonicalize(current: Optional[str], href: str, root: Optional[SiteRoot]) -> Optional[ResolvedURL]:
    """Resolve *href* found on page *current* into a canonical URL.

    Returns ``None`` for links to another host. Links with a scheme other
    than http(s) are returned unresolved with ``supported == False`` so the
    caller can skip them.

    Raises :class:`InvalidURLError` on malformed input and
    :class:`RootUndeterminedError` when a relative href has nothing to be
    resolved against.
    """
    raw = href.strip()
    parts = _split(raw)
    scheme = parts.scheme.lower()

    if scheme and scheme not in SUPPORTED_SCHEMES:
        return ResolvedURL(scheme=scheme, key=_squash(raw), url=raw)

    if parts.netloc:
        if root is None:
            root = SiteRoot.from_url(raw)
        if not root.owns(parts):
            return None
    elif root is None:
        raise RootUndeterminedError(raw)

    base = current or root.url
    joined = _split(urljoin(base, raw))
    if joined.netloc and not root.owns(joined):
        return None

    path = _squash(joined.path) or "/"
    query = _squash(joined.query)
    key = f"{path}?{query}" if query else path
    url = urlunsplit((root.scheme, root.host, path, query, ""))
    return ResolvedURL(scheme=joined.scheme.lower() or root.scheme, key=key, url=url)
