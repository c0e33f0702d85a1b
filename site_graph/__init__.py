"""
SiteGraph package initializer.
Defines package version and exposes the crawl entry point.
The CLI lives in :mod:`site_graph.cli`.
"""
__version__ = "0.1.0"

from site_graph.engine import crawl
from site_graph.crawler.models import Page

__all__ = ["__version__", "crawl", "Page"]
