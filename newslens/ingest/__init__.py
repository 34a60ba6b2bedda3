"""News provider registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from newslens.ingest.base import BaseSource

SOURCES: dict[str, type[BaseSource]] = {}


def register_source(name: str):
    """Decorator to register a news provider."""

    def decorator(cls):
        SOURCES[name] = cls
        return cls

    return decorator


# Import implementations to trigger registration
from newslens.ingest.bing import BingNewsSource  # noqa: E402, F401
from newslens.ingest.google_rss import GoogleNewsRSSSource  # noqa: E402, F401
from newslens.ingest.newsapi import NewsAPISource  # noqa: E402, F401
