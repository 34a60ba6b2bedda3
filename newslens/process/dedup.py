"""URL-based deduplication."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from newslens.models import NormalizedArticle

logger = logging.getLogger(__name__)


def dedupe_by_url(articles: Iterable[NormalizedArticle]) -> list[NormalizedArticle]:
    """Keep the first article per URL; articles without a URL are dropped."""
    seen: set[str] = set()
    result = []
    total = 0
    for article in articles:
        total += 1
        if not article.url or article.url in seen:
            continue
        seen.add(article.url)
        result.append(article)

    removed = total - len(result)
    if removed:
        logger.info("URL dedup removed %d articles", removed)
    return result
