"""Google News RSS search provider (no API key)."""

from __future__ import annotations

import logging
import re
from calendar import timegm
from datetime import datetime, timezone

import feedparser
import httpx

from newslens.ingest import register_source
from newslens.ingest.base import USER_AGENT, BaseSource
from newslens.ingest.scraper import (
    DEFAULT_MAX_CHARS,
    MIN_SNIPPET_CHARS,
    extract_content,
    needs_full_text,
)
from newslens.models import RawArticle
from newslens.retry import retry_async

logger = logging.getLogger(__name__)

GOOGLE_NEWS_RSS_URL = "https://news.google.com/rss/search"

LOCALES = {
    "kr": {"hl": "ko", "gl": "KR", "ceid": "KR:ko"},
    "en": {"hl": "en-US", "gl": "US", "ceid": "US:en"},
}

_TAG = re.compile(r"<[^>]+>")


def strip_html(text: str) -> str:
    return _TAG.sub(" ", text or "").strip()


@register_source("google_rss")
class GoogleNewsRSSSource(BaseSource):
    """Fetch articles from the Google News RSS search feed."""

    @property
    def name(self) -> str:
        return "google_rss"

    async def fetch(self, query: str, lang: str, days: int) -> list[RawArticle]:
        params = {"q": f"{query} when:{days}d", **LOCALES.get(lang, LOCALES["kr"])}
        text = await retry_async(
            self._fetch_feed, params, max_retries=self.max_retries,
        )
        feed = feedparser.parse(text)

        limit = self.settings.get("max_articles", 50)
        full_text = self.settings.get("extract_content", False)
        min_snippet = self.settings.get("min_snippet_chars", MIN_SNIPPET_CHARS)
        max_chars = self.settings.get("max_body_chars", DEFAULT_MAX_CHARS)
        articles = []
        for entry in feed.entries[:limit]:
            link = entry.get("link", "")
            title = entry.get("title", "")
            if not link or not title:
                continue

            published_at = None
            if entry.get("published_parsed"):
                published_at = datetime.fromtimestamp(
                    timegm(entry.published_parsed), tz=timezone.utc,
                )

            description = strip_html(entry.get("summary", ""))
            body = ""
            if full_text and needs_full_text(description, min_snippet):
                body = await extract_content(
                    link, timeout=self.timeout, max_chars=max_chars,
                ) or ""

            source = entry.get("source") or {}
            articles.append(
                RawArticle(
                    url=link,
                    title=title,
                    description=description,
                    body=body,
                    source_name=source.get("title") or "Google News",
                    published_at=published_at,
                    lang=lang,
                )
            )

        logger.info(
            "Google News RSS fetched %d articles for '%s'", len(articles), query,
        )
        return articles

    async def _fetch_feed(self, params: dict) -> str:
        async with httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True,
        ) as client:
            resp = await client.get(
                GOOGLE_NEWS_RSS_URL, params=params,
                headers={"User-Agent": USER_AGENT},
            )
            resp.raise_for_status()
            return resp.text
