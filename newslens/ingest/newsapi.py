"""NewsAPI.org /v2/everything provider."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import httpx

from newslens.ingest import register_source
from newslens.ingest.base import USER_AGENT, BaseSource
from newslens.models import RawArticle
from newslens.retry import retry_async

logger = logging.getLogger(__name__)

NEWSAPI_URL = "https://newsapi.org/v2/everything"


@register_source("newsapi")
class NewsAPISource(BaseSource):
    """Fetch articles from NewsAPI full-text search."""

    @property
    def name(self) -> str:
        return "newsapi"

    async def fetch(self, query: str, lang: str, days: int) -> list[RawArticle]:
        api_key = self.settings.get("api_key", "")
        if not api_key:
            logger.warning("NewsAPI key not configured")
            return []

        since = datetime.now(timezone.utc) - timedelta(days=days)
        params = {
            "q": query,
            "language": "ko" if lang == "kr" else "en",
            "from": since.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "sortBy": "publishedAt",
            "pageSize": str(self.settings.get("page_size", 50)),
            "apiKey": api_key,
        }
        data = await retry_async(
            self._fetch_api, params, max_retries=self.max_retries,
        )

        articles = []
        for item in data.get("articles", []) or []:
            articles.append(
                RawArticle(
                    url=item.get("url") or "",
                    title=item.get("title") or "",
                    description=item.get("description") or "",
                    body=item.get("content") or "",
                    source_name=(item.get("source") or {}).get("name"),
                    published_at=item.get("publishedAt"),
                    lang=lang,
                )
            )

        logger.info("NewsAPI fetched %d articles for '%s'", len(articles), query)
        return articles

    async def _fetch_api(self, params: dict) -> dict:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(
                NEWSAPI_URL, params=params, headers={"User-Agent": USER_AGENT},
            )
            resp.raise_for_status()
            return resp.json()
