"""Bing News Search v7 provider."""

from __future__ import annotations

import logging

import httpx

from newslens.ingest import register_source
from newslens.ingest.base import USER_AGENT, BaseSource
from newslens.models import RawArticle
from newslens.retry import retry_async

logger = logging.getLogger(__name__)

BING_NEWS_URL = "https://api.bing.microsoft.com/v7.0/news/search"


def freshness_for(days: int) -> str:
    if days <= 1:
        return "Day"
    if days <= 3:
        return "Week"
    return "Month"


@register_source("bing")
class BingNewsSource(BaseSource):
    """Fetch articles from the Bing News Search API."""

    @property
    def name(self) -> str:
        return "bing"

    async def fetch(self, query: str, lang: str, days: int) -> list[RawArticle]:
        api_key = self.settings.get("api_key", "")
        if not api_key:
            logger.warning("Bing News key not configured")
            return []

        params = {
            "q": query,
            "mkt": "ko-KR" if lang == "kr" else "en-US",
            "freshness": freshness_for(days),
            "count": str(self.settings.get("count", 50)),
            "sortBy": "Date",
        }
        data = await retry_async(
            self._fetch_api, api_key, params, max_retries=self.max_retries,
        )

        articles = []
        for item in data.get("value", []) or []:
            providers = item.get("provider") or [{}]
            articles.append(
                RawArticle(
                    url=item.get("url") or "",
                    title=item.get("name") or "",
                    description=item.get("description") or "",
                    source_name=providers[0].get("name") or "Bing",
                    published_at=item.get("datePublished"),
                    lang=lang,
                )
            )

        logger.info("Bing fetched %d articles for '%s'", len(articles), query)
        return articles

    async def _fetch_api(self, api_key: str, params: dict) -> dict:
        headers = {
            "Ocp-Apim-Subscription-Key": api_key,
            "User-Agent": USER_AGENT,
        }
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(BING_NEWS_URL, params=params, headers=headers)
            resp.raise_for_status()
            return resp.json()
