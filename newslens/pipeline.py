"""Pipeline orchestrator: raw provider batches to a query-focused Result."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from datetime import datetime, timezone

from newslens.analyze.aggregate import aggregate
from newslens.analyze.aliases import AliasGenerator, ArticleText
from newslens.analyze.relevance import relevance_score
from newslens.analyze.sentiment import targeted_sentiment
from newslens.cache import TTLCache, result_cache_key
from newslens.config import (
    get_active_sources,
    get_cache_ttls,
    get_lexicon_path,
    get_pipeline_settings,
)
from newslens.ingest import SOURCES
from newslens.lexicon import Lexicon, load_lexicon
from newslens.models import (
    NormalizedArticle,
    RawArticle,
    Result,
    label_for_score,
    parse_timestamp,
)
from newslens.process.dedup import dedupe_by_url
from newslens.process.normalize import normalize_article

logger = logging.getLogger(__name__)

# Targeted scores are attenuated by relevance: score * (BASE + SLOPE * w)
RELEVANCE_WEIGHT_FLOOR = 0.2
RELEVANCE_WEIGHT_BASE = 0.6
RELEVANCE_WEIGHT_SLOPE = 0.4


class NoProvidersConfigured(RuntimeError):
    """No news provider is enabled with credentials."""


def empty_result(days: int) -> Result:
    return Result(articles=(), agg=aggregate([], days), meta={"aliases": ()})


class NewsPipeline:
    """Builds and caches query-focused results.

    Caches are passed in (or built from config) so several pipelines can
    share them, and tests can drive expiry with a fake clock.
    """

    def __init__(
        self,
        config: dict | None = None,
        result_cache: TTLCache[Result] | None = None,
        alias_cache: TTLCache[tuple[str, ...]] | None = None,
        lexicon: Lexicon | None = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] | None = None,
    ):
        self.config = config or {}
        self.settings = get_pipeline_settings(self.config)
        result_ttl, alias_ttl = get_cache_ttls(self.config)

        if result_cache is None:
            result_cache = TTLCache(result_ttl, clock, name="result-cache")
        if alias_cache is None:
            alias_cache = TTLCache(alias_ttl, clock, name="alias-cache")
        self.result_cache = result_cache
        self.lexicon = lexicon or load_lexicon(get_lexicon_path(self.config))
        self.alias_generator = AliasGenerator(
            alias_cache, self.lexicon, top_n=self.settings["alias_top_n"],
        )
        self._now = now or (lambda: datetime.now(timezone.utc))

    # --- Fetch ---

    async def fetch_all(
        self, query: str, lang: str, days: int,
    ) -> dict[str, list[RawArticle]]:
        """Query every configured provider in parallel.

        A provider that raises or exceeds the fetch timeout contributes no
        articles.
        """
        active = get_active_sources(self.config)
        for name in active:
            if name not in SOURCES:
                logger.warning("Source '%s' enabled but not registered", name)
        valid = [name for name in active if name in SOURCES]
        if not valid:
            raise NoProvidersConfigured(
                "No news providers configured. "
                "Enable sources.newsapi, sources.bing or sources.google_rss."
            )

        timeout = self.settings["fetch_timeout_seconds"]

        async def _fetch(name: str) -> tuple[str, list[RawArticle]]:
            source = SOURCES[name](self.config)
            try:
                return name, await asyncio.wait_for(
                    source.fetch(query, lang, days), timeout,
                )
            except Exception:
                logger.exception("Source '%s' failed for query '%s'", name, query)
                return name, []

        results = await asyncio.gather(*[_fetch(name) for name in valid])
        return dict(results)

    async def run(self, query: str, days: int, lang: str) -> Result:
        """Serve from cache, or fetch from providers and analyze."""
        key = result_cache_key(query, days, lang)
        cached = self.result_cache.get(key)
        if cached is not None:
            logger.info("Result cache hit for '%s'", key)
            return cached

        batches = await self.fetch_all(query, lang, days)
        logger.info(
            "Fetched %d articles from %d providers",
            sum(len(b) for b in batches.values()), len(batches),
        )
        return self._compute_and_store(key, query, days, lang, batches)

    # --- Analyze ---

    def analyze(
        self,
        query: str,
        days: int,
        lang: str,
        batches: Mapping[str, Sequence[RawArticle]],
    ) -> Result:
        """Read-through the result cache around `build_result`."""
        key = result_cache_key(query, days, lang)
        cached = self.result_cache.get(key)
        if cached is not None:
            return cached
        return self._compute_and_store(key, query, days, lang, batches)

    def _compute_and_store(
        self,
        key: str,
        query: str,
        days: int,
        lang: str,
        batches: Mapping[str, Sequence[RawArticle]],
    ) -> Result:
        if not any(batches.values()):
            logger.warning("No articles for '%s'; returning empty result", query)
            return empty_result(days)

        result = self.build_result(query, days, lang, batches)
        self.result_cache.put(key, result)
        return result

    def build_result(
        self,
        query: str,
        days: int,
        lang: str,
        batches: Mapping[str, Sequence[RawArticle]],
    ) -> Result:
        """Run the full analysis without touching the result cache."""
        now = self._now()
        normalized = [
            normalize_article(
                raw, index, provider,
                lexicon=self.lexicon,
                summary_sentences=self.settings["summary_sentences"],
                max_keywords=self.settings["max_keywords"],
                now=now,
            )
            for provider, raws in batches.items()
            for index, raw in enumerate(raws)
        ]
        if not normalized:
            return empty_result(days)

        articles = dedupe_by_url(normalized)

        sample = [
            ArticleText(a.title, a.summary)
            for a in articles[: self.settings["alias_sample_size"]]
        ]
        aliases = self.alias_generator.generate(query, sample)

        rescored = [self.rescore(a, query, aliases) for a in articles]

        min_relevance = self.settings["min_relevance"]
        q = query.lower()
        kept = [
            a for a in rescored
            if a.relevance >= min_relevance or q in a.title.lower()
        ]
        kept.sort(key=lambda a: parse_timestamp(a.published_at), reverse=True)
        kept = kept[: self.settings["max_articles"]]

        logger.info(
            "Query '%s': %d normalized, %d unique, %d kept",
            query, len(normalized), len(articles), len(kept),
        )
        return Result(
            articles=tuple(kept),
            agg=aggregate(kept, days),
            meta={"aliases": tuple(aliases)},
        )

    def rescore(
        self, article: NormalizedArticle, query: str, aliases: Sequence[str],
    ) -> NormalizedArticle:
        """Second pass: alias-aware relevance and relevance-weighted targeted sentiment."""
        relevance = relevance_score(article.title, query, aliases)
        targeted = targeted_sentiment(
            f"{article.title} {article.summary}",
            query,
            aliases,
            self.lexicon,
            self.settings["sentiment_window"],
        )
        weight = max(RELEVANCE_WEIGHT_FLOOR, min(1.0, relevance))
        score = round(
            targeted.score * (RELEVANCE_WEIGHT_BASE + RELEVANCE_WEIGHT_SLOPE * weight),
            3,
        )
        return replace(
            article,
            relevance=relevance,
            sentiment_score=score,
            sentiment=label_for_score(score),
        )
