"""Turn provider articles into normalized, first-pass annotated articles."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from newslens.analyze.sentiment import lexicon_sentiment
from newslens.lexicon import Lexicon, default_lexicon
from newslens.models import (
    NormalizedArticle,
    RawArticle,
    format_timestamp,
    label_for_score,
    parse_timestamp,
)
from newslens.process.keywords import extract_keywords
from newslens.process.summarize import summarize

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE = "Unknown"


def normalize_published(value: datetime | str | None, now: datetime | None = None) -> str:
    """ISO-8601 UTC string; missing or unparseable values become `now`."""
    now = now or datetime.now(timezone.utc)
    if isinstance(value, datetime):
        dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return format_timestamp(dt.astimezone(timezone.utc))
    if value:
        try:
            return format_timestamp(parse_timestamp(str(value)))
        except ValueError:
            logger.debug("Unparseable publish time %r, using now", value)
    return format_timestamp(now)


def normalize_article(
    raw: RawArticle,
    index: int,
    provider: str = "",
    lexicon: Lexicon | None = None,
    summary_sentences: int = 2,
    max_keywords: int = 8,
    now: datetime | None = None,
) -> NormalizedArticle:
    """First pass: summary, whole-text sentiment and title keywords.

    Relevance starts at 0; both it and sentiment are recomputed once the
    alias set is known.
    """
    lexicon = lexicon or default_lexicon()
    title = raw.title or ""
    body = " ".join(p for p in (raw.description, raw.body) if p)
    published_at = normalize_published(raw.published_at, now)

    score = round(lexicon_sentiment(f"{title} {body}", lexicon).score, 3)
    return NormalizedArticle(
        id=f"{provider or 'raw'}-{index}-{published_at}",
        title=title,
        url=raw.url or "",
        source=raw.source_name or UNKNOWN_SOURCE,
        published_at=published_at,
        lang=raw.lang,
        summary=summarize(body or title, summary_sentences),
        sentiment=label_for_score(score),
        sentiment_score=score,
        keywords=tuple(extract_keywords(title, max_keywords, lexicon)),
        relevance=0.0,
    )
