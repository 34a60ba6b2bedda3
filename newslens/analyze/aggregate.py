"""Roll up a final article list into ratios, top keywords and a timeline."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from datetime import datetime

from newslens.models import (
    Aggregate,
    KeywordCount,
    NormalizedArticle,
    TimelineBucket,
    format_timestamp,
    parse_timestamp,
)

TOP_KEYWORDS = 8


def bucket_start(published_at: str, hourly: bool) -> datetime:
    dt = parse_timestamp(published_at)
    if hourly:
        return dt.replace(minute=0, second=0, microsecond=0)
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def build_timeline(
    articles: Sequence[NormalizedArticle], days: int,
) -> list[TimelineBucket]:
    """Hourly buckets for a one-day span, daily otherwise; ascending."""
    hourly = days <= 1
    counts: dict[datetime, int] = {}
    sums: dict[datetime, float] = {}
    for article in articles:
        key = bucket_start(article.published_at, hourly)
        counts[key] = counts.get(key, 0) + 1
        sums[key] = sums.get(key, 0.0) + article.sentiment_score

    return [
        TimelineBucket(
            t=format_timestamp(key),
            count=counts[key],
            avg_sent=round(sums[key] / max(1, counts[key]), 3),
        )
        for key in sorted(counts)
    ]


def aggregate(articles: Sequence[NormalizedArticle], days: int) -> Aggregate:
    count = len(articles)
    pos = sum(1 for a in articles if a.sentiment == "pos")
    neg = sum(1 for a in articles if a.sentiment == "neg")

    keywords: Counter[str] = Counter()
    for article in articles:
        keywords.update(article.keywords)

    return Aggregate(
        count=count,
        pos_ratio=round(pos / count, 3) if count else 0.0,
        neg_ratio=round(neg / count, 3) if count else 0.0,
        top_keywords=tuple(
            KeywordCount(word=w, count=c)
            for w, c in keywords.most_common(TOP_KEYWORDS)
        ),
        timeline=tuple(build_timeline(articles, days)),
    )
