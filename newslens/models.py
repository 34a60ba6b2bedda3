"""Core data models for the newslens pipeline."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

# Label thresholds for per-article (targeted) sentiment
SENTIMENT_THRESHOLD = 0.15


def label_for_score(score: float, threshold: float = SENTIMENT_THRESHOLD) -> str:
    """Project a sentiment score onto pos/neg/neu."""
    if score > threshold:
        return "pos"
    if score < -threshold:
        return "neg"
    return "neu"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (accepting a trailing Z) as aware UTC."""
    dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """Render an aware datetime as `YYYY-MM-DDTHH:MM:SS.mmmZ` in UTC."""
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


@dataclass
class RawArticle:
    """An article as returned by an upstream provider."""

    url: str
    title: str = ""
    description: str = ""
    body: str = ""
    source_name: str | None = None
    published_at: datetime | str | None = None
    lang: str = "kr"

    @classmethod
    def from_dict(cls, data: dict[str, Any], lang: str = "kr") -> RawArticle:
        """Build from a provider-agnostic dict (camelCase or snake_case keys)."""
        return cls(
            url=data.get("url") or "",
            title=data.get("title") or "",
            description=data.get("description") or "",
            body=data.get("body") or data.get("content") or "",
            source_name=data.get("sourceName") or data.get("source_name"),
            published_at=data.get("publishedAt") or data.get("published_at"),
            lang=data.get("lang") or lang,
        )


@dataclass(frozen=True)
class NormalizedArticle:
    """A processed article. Replaced, never mutated, once built."""

    id: str
    title: str
    url: str
    source: str
    published_at: str  # ISO-8601, UTC
    lang: str
    summary: str
    sentiment: str  # pos, neg, neu
    sentiment_score: float
    keywords: tuple[str, ...] = ()
    relevance: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "source": self.source,
            "publishedAt": self.published_at,
            "lang": self.lang,
            "summary": self.summary,
            "sentiment": self.sentiment,
            "sentimentScore": self.sentiment_score,
            "keywords": list(self.keywords),
            "relevance": self.relevance,
        }


@dataclass(frozen=True)
class SentimentResult:
    label: str
    score: float


@dataclass(frozen=True)
class PMIScore:
    """Co-occurrence statistics of a candidate term with the query."""

    term: str
    pmi: float
    co_docs: int
    doc_freq: int

    @property
    def rank(self) -> float:
        return self.pmi + math.log(1 + self.co_docs)


@dataclass(frozen=True)
class KeywordCount:
    word: str
    count: int


@dataclass(frozen=True)
class TimelineBucket:
    t: str  # ISO-8601 start of hour/day
    count: int
    avg_sent: float


@dataclass(frozen=True)
class Aggregate:
    """Roll-up of a final article list."""

    count: int = 0
    pos_ratio: float = 0.0
    neg_ratio: float = 0.0
    top_keywords: tuple[KeywordCount, ...] = ()
    timeline: tuple[TimelineBucket, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "top_keywords", tuple(self.top_keywords))
        object.__setattr__(self, "timeline", tuple(self.timeline))

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "posRatio": self.pos_ratio,
            "negRatio": self.neg_ratio,
            "topKeywords": [
                {"word": k.word, "count": k.count} for k in self.top_keywords
            ],
            "timeline": [
                {"t": b.t, "count": b.count, "avgSent": b.avg_sent}
                for b in self.timeline
            ],
        }


def _freeze_meta(meta: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(
        {k: tuple(v) if isinstance(v, list) else v for k, v in meta.items()}
    )


@dataclass(frozen=True)
class Result:
    """Query-focused analytic summary of one request.

    Results are shared through the result cache, so every field is read-only:
    articles and list-valued meta entries are stored as tuples.
    """

    articles: tuple[NormalizedArticle, ...] = ()
    agg: Aggregate = field(default_factory=Aggregate)
    meta: Mapping[str, Any] = field(default_factory=lambda: {"aliases": ()})

    def __post_init__(self):
        object.__setattr__(self, "articles", tuple(self.articles))
        object.__setattr__(self, "meta", _freeze_meta(self.meta))

    @property
    def aliases(self) -> tuple[str, ...]:
        return self.meta.get("aliases", ())

    def to_dict(self) -> dict[str, Any]:
        return {
            "articles": [a.to_dict() for a in self.articles],
            "agg": self.agg.to_dict(),
            "meta": {
                k: list(v) if isinstance(v, tuple) else v
                for k, v in self.meta.items()
            },
        }
