"""Tests for first-pass normalization and URL dedup."""

from __future__ import annotations

from datetime import datetime, timezone

from newslens.models import RawArticle
from newslens.process.dedup import dedupe_by_url
from newslens.process.normalize import normalize_article, normalize_published

NOW = datetime(2025, 1, 2, 12, 0, tzinfo=timezone.utc)


def test_missing_fields_are_defaulted():
    article = normalize_article(RawArticle(url="https://a.com/1"), 0, "newsapi", now=NOW)
    assert article.title == ""
    assert article.summary == ""
    assert article.keywords == ()
    assert article.sentiment == "neu"
    assert article.sentiment_score == 0
    assert article.relevance == 0
    assert article.source == "Unknown"
    assert article.published_at == "2025-01-02T12:00:00.000Z"
    assert article.id == "newsapi-0-2025-01-02T12:00:00.000Z"


def test_summary_uses_description_and_body():
    raw = RawArticle(
        url="https://a.com/1",
        title="Fed holds rates",
        description="The Fed held rates at 5 percent on Wednesday.",
        body="ok.",
    )
    article = normalize_article(raw, 3, "bing", now=NOW)
    assert article.summary == "The Fed held rates at 5 percent on Wednesday. ok."
    assert article.keywords == ("Fed", "holds", "rates")


def test_summary_falls_back_to_title():
    raw = RawArticle(url="https://a.com/1", title="Samsung posts record profit")
    assert normalize_article(raw, 0, now=NOW).summary == "Samsung posts record profit"


def test_first_pass_sentiment_uses_lexicon_over_title_and_body():
    raw = RawArticle(url="https://a.com/1", title="Exports slump", body="Losses widen.")
    article = normalize_article(raw, 0, now=NOW)
    assert article.sentiment == "neg"
    assert article.sentiment_score == -1.0


def test_published_time_normalization():
    assert normalize_published("2025-01-02T03:04:05Z", NOW) == "2025-01-02T03:04:05.000Z"
    assert normalize_published("2025-01-02T12:04:05+09:00", NOW) == "2025-01-02T03:04:05.000Z"
    assert normalize_published(datetime(2025, 1, 2, 3, 4, 5), NOW) == "2025-01-02T03:04:05.000Z"
    assert normalize_published("not a date", NOW) == "2025-01-02T12:00:00.000Z"
    assert normalize_published(None, NOW) == "2025-01-02T12:00:00.000Z"


def test_dedupe_keeps_first_per_url():
    first = normalize_article(RawArticle(url="https://a.com/1", title="first"), 0, now=NOW)
    second = normalize_article(RawArticle(url="https://a.com/1", title="second"), 1, now=NOW)
    other = normalize_article(RawArticle(url="https://a.com/2", title="other"), 2, now=NOW)
    result = dedupe_by_url([first, second, other])
    assert [a.title for a in result] == ["first", "other"]


def test_dedupe_drops_articles_without_url():
    no_url = normalize_article(RawArticle(url="", title="orphan"), 0, now=NOW)
    assert dedupe_by_url([no_url]) == []


def test_raw_article_from_dict():
    raw = RawArticle.from_dict(
        {
            "title": "t",
            "url": "u",
            "description": None,
            "content": "body text",
            "sourceName": "Yonhap",
            "publishedAt": "2025-01-02T00:00:00Z",
        },
        lang="en",
    )
    assert raw.description == ""
    assert raw.body == "body text"
    assert raw.source_name == "Yonhap"
    assert raw.lang == "en"
