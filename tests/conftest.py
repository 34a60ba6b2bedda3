"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from newslens.config import load_config
from newslens.models import RawArticle
from newslens.pipeline import NewsPipeline

FIXED_NOW = datetime(2025, 1, 2, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Monotonic clock the test advances by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sample_config(tmp_path):
    """Minimal config for testing (no real API keys)."""
    config_text = """
sources:
  newsapi:
    enabled: true
    api_key: "test-key"
  bing:
    enabled: true
    api_key: "test-key"
  google_rss:
    enabled: false

pipeline:
  max_articles: 60
  min_relevance: 0.2
  fetch_timeout_seconds: 5

cache:
  result_ttl_seconds: 600
  alias_ttl_seconds: 1800

logging:
  dir: "LOG_DIR"
"""
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text(config_text.replace("LOG_DIR", str(tmp_path / "logs")))
    return load_config(str(cfg_path))


@pytest.fixture
def pipeline(sample_config, clock):
    return NewsPipeline(sample_config, clock=clock, now=lambda: FIXED_NOW)


@pytest.fixture
def fx_articles():
    """Raw articles about the dollar/won exchange rate."""
    return [
        RawArticle(
            url="https://news.example.kr/fx-1",
            title="달러/원 환율 1400원 돌파, 증시도 강세",
            published_at="2025-01-02T09:15:00Z",
            source_name="연합뉴스",
        ),
        RawArticle(
            url="https://news.example.kr/fx-2",
            title="원화 약세 지속, 환율 우려 확대",
            description="원화 가치가 하락하면서 수입 물가 우려가 커지고 있다.",
            published_at="2025-01-02T10:40:00Z",
            source_name="한국경제",
        ),
        RawArticle(
            url="https://news.example.kr/bank-1",
            title="시중은행 예금 금리 인하",
            description="주요 은행들이 예금 금리를 낮췄다.",
            published_at="2025-01-02T08:00:00Z",
            source_name="매일경제",
        ),
    ]
