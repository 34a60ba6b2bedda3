"""Abstract base class for news providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from newslens.config import get_source_config, is_source_configured
from newslens.models import RawArticle

USER_AGENT = "newslens/0.1"


class BaseSource(ABC):
    """Base class for provider fetchers.

    `fetch` may raise; the pipeline treats any failure as zero articles from
    this provider.
    """

    def __init__(self, config: dict):
        self.config = config

    @property
    def settings(self) -> dict:
        return get_source_config(self.config, self.name)

    @property
    def configured(self) -> bool:
        return is_source_configured(self.config, self.name)

    @property
    def max_retries(self) -> int:
        return self.settings.get("max_retries", 2)

    @property
    def timeout(self) -> float:
        return self.settings.get("timeout", 15)

    @abstractmethod
    async def fetch(self, query: str, lang: str, days: int) -> list[RawArticle]:
        """Fetch raw articles about `query` from the last `days` days."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name of the provider."""
        ...
