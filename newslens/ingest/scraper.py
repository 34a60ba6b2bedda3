"""Full-text fetch for feed entries that only carry a headline snippet."""

from __future__ import annotations

import logging

import httpx
import trafilatura

from newslens.ingest.base import USER_AGENT
from newslens.retry import retry_async

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHARS = 4000
# Snippets at least this long already give the summarizer enough to work with
MIN_SNIPPET_CHARS = 200


def needs_full_text(snippet: str, min_chars: int = MIN_SNIPPET_CHARS) -> bool:
    return len((snippet or "").strip()) < min_chars


def clip_body(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Cut to `max_chars`, backing off to the last sentence end when there is one."""
    text = " ".join(text.split())
    if len(text) <= max_chars:
        return text
    cut = text[:max_chars]
    end = max(cut.rfind(p) for p in ".!?。")
    return cut[: end + 1] if end > 0 else cut


async def extract_content(
    url: str,
    timeout: float = 15,
    max_chars: int = DEFAULT_MAX_CHARS,
) -> str | None:
    """Article body at `url`, clipped for summarization, or None on failure."""
    try:
        html = await retry_async(
            _fetch_html, url, timeout, max_retries=1, base_delay=0.5,
        )
    except (httpx.HTTPError, OSError) as exc:
        logger.debug("Fetch failed for %s: %s", url, exc)
        return None
    if not html:
        return None

    text = trafilatura.extract(
        html, include_comments=False, include_tables=False, favor_precision=True,
    )
    if not text:
        logger.debug("No article body found at %s", url)
        return None
    return clip_body(text, max_chars)


async def _fetch_html(url: str, timeout: float) -> str:
    async with httpx.AsyncClient(
        timeout=timeout, follow_redirects=True,
    ) as client:
        resp = await client.get(url, headers={"User-Agent": USER_AGENT})
        resp.raise_for_status()
        return resp.text
