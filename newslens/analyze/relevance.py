"""Title relevance against the query and its aliases."""

from __future__ import annotations

from collections.abc import Iterable


def relevance_score(title: str, query: str, aliases: Iterable[str]) -> float:
    """Fraction of match keys found in the title, saturating at half the keys."""
    t = (title or "").lower()
    keys = {query.lower(), *(a.lower() for a in aliases)}
    hits = sum(1 for k in keys if k and k in t)
    denom = max(1, len(keys) // 2)
    return min(1.0, hits / denom)
