"""Title keyword extraction."""

from __future__ import annotations

import re

from newslens.lexicon import Lexicon, default_lexicon

_STRIP = re.compile(r"[^\w\s\-.:/%]")
NUMERIC_ONLY = re.compile(r"^[\d._%]+$")


def tokenize_title(title: str) -> list[str]:
    return _STRIP.sub(" ", title or "").split()


def extract_keywords(
    title: str, max_keywords: int = 8, lexicon: Lexicon | None = None,
) -> list[str]:
    """Most frequent salient tokens of a title, ties in first-seen order."""
    lexicon = lexicon or default_lexicon()
    freq: dict[str, int] = {}
    for token in tokenize_title(title):
        if len(token) < 2 or lexicon.is_filtered(token):
            continue
        if NUMERIC_ONLY.match(token):
            continue
        freq[token] = freq.get(token, 0) + 1

    ranked = sorted(freq.items(), key=lambda kv: kv[1], reverse=True)
    return [word for word, _ in ranked[:max_keywords]]
