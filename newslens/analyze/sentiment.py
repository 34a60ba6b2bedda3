"""Lexicon sentiment and query-targeted (windowed) sentiment."""

from __future__ import annotations

import re
from collections.abc import Iterable

from newslens.lexicon import Lexicon, default_lexicon
from newslens.models import SentimentResult, label_for_score

LEXICON_THRESHOLD = 0.1
DEFAULT_WINDOW = 12
DAMPING = 0.85

NEUTRAL = SentimentResult(label="neu", score=0.0)

_SEPARATORS = re.compile(r"[^\w%./:\-\s]|_")


def lexicon_sentiment(text: str, lexicon: Lexicon | None = None) -> SentimentResult:
    """Whole-text polarity from word-list containment.

    Each listed word counts once if it appears anywhere in the text, so
    "rallying" hits "rally". Score is (pos - neg) / max(1, pos + neg).
    """
    lexicon = lexicon or default_lexicon()
    t = (text or "").lower()
    if not t:
        return NEUTRAL

    pos = sum(1 for w in lexicon.positive if w.lower() in t)
    neg = sum(1 for w in lexicon.negative if w.lower() in t)
    score = (pos - neg) / max(1, pos + neg)
    return SentimentResult(
        label=label_for_score(score, LEXICON_THRESHOLD), score=score,
    )


def tokenize(text: str) -> list[str]:
    """Lower-cased tokens; positions are list indices."""
    return _SEPARATORS.sub(" ", (text or "").lower()).split()


def find_centers(tokens: list[str], keys: Iterable[str]) -> list[int]:
    """Positions of tokens containing any key as a substring."""
    keys = [k.lower() for k in keys if k]
    return [i for i, tok in enumerate(tokens) if any(k in tok for k in keys)]


def targeted_sentiment(
    text: str,
    query: str,
    aliases: Iterable[str],
    lexicon: Lexicon | None = None,
    window: int = DEFAULT_WINDOW,
) -> SentimentResult:
    """Sentiment from cue words near mentions of the query or its aliases.

    Every token within +/- `window` of a mention contributes
    1 / (1 + distance), signed by cue polarity. Noise terms never contribute.
    Text with no mention falls back to `lexicon_sentiment`.
    """
    lexicon = lexicon or default_lexicon()
    tokens = tokenize(text)
    if not tokens:
        return NEUTRAL

    centers = find_centers(tokens, [query, *aliases])
    if not centers:
        return lexicon_sentiment(text, lexicon)

    num = 0.0
    den = 0.0
    last = len(tokens) - 1
    for c in centers:
        for j in range(max(0, c - window), min(last, c + window) + 1):
            tok = tokens[j]
            if tok in lexicon.noise_terms:
                continue
            weight = 1 / (1 + abs(j - c))
            if tok in lexicon.positive_cues:
                num += weight
                den += weight
            elif tok in lexicon.negative_cues:
                num -= weight
                den += weight

    if den == 0:
        return NEUTRAL

    score = max(-1.0, min(1.0, (num / den) * DAMPING))
    return SentimentResult(label=label_for_score(score), score=score)
