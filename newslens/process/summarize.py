"""Extractive summarizer: picks the most informative sentences."""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")
_SENTENCE = re.compile(r"[^.!?。！？]+[.!?。！？]?")
_DIGIT = re.compile(r"[0-9]")
_PROPER_NOUN = re.compile(r"[A-Z가-힣][a-z가-힣]+")


def score_sentence(sentence: str) -> float:
    """Digit bonus + proper-noun bonus + length bonus (capped at 1)."""
    score = 0.0
    if _DIGIT.search(sentence):
        score += 1
    if _PROPER_NOUN.search(sentence):
        score += 1
    return score + min(len(sentence) / 80, 1.0)


def summarize(text: str, max_sentences: int = 2) -> str:
    """Return the top-scoring sentences joined by a space.

    Output follows descending score, not document order; equal scores keep
    their original order.
    """
    text = _WHITESPACE.sub(" ", text or "").strip()
    if not text:
        return ""

    sentences = _SENTENCE.findall(text) or [text]
    scored = [(s.strip(), score_sentence(s)) for s in sentences]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return " ".join(s for s, _ in scored[:max_sentences])
