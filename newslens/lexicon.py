"""Versioned word lists loaded from YAML."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_LEXICON_PATH = Path(__file__).parent / "data" / "lexicon.yaml"

REQUIRED_KEYS = ("positive", "negative", "stopwords", "banwords")


@dataclass(frozen=True)
class Lexicon:
    """Static word lists shared by keyword, alias and sentiment stages.

    `positive` / `negative` drive the whole-text lexicon scorer. The targeted
    scorer recognises those plus `positive_cues` / `negative_cues`, and skips
    `noise_terms` entirely. Stopwords and banwords are stored lower-cased.
    """

    version: int
    positive: tuple[str, ...]
    negative: tuple[str, ...]
    stopwords: frozenset[str]
    banwords: frozenset[str]
    positive_cues: frozenset[str] = field(default_factory=frozenset)
    negative_cues: frozenset[str] = field(default_factory=frozenset)
    noise_terms: frozenset[str] = field(default_factory=frozenset)
    currency_pairs: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def is_filtered(self, word: str) -> bool:
        """True for stopwords and banwords (case-insensitive)."""
        w = word.lower()
        return w in self.stopwords or w in self.banwords


def _words(raw: dict, key: str) -> list[str]:
    return [str(w) for w in raw.get(key) or []]


def load_lexicon(path: str | Path | None = None) -> Lexicon:
    """Load a lexicon file; defaults to the bundled one."""
    path = Path(path) if path else DEFAULT_LEXICON_PATH
    if not path.exists():
        raise FileNotFoundError(f"Lexicon file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    missing = [k for k in REQUIRED_KEYS if k not in raw]
    if missing:
        raise ValueError(f"Lexicon {path} missing keys: {', '.join(missing)}")

    positive = _words(raw, "positive")
    negative = _words(raw, "negative")
    lexicon = Lexicon(
        version=int(raw.get("version", 0)),
        positive=tuple(positive),
        negative=tuple(negative),
        stopwords=frozenset(w.lower() for w in _words(raw, "stopwords")),
        banwords=frozenset(w.lower() for w in _words(raw, "banwords")),
        positive_cues=frozenset(
            w.lower() for w in positive + _words(raw, "positive_cues")
        ),
        negative_cues=frozenset(
            w.lower() for w in negative + _words(raw, "negative_cues")
        ),
        noise_terms=frozenset(w.lower() for w in _words(raw, "noise_terms")),
        currency_pairs={
            str(pair): tuple(str(a) for a in aliases or [])
            for pair, aliases in (raw.get("currency_pairs") or {}).items()
        },
    )
    logger.debug("Loaded lexicon v%d from %s", lexicon.version, path)
    return lexicon


_default: Lexicon | None = None


def default_lexicon() -> Lexicon:
    """Bundled lexicon, loaded once per process."""
    global _default
    if _default is None:
        _default = load_lexicon()
    return _default
