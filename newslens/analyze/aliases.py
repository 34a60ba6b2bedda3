"""Alias generation: rule-based query variants plus PMI-ranked co-occurring terms."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from newslens.cache import ALIAS_TTL_SECONDS, TTLCache
from newslens.lexicon import Lexicon, default_lexicon
from newslens.models import PMIScore
from newslens.process.keywords import NUMERIC_ONLY

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 12
MAX_CANDIDATES = 500
PMI_WINDOW = 280
EPS_MARGINAL = 1e-9
EPS_JOINT = 1e-12

CURRENCY_PAIR = re.compile(r"^[A-Z]{6}$")
MARKET_CODE = re.compile(r"^\d{6}$")
_SEPARATOR_RUN = re.compile(r"[-_/:\s]+")

_CANDIDATE_STRIP = re.compile(r"[^\w._%/:\-\s]")
_PROPER_NOUN = re.compile(r"[A-Z][A-Za-z0-9._-]+")
_CJK_RUN = re.compile(r"[가-힣぀-ヿ一-鿿]{2,}")
_PERCENT = re.compile(r"[A-Za-z0-9]+%")


@dataclass(frozen=True)
class ArticleText:
    """The part of an article alias mining looks at."""

    title: str
    summary: str = ""

    @property
    def text(self) -> str:
        return f"{self.title or ''} {self.summary or ''}"


def _add(out: list[str], value: str) -> None:
    if value and value not in out:
        out.append(value)


def rule_based_aliases(query: str, lexicon: Lexicon | None = None) -> list[str]:
    """Deterministic surface variants of the query, in insertion order."""
    lexicon = lexicon or default_lexicon()
    clean = query.strip()
    out: list[str] = []

    if CURRENCY_PAIR.match(clean):
        base, quote = clean[:3], clean[3:]
        _add(out, f"{base}/{quote}")
        _add(out, f"{base}-{quote}")
        _add(out, f"{base}{quote}")
        for alias in lexicon.currency_pairs.get(clean, ()):
            _add(out, alias)

    if MARKET_CODE.match(clean):
        _add(out, clean)

    _add(out, clean)
    _add(out, clean.lower())
    _add(out, clean.upper())
    _add(out, _SEPARATOR_RUN.sub("", clean))
    _add(out, _SEPARATOR_RUN.sub("/", clean))
    return out


def _is_candidate(token: str) -> bool:
    return bool(
        _PROPER_NOUN.search(token)
        or _CJK_RUN.search(token)
        or _PERCENT.search(token)
    )


def extract_candidate_phrases(
    sample: Sequence[ArticleText],
    lexicon: Lexicon | None = None,
    limit: int = MAX_CANDIDATES,
) -> list[str]:
    """Proper-noun-like, CJK and percentage tokens ranked by frequency."""
    lexicon = lexicon or default_lexicon()
    freq: dict[str, int] = {}
    for article in sample:
        for token in _CANDIDATE_STRIP.sub(" ", article.text).split():
            if not _is_candidate(token):
                continue
            if not 2 <= len(token) <= 30:
                continue
            if NUMERIC_ONLY.match(token) or lexicon.is_filtered(token):
                continue
            freq[token] = freq.get(token, 0) + 1

    ranked = sorted(freq.items(), key=lambda kv: kv[1], reverse=True)
    return [term for term, _ in ranked[:limit]]


def calc_pmi(
    query: str,
    sample: Sequence[ArticleText],
    candidates: Sequence[str],
    window: int = PMI_WINDOW,
) -> list[PMIScore]:
    """Rank candidates by PMI with the query plus a log co-occurrence bonus.

    Document presence is a case-insensitive substring test on the first
    `window` characters of title + summary. Candidates never seen alongside
    the query are dropped.
    """
    if not candidates:
        return []

    n = len(sample) or 1
    q = query.lower()
    lowered = [c.lower() for c in candidates]

    has_q = np.zeros(len(sample), dtype=bool)
    has_c = np.zeros((len(sample), len(candidates)), dtype=bool)
    for i, article in enumerate(sample):
        text = article.text[:window].lower()
        has_q[i] = q in text
        has_c[i] = [c in text for c in lowered]

    doc_q = int(has_q.sum())
    cand_docs = has_c.sum(axis=0)
    co_docs = has_c[has_q].sum(axis=0)

    p_q = doc_q / n or EPS_MARGINAL
    p_c = cand_docs / n
    p_c = np.where(p_c == 0, EPS_MARGINAL, p_c)
    p_qc = co_docs / n
    p_qc = np.where(p_qc == 0, EPS_JOINT, p_qc)
    pmi = np.log(p_qc / (p_q * p_c))

    rank = pmi + np.log1p(co_docs)
    order = np.argsort(-rank, kind="stable")
    return [
        PMIScore(
            term=candidates[i],
            pmi=float(pmi[i]),
            co_docs=int(co_docs[i]),
            doc_freq=int(cand_docs[i]),
        )
        for i in order
        if co_docs[i] >= 1
    ]


class AliasGenerator:
    """Builds and caches the alias set of a query."""

    def __init__(
        self,
        cache: TTLCache[tuple[str, ...]] | None = None,
        lexicon: Lexicon | None = None,
        top_n: int = DEFAULT_TOP_N,
    ):
        if cache is None:
            cache = TTLCache(ALIAS_TTL_SECONDS, name="alias-cache")
        self.cache = cache
        self.lexicon = lexicon or default_lexicon()
        self.top_n = top_n

    def generate(
        self,
        query: str,
        sample: Sequence[ArticleText],
        top_n: int | None = None,
    ) -> list[str]:
        """Alias list for `query`; callers get a fresh copy of the cached set."""
        cached = self.cache.get(query)
        if cached is not None:
            return list(cached)

        if top_n is None:
            top_n = self.top_n
        aliases = rule_based_aliases(query, self.lexicon)
        rule_count = len(aliases)

        candidates = extract_candidate_phrases(sample, self.lexicon)
        ranked = calc_pmi(query, sample, candidates)
        q = query.lower()
        for score in ranked:
            if len(aliases) >= top_n:
                break
            if score.term.lower() == q:
                continue
            _add(aliases, score.term)

        aliases = aliases[:top_n]
        logger.info(
            "Generated %d aliases for '%s' (%d rule-based, %d ranked candidates)",
            len(aliases), query, min(rule_count, top_n), len(ranked),
        )
        self.cache.put(query, tuple(aliases))
        return aliases
