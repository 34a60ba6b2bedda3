"""Tests for rule-based aliases, candidate mining, PMI ranking and caching."""

from __future__ import annotations

import math

import pytest

from newslens.analyze.aliases import (
    AliasGenerator,
    ArticleText,
    calc_pmi,
    extract_candidate_phrases,
    rule_based_aliases,
)
from newslens.cache import TTLCache
from newslens.lexicon import default_lexicon

KNOWN_PAIRS = ["USDKRW", "USDJPY", "EURUSD", "USDCNY", "EURKRW", "JPYKRW", "CNYKRW"]


# --- Rule-based stage ---


def test_currency_pair_variants_come_first():
    aliases = rule_based_aliases("USDKRW")
    assert aliases[:3] == ["USD/KRW", "USD-KRW", "USDKRW"]
    assert "달러/원" in aliases
    assert "환율" in aliases
    assert "usdkrw" in aliases
    assert len(aliases) == len(set(aliases))


@pytest.mark.parametrize("pair", KNOWN_PAIRS)
def test_known_pairs_include_dictionary_entries(pair):
    aliases = rule_based_aliases(pair)
    base, quote = pair[:3], pair[3:]
    assert {f"{base}/{quote}", f"{base}-{quote}", pair} <= set(aliases)
    assert set(default_lexicon().currency_pairs[pair]) <= set(aliases)


def test_unknown_pair_gets_shape_variants_only():
    assert rule_based_aliases("GBPUSD") == ["GBP/USD", "GBP-USD", "GBPUSD", "gbpusd"]


def test_six_digit_market_code():
    assert rule_based_aliases("005930") == ["005930"]


def test_free_text_variants():
    assert rule_based_aliases("Samsung Electronics") == [
        "Samsung Electronics",
        "samsung electronics",
        "SAMSUNG ELECTRONICS",
        "SamsungElectronics",
        "Samsung/Electronics",
    ]


def test_query_is_stripped_and_separators_normalized():
    assert rule_based_aliases("  brk-b ") == ["brk-b", "BRK-B", "brkb", "brk/b"]


def test_lowercase_six_letters_is_not_a_pair():
    assert "usd/krw" not in rule_based_aliases("usdkrw")


# --- Candidate phrases ---


def test_candidate_phrases_ranked_by_frequency():
    sample = [
        ArticleText("Samsung shares jump 3% after Nvidia deal"),
        ArticleText("Nvidia and Samsung expand 삼성전자 partnership"),
        ArticleText("Breaking Samsung"),
    ]
    assert extract_candidate_phrases(sample) == ["Samsung", "Nvidia", "삼성전자"]


def test_candidate_phrases_include_summary_and_percentages():
    sample = [ArticleText("Chip output", "Q3 yield up 12% at TSMC, margin 5bp%")]
    candidates = extract_candidate_phrases(sample)
    assert "Q3" in candidates
    assert "TSMC" in candidates
    assert "5bp%" in candidates
    assert "12%" not in candidates


def test_candidate_phrases_length_bounds():
    sample = [ArticleText("A " + "B" * 31 + " Ok")]
    assert extract_candidate_phrases(sample) == ["Ok"]


def test_candidate_phrases_empty_sample():
    assert extract_candidate_phrases([]) == []


# --- PMI ---


def test_pmi_value_and_zero_cooccurrence_dropped():
    sample = [
        ArticleText("Samsung Nvidia deal"),
        ArticleText("Samsung Nvidia chips"),
        ArticleText("Apple earnings"),
        ArticleText("Nvidia Apple"),
    ]
    ranked = calc_pmi("Samsung", sample, ["Nvidia", "Apple"])
    assert [r.term for r in ranked] == ["Nvidia"]
    assert ranked[0].pmi == pytest.approx(math.log(4 / 3))
    assert ranked[0].co_docs == 2
    assert ranked[0].doc_freq == 3


def test_pmi_ranking_adds_cooccurrence_bonus():
    sample = [
        ArticleText("Samsung Alpha Beta"),
        ArticleText("Samsung Beta"),
        ArticleText("other"),
        ArticleText("news"),
    ]
    ranked = calc_pmi("Samsung", sample, ["Alpha", "Beta"])
    # Alpha: pmi ln2, co 1 -> ln4; Beta: pmi ln2, co 2 -> ln2 + ln3
    assert [r.term for r in ranked] == ["Beta", "Alpha"]
    assert ranked[0].rank == pytest.approx(math.log(2) + math.log(3))


def test_pmi_is_case_insensitive():
    ranked = calc_pmi("samsung", [ArticleText("SAMSUNG NVIDIA")], ["Nvidia"])
    assert [r.term for r in ranked] == ["Nvidia"]


def test_pmi_only_looks_at_leading_window():
    sample = [ArticleText("a" * 300 + " Samsung Nvidia")]
    assert calc_pmi("Samsung", sample, ["Nvidia"]) == []


def test_pmi_empty_inputs():
    assert calc_pmi("Samsung", [], ["Nvidia"]) == []
    assert calc_pmi("Samsung", [ArticleText("Samsung")], []) == []


# --- Generator ---

FX_SAMPLE = [
    ArticleText("USDKRW climbs as Fed holds"),
    ArticleText("USDKRW slips after BOK comment"),
    ArticleText("Fed minutes"),
    ArticleText("KOSPI rally"),
]


def test_generate_fills_with_ranked_candidates(clock):
    generator = AliasGenerator(TTLCache(1800, clock))
    aliases = generator.generate("USDKRW", FX_SAMPLE)
    rules = rule_based_aliases("USDKRW")
    assert aliases[: len(rules)] == rules
    assert aliases[len(rules):] == ["BOK", "Fed"]
    assert len(aliases) == 12
    assert "KOSPI" not in aliases


def test_generate_truncates_to_top_n(clock):
    generator = AliasGenerator(TTLCache(1800, clock))
    aliases = generator.generate("USDKRW", FX_SAMPLE, top_n=11)
    assert len(aliases) == 11
    assert aliases[-1] == "BOK"


def test_generate_truncates_rule_aliases_when_top_n_small(clock):
    generator = AliasGenerator(TTLCache(1800, clock))
    aliases = generator.generate("USDKRW", FX_SAMPLE, top_n=3)
    assert aliases == ["USD/KRW", "USD-KRW", "USDKRW"]


def test_generate_skips_query_case_insensitively(clock):
    generator = AliasGenerator(TTLCache(1800, clock))
    aliases = generator.generate("samsung", [ArticleText("Samsung Nvidia deal")])
    assert aliases == ["samsung", "SAMSUNG", "Nvidia"]


def test_generate_zero_article_sample_uses_rules_only(clock):
    generator = AliasGenerator(TTLCache(1800, clock))
    assert generator.generate("USDKRW", []) == rule_based_aliases("USDKRW")


def test_generate_is_cached_by_raw_query(clock):
    generator = AliasGenerator(TTLCache(1800, clock))
    first = generator.generate("USDKRW", FX_SAMPLE)
    second = generator.generate("USDKRW", [])
    assert second == first

    # Different casing is a different key
    assert generator.generate("usdkrw", []) != first


def test_generate_returns_copies_of_cached_aliases(clock):
    generator = AliasGenerator(TTLCache(1800, clock))
    first = generator.generate("USDKRW", FX_SAMPLE)
    first.append("injected")

    second = generator.generate("USDKRW", [])
    assert "injected" not in second
    second.clear()
    assert generator.generate("USDKRW", [])[-2:] == ["BOK", "Fed"]


def test_generate_explicit_zero_top_n(clock):
    generator = AliasGenerator(TTLCache(1800, clock))
    assert generator.generate("USDKRW", FX_SAMPLE, top_n=0) == []


def test_generate_recomputes_after_ttl(clock):
    generator = AliasGenerator(TTLCache(1800, clock))
    first = generator.generate("USDKRW", FX_SAMPLE)
    clock.advance(1801)
    second = generator.generate("USDKRW", [])
    assert second == rule_based_aliases("USDKRW")
    assert second != first
