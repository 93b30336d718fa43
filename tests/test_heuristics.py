from fractions import Fraction

import pytest

from taixiu_ensemble.analytics.heuristics import (
    HEURISTICS, heuristic_weighted, markov_chain, ngram_matching, pattern_analysis,
    rolling_frequency, weighted_score,
)
from taixiu_ensemble.analytics.patterns import PatternSample, SampleKind, mine
from taixiu_ensemble.core.labels import Outcome

T, X = Outcome.TAI, Outcome.XIU


def _seq(s):
    return [T if c == 'T' else X if c == 'X' else None for c in s]


def _samples(n_tai, n_xiu):
    return ([PatternSample(SampleKind.CANONICAL, (T,), T)] * n_tai
            + [PatternSample(SampleKind.CANONICAL, (X,), X)] * n_xiu)


ALT20 = _seq("TX" * 10)
ALL_TAI = [T] * 20


def test_pattern_alternation_flips_last():
    v = pattern_analysis(ALT20, mine(ALT20), "1-S")
    assert v.outcome is T
    assert "1-1" in v.rationale and "Tài-Xỉu-Tài-Xỉu-Tài-Xỉu" in v.rationale


@pytest.mark.parametrize("tail,expected", [
    ("XXTXXT", X),   # 1-2-1
    ("TTXTTX", T),   # 2-1-2
    ("XTXXXX", X),   # run continues
    ("TTXX", T),     # 2-2 flips after the pair
])
def test_pattern_shapes(tail, expected):
    assert pattern_analysis(_seq(tail), _samples(0, 4), "1-S").outcome is expected


def test_pattern_fallback_uses_sample_majority():
    # XTXT is not one of the recognised shapes
    assert pattern_analysis(_seq("XXTXTT"), _samples(2, 2), "1-S").outcome is T
    assert pattern_analysis(_seq("XXTXTT"), _samples(1, 3), "1-S").outcome is X


@pytest.mark.parametrize("n_tai,expected", [
    (20, X), (14, X), (13, X), (12, X), (11, T), (10, T), (9, X), (8, T), (6, T), (0, T),
])
def test_frequency_bands(n_tai, expected):
    window = [T] * n_tai + [X] * (20 - n_tai)
    assert rolling_frequency(window, _samples(1, 1), "2-S").outcome is expected


def test_frequency_empty_window():
    v = rolling_frequency([], _samples(1, 1), "2-S")
    assert v.outcome is T and "no data" in v.rationale


def test_markov_constant_tai():
    v = markov_chain(ALL_TAI, _samples(1, 1), "3-S")
    assert v.outcome is T and "P(T->T)=100%" in v.rationale


def test_markov_short_window():
    v = markov_chain([X], _samples(0, 1), "3-S")
    assert v.outcome is T and "insufficient data" in v.rationale


def test_ngram_single_earlier_match():
    # suffix TTXT occurs once before, followed by Xỉu
    window = _seq("TTXTXXXXXTTXT")
    v = ngram_matching(window, _samples(5, 0), "4-S")
    assert v.outcome is X and "Found 1 matches" in v.rationale


def test_ngram_falls_back_to_trigram_then_samples():
    # no earlier TXXT, but XXT is followed by Xỉu once
    v = ngram_matching(_seq("XXTXTTXXT"), _samples(5, 0), "4-S")
    assert v.outcome is X and "shorter" in v.rationale
    v = ngram_matching(_seq("TTTTX"), _samples(0, 5), "4-S")
    assert v.outcome is X and "No n-gram match" in v.rationale


def test_weighted_components():
    s = weighted_score(ALT20, _samples(10, 10))
    assert s["pattern"] == 0.5 and s["markov"] == 0.0 and s["freq"] == 0.5 and s["ngram"] == 1.0
    assert heuristic_weighted(ALT20, _samples(10, 10), "5-S").outcome is X
    assert heuristic_weighted(ALL_TAI, mine(ALL_TAI), "5-S").outcome is T


def test_every_heuristic_notes_sample_support():
    samples = mine(ALT20)
    for _, fn in HEURISTICS:
        v = fn(ALT20, samples, "x")
        assert v.rationale.endswith("Sample support: 50% lead to Tài.")
        assert v.outcome in (T, X)


def test_weighted_exact_half_goes_to_xiu():
    # 0.4*9/20 + 0.3*11/30 + 0.2*16/20 + 0.1*1/2 == 1/2 exactly
    window = _seq("TTTTTTXTTTXTTTTTXTXT")
    s = weighted_score(window, _samples(9, 11))
    assert s["total"] == Fraction(1, 2)
    assert s["markov"] == Fraction(11, 30) and s["ngram"] == Fraction(1, 2)
    assert heuristic_weighted(window, _samples(9, 11), "5-S").outcome is X


def test_ngram_tied_counts_favor_tai():
    # suffix TXXT seen twice before, once followed by Tài and once by Xỉu
    window = _seq("TXXTTTXXTXTXXT")
    v = ngram_matching(window, _samples(0, 5), "4-S")
    assert v.outcome is T and "Found 2 matches: Tài=1, Xỉu=1" in v.rationale
