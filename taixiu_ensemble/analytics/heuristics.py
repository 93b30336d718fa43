"""The five vote heuristics.

Every heuristic is ``fn(window, samples, model_id) -> Vote``: a pure function
of the outcome window and the mined pattern samples.
"""
from dataclasses import dataclass
from fractions import Fraction
from typing import Callable

from taixiu_ensemble.analytics.markov import HALF, TransitionCounts
from taixiu_ensemble.analytics.patterns import PatternSample, majority_next
from taixiu_ensemble.analytics.stats import pct
from taixiu_ensemble.core.labels import Label, Outcome, count, join, opposite

T, X = Outcome.TAI, Outcome.XIU


@dataclass(frozen=True)
class Vote:
    outcome: Outcome
    rationale: str


def _contains(seq: list[Label], motif: tuple) -> bool:
    n = len(motif)
    return any(tuple(seq[i:i + n]) == motif for i in range(len(seq) - n + 1))


def _support_note(samples: list[PatternSample]) -> str:
    return f" Sample support: {pct(count((s.next for s in samples), T), len(samples))}% lead to Tài."


def pattern_analysis(window: list[Label], samples: list[PatternSample], model_id: str) -> Vote:
    tail = window[-6:]
    key = join(tail)
    tag = f"Model {model_id} (Pattern)"

    if _contains(tail, (T, X, T, X)):
        pred = opposite(tail[-1])
        why = f"{tag}: 1-1 alternation in \"{key}\", expecting it to flip to {pred.value}."
    elif _contains(tail, (T, X, X, T)):
        pred = X
        why = f"{tag}: 1-2-1 shape in \"{key}\", expecting a break to {pred.value}."
    elif _contains(tail, (X, T, T, X)):
        pred = T
        why = f"{tag}: 2-1-2 shape in \"{key}\", next tends to {pred.value}."
    elif _contains(tail, (T, T, T)) or _contains(tail, (X, X, X)):
        # a run whose last slot is unknown continues the run itself
        pred = tail[-1] if tail[-1] is not None else (T if _contains(tail, (T, T, T)) else X)
        why = f"{tag}: run of 3+ in \"{key}\", following the run: {pred.value} (breaks get likelier as it grows)."
    elif _contains(tail, (T, T, X, X)):
        pred = opposite(tail[-1])
        why = f"{tag}: 2-2 blocks in \"{key}\", expecting a flip after the pair: {pred.value}."
    else:
        pred = majority_next(samples)
        lead = count((s.next for s in samples), T)
        why = (f"{tag}: no known shape in \"{key}\". "
               f"{lead} of {len(samples)} samples lead to Tài, predicting {pred.value}.")
    return Vote(pred, why + _support_note(samples))


def rolling_frequency(window: list[Label], samples: list[PatternSample], model_id: str) -> Vote:
    tag = f"Model {model_id} (Frequency)"
    if not window:
        return Vote(T, f"{tag}: no data." + _support_note(samples))
    pct_tai = pct(count(window, T), len(window))
    why = f"{tag}: Tài is {pct_tai}% of the last {len(window)} rounds. "
    if pct_tai >= 70:
        pred = X
        why += "Tài at 70% or more, expecting a swing back to Xỉu."
    elif pct_tai <= 30:
        pred = T
        why += "Tài at 30% or less, expecting Tài to catch up."
    else:
        if pct_tai > 55:
            pred = X
        elif pct_tai < 45:
            pred = T
        elif pct_tai >= 50:
            pred = T
        else:
            pred = X
        why += f"Middle band, balance/continuation rule picks {pred.value}."
    return Vote(pred, why + _support_note(samples))


def markov_chain(window: list[Label], samples: list[PatternSample], model_id: str) -> Vote:
    tag = f"Model {model_id} (Markov)"
    if len(window) < 2:
        return Vote(T, f"{tag}: insufficient data for a transition matrix." + _support_note(samples))
    tc = TransitionCounts.build_from(window)
    pred = tc.predict()
    last = window[-1].value if window[-1] is not None else "?"
    why = (f"{tag}: P(T->T)={pct(tc.p_tt, 1)}%, P(X->X)={pct(tc.p_xx, 1)}%. "
           f"Current \"{last}\", predicting {pred.value}.")
    return Vote(pred, why + _support_note(samples))


def _ngram_index(window: list[Label], n: int) -> dict[tuple, dict]:
    index: dict[tuple, dict] = {}
    for i in range(0, len(window) - n):
        entry = index.setdefault(tuple(window[i:i + n]), {T: 0, X: 0, "total": 0})
        nxt = window[i + n]
        if nxt is not None:
            entry[nxt] += 1
        entry["total"] += 1
    return index


def ngram_matching(window: list[Label], samples: list[PatternSample], model_id: str) -> Vote:
    n = min(4, max(3, len(window) - 1))
    suffix = tuple(window[-n:])
    index = _ngram_index(window, n)
    why = f"Model {model_id} (N-gram): matching length {n} \"{join(suffix)}\". "

    if suffix in index:
        e = index[suffix]
        pred = T if e[T] >= e[X] else X
        why += f"Found {e['total']} matches: Tài={e[T]}, Xỉu={e[X]}. Predicting {pred.value}."
        return Vote(pred, why + _support_note(samples))

    if n > 3:
        shorter = tuple(window[-3:])
        e = _ngram_index(window, 3).get(shorter)
        if e is not None:
            pred = T if e[T] >= e[X] else X
            why += f"No exact match, using shorter \"{join(shorter)}\": Tài={e[T]}, Xỉu={e[X]}, predicting {pred.value}."
            return Vote(pred, why + _support_note(samples))

    pred = majority_next(samples)
    lead = count((s.next for s in samples), T)
    why += f"No n-gram match. Samples: {lead}/{len(samples)} lead to Tài, predicting {pred.value}."
    return Vote(pred, why + _support_note(samples))


def _ngram_favor(window: list[Label]) -> Fraction:
    last4 = tuple(window[-4:])
    for i in range(0, len(window) - 4):
        if tuple(window[i:i + 4]) == last4:
            return Fraction(1) if window[i + 4] is T else Fraction(0)
    return HALF


WEIGHTS = {"pattern": Fraction(2, 5), "markov": Fraction(3, 10), "freq": Fraction(1, 5), "ngram": Fraction(1, 10)}


def weighted_score(window: list[Label], samples: list[PatternSample]) -> dict:
    """Component Tài shares and their weighted total, all as exact fractions."""
    parts = {
        "pattern": Fraction(count((s.next for s in samples), T), len(samples)) if samples else HALF,
        "markov": TransitionCounts.build_from(window).favor_tai(),
        "freq": Fraction(count(window, T), len(window)) if window else HALF,
        "ngram": _ngram_favor(window),
    }
    parts["total"] = sum(WEIGHTS[k] * parts[k] for k in WEIGHTS)
    return parts


def heuristic_weighted(window: list[Label], samples: list[PatternSample], model_id: str) -> Vote:
    s = weighted_score(window, samples)
    # exactly 1/2 goes to Xỉu
    pred = T if s["total"] > HALF else X
    why = (f"Model {model_id} (Heuristic): weights Pattern 40% ({pct(s['pattern'], 1)}%), "
           f"Markov 30% ({pct(s['markov'], 1)}%), Freq 20% ({pct(s['freq'], 1)}%), "
           f"Ngram 10% ({pct(s['ngram'], 1)}%). Tài score {pct(s['total'], 1)}%, predicting {pred.value}.")
    return Vote(pred, why + _support_note(samples))


Heuristic = Callable[[list[Label], list[PatternSample], str], Vote]

HEURISTICS: list[tuple[str, Heuristic]] = [
    ("Pattern Analysis", pattern_analysis),
    ("Rolling Frequency", rolling_frequency),
    ("Markov Chain", markov_chain),
    ("N-gram Matching", ngram_matching),
    ("Heuristic Weighted", heuristic_weighted),
]
