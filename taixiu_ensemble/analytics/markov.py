from dataclasses import dataclass
from fractions import Fraction

from taixiu_ensemble.analytics.stats import binom_two_sided, entropy
from taixiu_ensemble.core.labels import Label, Outcome, count


HALF = Fraction(1, 2)


@dataclass
class MarkovStats:
    transition: list[list[float]]
    counts: list[list[int]]
    last_label: str | None
    p_value_row: dict[str, float]
    entropy: float


class TransitionCounts:
    """First-order Tài/Xỉu transition counts over one window.

    A step is filed by equality tests only: a current Tài goes to the Tài row
    (Tài->Tài when the next is Tài, otherwise Tài->Xỉu); anything else goes to
    the Xỉu row (Xỉu->Xỉu when the next is Xỉu, otherwise Xỉu->Tài).
    """

    def __init__(self):
        self.C = {'T': {'T': 0, 'X': 0}, 'X': {'T': 0, 'X': 0}}
        self.last: Label = None
        self.n = 0

    def push(self, y: Label):
        if self.n:
            if self.last is Outcome.TAI:
                self.C['T']['T' if y is Outcome.TAI else 'X'] += 1
            else:
                self.C['X']['X' if y is Outcome.XIU else 'T'] += 1
        self.last = y
        self.n += 1

    @classmethod
    def build_from(cls, labels: list[Label]) -> "TransitionCounts":
        tc = cls()
        for y in labels:
            tc.push(y)
        return tc

    @property
    def p_tt(self) -> Fraction:
        nT, nX = self.C['T']['T'], self.C['T']['X']
        return Fraction(nT, nT + nX) if nT + nX > 0 else HALF

    @property
    def p_xx(self) -> Fraction:
        nX, nT = self.C['X']['X'], self.C['X']['T']
        return Fraction(nX, nX + nT) if nX + nT > 0 else HALF

    def favor_tai(self) -> Fraction:
        """Exact Tài preference in [0, 1]; 1/2 is neutral."""
        return (self.p_tt - (1 - self.p_xx)) / 2 + HALF

    def predict(self) -> Outcome:
        # continue from the last state when its self-transition holds at >= 50%
        if self.last is Outcome.TAI:
            return Outcome.TAI if self.p_tt >= 0.5 else Outcome.XIU
        return Outcome.XIU if self.p_xx >= 0.5 else Outcome.TAI


def transition_stats(labels: list[Label]) -> MarkovStats:
    tc = TransitionCounts.build_from(labels)
    pTT, pXX = float(tc.p_tt), float(tc.p_xx)
    rows = {
        'T': (tc.C['T']['T'], tc.C['T']['X']),
        'X': (tc.C['X']['T'], tc.C['X']['X']),
    }
    pvals = {i: binom_two_sided(max(a, b), a + b, 0.5) for i, (a, b) in rows.items()}
    nT, nX = count(labels, Outcome.TAI), count(labels, Outcome.XIU)
    return MarkovStats(
        transition=[[pTT, 1 - pTT], [1 - pXX, pXX]],
        counts=[[tc.C['T']['T'], tc.C['T']['X']], [tc.C['X']['T'], tc.C['X']['X']]],
        last_label=tc.last.value if tc.last is not None else None,
        p_value_row=pvals,
        entropy=entropy((nT, nX)),
    )
