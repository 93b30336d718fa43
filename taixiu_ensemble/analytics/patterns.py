import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from taixiu_ensemble.core.labels import Label, Outcome, count, join

logger = logging.getLogger(__name__)

T, X = Outcome.TAI, Outcome.XIU

WINDOW_LENGTHS = (5, 4, 3)

# Share of the sample set each mining stage may fill.
WINDOW_SHARE = 0.6
RUN_SHARE = 0.15
ALT_SHARE = 0.10

CANONICAL = (
    ((T, X, T, X), T),
    ((X, T, X, T), X),
    ((T, T, X, X), T),
    ((X, X, T, T), X),
    ((T, T, T, X), X),
    ((X, X, X, T), T),
    ((T, X, X, T), X),
    ((X, T, T, X), T),
)


class SampleKind(str, Enum):
    WINDOW = "match"
    RUN = "run"
    ALTERNATION = "1-1"
    CANONICAL = "canonical"
    PAD = "pad"


@dataclass(frozen=True)
class PatternSample:
    kind: SampleKind
    pattern: tuple
    next: Outcome

    @property
    def key(self) -> str:
        return join(self.pattern)


@dataclass
class WindowStat:
    pattern: tuple
    total: int = 0
    tai_next: int = 0
    xiu_next: int = 0

    @property
    def decisive(self) -> int:
        return abs(self.tai_next - self.xiu_next)

    @property
    def score(self) -> int:
        return self.total * self.decisive

    @property
    def next(self) -> Outcome:
        return T if self.tai_next >= self.xiu_next else X


def runs(labels: Iterable[Label], k: int = 3):
    """Maximal runs of one outcome, as (start, end, label, length). Unknowns never join a run."""
    labels = list(labels)
    out = []
    i = 0
    while i < len(labels):
        cur = labels[i]
        j = i + 1
        if cur is not None:
            while j < len(labels) and labels[j] is cur:
                j += 1
        seg_len = j - i
        if cur is not None and seg_len >= k:
            out.append((i, j - 1, cur, seg_len))
        i = j
    return out


def alternations(labels: Iterable[Label], L: int = 4):
    """Start index of every strict a,b,a,b window of length 4."""
    labels = list(labels)
    out = []
    for i in range(0, len(labels) - L + 1):
        a, b, c, d = labels[i:i + 4]
        if a is not None and b is not None and a is not b and a is c and b is d:
            out.append(i)
    return out


def blocks(labels: Iterable[Label]):
    # (TTXX)+ or (XXTT)+ segments, as (start, end, chunk, repeats)
    labels = list(labels)
    out = []
    i = 0
    while i + 3 < len(labels):
        chunk = tuple(labels[i:i + 4])
        if chunk in ((T, T, X, X), (X, X, T, T)):
            j = i + 4
            while j + 3 < len(labels) and tuple(labels[j:j + 4]) == chunk:
                j += 4
            out.append((i, j - 1, join(chunk), (j - i) // 4))
            i = j
        else:
            i += 1
    return out


def window_stats(history: list[Label], lengths=WINDOW_LENGTHS) -> list[WindowStat]:
    """Every window that has a follower, keyed by its exact outcome tuple, first-seen order."""
    stats: dict[tuple, WindowStat] = {}
    for n in lengths:
        for i in range(0, len(history) - n):
            key = tuple(history[i:i + n])
            st = stats.get(key)
            if st is None:
                st = stats[key] = WindowStat(key)
            st.total += 1
            nxt = history[i + n]
            if nxt is T:
                st.tai_next += 1
            elif nxt is X:
                st.xiu_next += 1
    return list(stats.values())


def _run_samples(history: list[Label]) -> list[PatternSample]:
    found = runs(history, k=3)
    # stable: equal lengths keep scan order
    found.sort(key=lambda r: r[3], reverse=True)
    out = []
    for start, end, label, _ in found:
        follower = history[end + 1] if end + 1 < len(history) else None
        nxt = follower if follower is not None else label.opposite
        out.append(PatternSample(SampleKind.RUN, tuple(history[start:end + 1]), nxt))
    return out


def _alternation_samples(history: list[Label]) -> list[PatternSample]:
    out = []
    for i in alternations(history, L=4):
        window = tuple(history[i:i + 4])
        out.append(PatternSample(SampleKind.ALTERNATION, window, window[3].opposite))
    return out


def mine(history: list[Label], sample_count: int = 20) -> list[PatternSample]:
    """Rank recurring windows and motifs into exactly ``sample_count`` samples.

    Stages fill in order: frequent decisive windows, longest runs,
    alternations, fixed canonical motifs, then 4-windows over the last 20
    outcomes as padding, cycling over those positions until the count is
    reached. Earlier stages always come first in the result.
    """
    samples: list[PatternSample] = []

    ranked = sorted(window_stats(history), key=lambda w: w.score, reverse=True)
    for w in ranked[:int(sample_count * WINDOW_SHARE)]:
        samples.append(PatternSample(SampleKind.WINDOW, w.pattern, w.next))

    samples.extend(_run_samples(history)[:int(sample_count * RUN_SHARE)])
    samples.extend(_alternation_samples(history)[:int(sample_count * ALT_SHARE)])

    for pattern, nxt in CANONICAL:
        if len(samples) >= sample_count:
            break
        samples.append(PatternSample(SampleKind.CANONICAL, pattern, nxt))

    tail = history[-20:]
    positions = max(1, len(tail) - 3)
    idx = 0
    while len(samples) < sample_count:
        pos = idx % positions
        ahead = tail[pos + 4] if pos + 4 < len(tail) else None
        # an empty history has no last outcome and pads with Xỉu
        last = ahead if ahead is not None else (tail[-1] if tail else None)
        samples.append(PatternSample(SampleKind.PAD, tuple(tail[pos:pos + 4]), T if last is T else X))
        idx += 1

    samples = samples[:sample_count]
    tai = count((s.next for s in samples), T)
    logger.info("Mined %d pattern samples (Tài next: %d, Xỉu next: %d)", len(samples), tai, len(samples) - tai)
    return samples


def tai_share(samples: list[PatternSample]) -> float:
    if not samples:
        return 0.0
    return count((s.next for s in samples), T) / len(samples)


def majority_next(samples: list[PatternSample]) -> Outcome:
    # ties go to Tài
    tai = count((s.next for s in samples), T)
    return T if tai >= len(samples) / 2 else X
