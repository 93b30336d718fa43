"""Ensemble vote over the five heuristics on a short and a long window."""
import logging
from dataclasses import dataclass, field

from taixiu_ensemble.analytics.heuristics import HEURISTICS, Vote
from taixiu_ensemble.analytics.patterns import PatternSample, mine
from taixiu_ensemble.core.labels import Label, Outcome, count, join
from taixiu_ensemble.core.normalize import normalize

logger = logging.getLogger(__name__)

UNDETERMINED = "Undetermined"
NO_DATA = "Insufficient data"

DISCLAIMER = (
    "Note: this reading of the road is built from past rounds only and cannot be "
    "guaranteed correct. Treat it as one reference among others and manage stakes "
    "(Kelly or fixed sizing) accordingly."
)


@dataclass
class EnsembleResult:
    outcome: Outcome | None
    confidence: int
    summary: str
    rationale: str
    votes_tai: int = 0
    votes_xiu: int = 0
    insufficient: bool = False
    samples: list[PatternSample] = field(default_factory=list)
    votes: list[Vote] = field(default_factory=list)

    @property
    def label(self) -> str:
        if self.insufficient:
            return NO_DATA
        return self.outcome.value if self.outcome is not None else UNDETERMINED

    @property
    def confidence_text(self) -> str:
        return f"{self.confidence}%"


def insufficient_result(min_history: int = 20) -> EnsembleResult:
    return EnsembleResult(
        outcome=None,
        confidence=0,
        summary=f"Not enough history (at least {min_history} rounds are needed).",
        rationale=f"The engine needs at least {min_history} past rounds to mine patterns and run the ensemble.",
        insufficient=True,
    )


def tally(votes: list[Vote]) -> tuple[Outcome | None, int, int, int]:
    """(final outcome or None on a tie, Tài votes, Xỉu votes, confidence %)."""
    tai = sum(1 for v in votes if v.outcome is Outcome.TAI)
    xiu = sum(1 for v in votes if v.outcome is Outcome.XIU)
    final = None
    if tai > xiu:
        final = Outcome.TAI
    elif xiu > tai:
        final = Outcome.XIU
    confidence = round(max(tai, xiu) * 100 / len(votes)) if votes else 0
    return final, tai, xiu, confidence


def build_explanation(result: EnsembleResult, history: list[Label]) -> str:
    total = len(result.votes)
    samples = result.samples
    lead = count((s.next for s in samples), Outcome.TAI)

    text = (f"ENSEMBLE: main prediction is **{result.label}** (confidence {result.confidence}%). "
            f"Votes: Tài {result.votes_tai}/{total}, Xỉu {result.votes_xiu}/{total}.\n\n")
    text += (f"Pattern samples ({len(samples)} total): {lead} lead to Tài, {len(samples) - lead} lead to Xỉu. "
             "The top samples cover the usual road shapes: runs, 1-1, 2-2, 1-2-1, 2-1-2, 3-1, 1-3, 2-3, 3-2, 4-1, 1-4.\n\n")
    text += "Per-model reasoning:\n"
    for i, v in enumerate(result.votes, start=1):
        text += f"• AI #{i}: {v.rationale}\n"
    text += f"\nReference data (last 10 rounds): {join(history[-10:])}.\n"
    text += f"\n{DISCLAIMER}\n"
    return text


def predict_history(history: list[Label], sample_count: int = 20, min_history: int = 20,
                    short_window: int = 20, long_window: int = 50) -> EnsembleResult:
    if len(history) < min_history:
        logger.info("History has %d rounds, need %d; skipping prediction", len(history), min_history)
        return insufficient_result(min_history)

    short = history[-short_window:]
    long_ = history[-long_window:]
    if len(long_) < min_history:
        long_ = list(history)

    samples = mine(history, sample_count)

    votes: list[Vote] = []
    for idx, (_, fn) in enumerate(HEURISTICS, start=1):
        votes.append(fn(list(short), samples, f"{idx}-S"))
        votes.append(fn(list(long_), samples, f"{idx}-L"))

    final, tai, xiu, confidence = tally(votes)
    logger.info("Ensemble tally: Tài %d, Xỉu %d -> %s (%d%%)", tai, xiu,
                final.value if final else UNDETERMINED, confidence)

    result = EnsembleResult(
        outcome=final,
        confidence=confidence,
        summary="",
        rationale="",
        votes_tai=tai,
        votes_xiu=xiu,
        samples=samples,
        votes=votes,
    )
    result.summary = (f"From {len(samples)} mined pattern samples, an ensemble of {len(votes)} AIs "
                      f"(2 windows per model). Result: {tai}/{len(votes)} vote Tài, "
                      f"{xiu}/{len(votes)} vote Xỉu. Main prediction: {result.label}.")
    result.rationale = build_explanation(result, history)
    return result


def predict(payload, **kwargs) -> EnsembleResult:
    """Normalize a raw feed payload and run the ensemble on it."""
    return predict_history(normalize(payload), **kwargs)
