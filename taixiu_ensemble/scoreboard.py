import logging
import threading
from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone

from taixiu_ensemble.core.labels import Outcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreboardEntry:
    session_id: str | int
    predicted: Outcome
    actual: Outcome
    correct: bool
    confidence: int
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        d = asdict(self)
        d['predicted'] = self.predicted.value
        d['actual'] = self.actual.value
        d['recorded_at'] = self.recorded_at.isoformat()
        return d


@dataclass(frozen=True)
class ScoreboardStats:
    total: int
    correct: int
    incorrect: int

    @property
    def win_rate(self) -> float:
        return self.correct / self.total * 100 if self.total else 0.0

    @property
    def win_rate_text(self) -> str:
        return f"{self.win_rate:.2f}%"


class Scoreboard:
    """Rolling record of predictions against later-known results.

    Entries are kept newest first and capped at ``max_entries``. Recording is
    not idempotent: the same session recorded twice counts twice.
    """

    def __init__(self, max_entries: int = 100):
        self._lock = threading.Lock()
        self._entries: deque[ScoreboardEntry] = deque(maxlen=max_entries)
        self._total = 0
        self._correct = 0

    def record(self, session_id, predicted: Outcome, actual: Outcome, confidence: int) -> ScoreboardEntry:
        entry = ScoreboardEntry(session_id, predicted, actual, predicted is actual, confidence)
        with self._lock:
            self._total += 1
            if entry.correct:
                self._correct += 1
            # appendleft on a full deque drops the oldest from the right
            self._entries.appendleft(entry)
        logger.info("Scoreboard: session %s predicted %s, actual %s (%s)", session_id,
                    predicted.value, actual.value, "win" if entry.correct else "loss")
        return entry

    def entries(self, limit: int | None = None) -> list[ScoreboardEntry]:
        with self._lock:
            items = list(self._entries)
        return items[:limit] if limit is not None else items

    def stats(self) -> ScoreboardStats:
        with self._lock:
            return ScoreboardStats(self._total, self._correct, self._total - self._correct)

    def reset(self):
        with self._lock:
            self._entries.clear()
            self._total = 0
            self._correct = 0
