import unicodedata
from enum import Enum


class Outcome(str, Enum):
    TAI = "Tài"
    XIU = "Xỉu"

    @property
    def opposite(self) -> "Outcome":
        return Outcome.XIU if self is Outcome.TAI else Outcome.TAI


# Unknown results keep their slot in a sequence as None.
Label = Outcome | None

_ALIASES = {
    "tai": Outcome.TAI, "t": Outcome.TAI, "high": Outcome.TAI, "big": Outcome.TAI,
    "xiu": Outcome.XIU, "x": Outcome.XIU, "low": Outcome.XIU, "small": Outcome.XIU,
}


def _fold(s: str) -> str:
    # "Tài" -> "tai", "XỈU" -> "xiu"
    s = unicodedata.normalize("NFKD", s.strip().lower())
    return "".join(c for c in s if not unicodedata.combining(c))


def decode(value) -> Label:
    if isinstance(value, Outcome):
        return value
    if not isinstance(value, str):
        return None
    return _ALIASES.get(_fold(value))


def opposite(label: Label) -> Outcome:
    """Anything that is not Tài flips to Tài."""
    return Outcome.XIU if label is Outcome.TAI else Outcome.TAI


def count(labels, outcome: Outcome) -> int:
    return sum(1 for y in labels if y is outcome)


def join(labels) -> str:
    return "-".join(y.value if y is not None else "" for y in labels)
