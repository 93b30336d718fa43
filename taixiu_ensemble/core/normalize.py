"""Turn upstream feed payloads into an ordered outcome sequence."""
from typing import Any

from taixiu_ensemble.core.labels import Label, decode

RESULT_KEYS = ("Ket_qua", "ket_qua", "result")
SESSION_KEYS = ("Phien", "phien", "session")
TOTAL_KEYS = ("Tong", "tong", "total")
DICE_KEYS = ("Xuc_xac", "dice")
HISTORY_KEYS = ("Lich_su_phien", "history")


def _first(record: dict, keys) -> Any:
    for k in keys:
        v = record.get(k)
        if v not in (None, ""):
            return v
    return None


def history_records(payload) -> list:
    """Records oldest first. A bare list is taken as an already flattened history."""
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []
    for k in HISTORY_KEYS:
        if isinstance(payload.get(k), list):
            return payload[k]
    return []


def record_label(record) -> Label:
    if isinstance(record, dict):
        return decode(_first(record, RESULT_KEYS))
    return decode(record)


def normalize(payload) -> list[Label]:
    return [record_label(r) for r in history_records(payload)]


def latest_record(payload) -> dict:
    if isinstance(payload, list):
        return payload[-1] if payload and isinstance(payload[-1], dict) else {}
    return payload if isinstance(payload, dict) else {}


def session_info(payload) -> dict:
    """Session, dice, total and result of the most recent round in the feed."""
    rec = latest_record(payload)
    session = _first(rec, SESSION_KEYS)
    if all(rec.get(f"Xuc_xac_{i}") is not None for i in (1, 2, 3)):
        dice = f"{rec['Xuc_xac_1']}-{rec['Xuc_xac_2']}-{rec['Xuc_xac_3']}"
    else:
        dice = _first(rec, DICE_KEYS)
    result = _first(rec, RESULT_KEYS)
    return {
        "session": session,
        "dice": dice,
        "total": _first(rec, TOTAL_KEYS),
        "result": result,
        "next_session": session + 1 if isinstance(session, int) and not isinstance(session, bool) else None,
    }
