from taixiu_ensemble.core.labels import Outcome
from taixiu_ensemble.core.normalize import normalize, session_info

T, X = Outcome.TAI, Outcome.XIU


def test_normalize_aliases_keep_unknown_slots():
    payload = {"Lich_su_phien": [{"Ket_qua": "Tài"}, {"ket_qua": "Xỉu"}, {"result": "??"}, {"Phien": 4}]}
    assert normalize(payload) == [T, X, None, None]


def test_normalize_history_key_and_flat_list():
    assert normalize({"history": [{"result": "Xỉu"}]}) == [X]
    assert normalize(["Tài", {"Ket_qua": "Xỉu"}]) == [T, X]
    assert normalize({"Phien": 1}) == []
    assert normalize("garbage") == []


def test_session_info():
    rec = {"Phien": 2811, "Xuc_xac_1": 3, "Xuc_xac_2": 4, "Xuc_xac_3": 6, "Tong": 13, "Ket_qua": "Tài"}
    info = session_info(rec)
    assert info == {"session": 2811, "dice": "3-4-6", "total": 13, "result": "Tài", "next_session": 2812}
    info = session_info({"session": "abc", "dice": [1, 2, 3]})
    assert info["dice"] == [1, 2, 3] and info["next_session"] is None and info["result"] is None
    assert session_info([{"phien": 1}, {"phien": 2, "ket_qua": "Xỉu"}])["next_session"] == 3
