import threading

from taixiu_ensemble.core.labels import Outcome
from taixiu_ensemble.scoreboard import Scoreboard

T, X = Outcome.TAI, Outcome.XIU


def test_win_rate_two_of_three():
    sb = Scoreboard()
    sb.record(1, T, T, 80)
    sb.record(2, X, X, 60)
    sb.record(3, T, X, 70)
    st = sb.stats()
    assert (st.total, st.correct, st.incorrect) == (3, 2, 1)
    assert st.win_rate_text == "66.67%"


def test_empty_board():
    st = Scoreboard().stats()
    assert st.total == 0 and st.win_rate_text == "0.00%"


def test_newest_first_and_capped():
    sb = Scoreboard(max_entries=3)
    for i in range(1, 6):
        sb.record(i, T, T, 50)
    assert [e.session_id for e in sb.entries()] == [5, 4, 3]
    assert [e.session_id for e in sb.entries(limit=2)] == [5, 4]
    # counters keep everything ever recorded
    assert sb.stats().total == 5


def test_same_session_counts_twice():
    sb = Scoreboard()
    sb.record(7, T, X, 60)
    sb.record(7, T, X, 60)
    assert sb.stats().total == 2 and len(sb.entries()) == 2


def test_entry_to_dict():
    e = Scoreboard().record("abc", X, X, 90)
    d = e.to_dict()
    assert d["predicted"] == "Xỉu" and d["actual"] == "Xỉu" and d["correct"] is True
    assert d["confidence"] == 90 and "T" in d["recorded_at"]


def test_concurrent_records():
    sb = Scoreboard(max_entries=100)

    def worker(n):
        for i in range(50):
            sb.record(f"{n}-{i}", T, T if i % 2 else X, 50)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    st = sb.stats()
    assert st.total == 400 and st.correct == 200
    assert len(sb.entries()) == 100


def test_reset():
    sb = Scoreboard()
    sb.record(1, T, T, 50)
    sb.reset()
    assert sb.stats().total == 0 and sb.entries() == []
