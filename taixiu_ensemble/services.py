import logging
import threading

import requests

from taixiu_ensemble.analytics.markov import transition_stats
from taixiu_ensemble.analytics.patterns import alternations, blocks, mine, runs
from taixiu_ensemble.config import settings
from taixiu_ensemble.core.labels import decode, join
from taixiu_ensemble.core.normalize import normalize, session_info
from taixiu_ensemble.ensemble import predict_history
from taixiu_ensemble.scoreboard import Scoreboard

logger = logging.getLogger(__name__)


class UpstreamFetchError(Exception):
    """The source feed could not be fetched or was not usable."""


class FeedClient:
    def __init__(self, url: str, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    def fetch(self):
        try:
            r = requests.get(self.url, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except requests.exceptions.RequestException as e:
            logger.error("Error fetching data from source API %s: %s", self.url, e)
            raise UpstreamFetchError(str(e)) from e
        except ValueError as e:
            logger.error("Source API returned invalid JSON: %s", e)
            raise UpstreamFetchError("invalid JSON") from e
        if not isinstance(data, (dict, list)):
            logger.error("Source API payload is not an object or list: %r", data)
            raise UpstreamFetchError("unexpected payload shape")
        return data


def _predict_kwargs():
    return {
        'sample_count': settings.sample_count,
        'min_history': settings.min_history,
        'short_window': settings.short_window,
        'long_window': settings.long_window,
    }


def predict_from_payload(payload, scoreboard: Scoreboard | None = None) -> dict:
    info = session_info(payload)
    p = predict_history(normalize(payload), **_predict_kwargs())

    # ground truth only reaches the scoreboard after the prediction is made
    actual = decode(info['result'])
    if scoreboard is not None and info['session'] is not None and actual is not None and p.outcome is not None:
        scoreboard.record(info['session'], p.outcome, actual, p.confidence)

    return {
        **info,
        'prediction': p.label,
        'confidence': p.confidence_text,
        'summary': p.summary,
        'explanation': p.rationale,
    }


def get_patterns(payload, sample_count: int | None = None, min_run: int = 3) -> dict:
    labels = normalize(payload)
    out = {
        'history_length': len(labels),
        'runs': [{'start': s, 'end': e, 'label': y.value, 'length': n} for s, e, y, n in runs(labels, k=min_run)],
        'alternations': [{'start': i, 'pattern': join(labels[i:i+4])} for i in alternations(labels, L=4)],
        'blocks': [{'start': s, 'end': e, 'pattern': c, 'repeats': n} for s, e, c, n in blocks(labels)],
        'samples': [],
    }
    if len(labels) >= settings.min_history:
        n = sample_count or settings.sample_count
        out['samples'] = [{'kind': s.kind.value, 'pattern': s.key, 'next': s.next.value} for s in mine(labels, n)]
    return out


def get_stats(payload) -> dict:
    labels = normalize(payload)[-settings.long_window:]
    st = transition_stats(labels)
    return {
        'transition': st.transition,
        'counts': st.counts,
        'last_label': st.last_label,
        'p_value_row': st.p_value_row,
        'entropy': st.entropy,
    }


class KeepAlive:
    """Pings a URL on an interval from a daemon thread so the host does not idle out."""

    def __init__(self, url: str, interval: float = 600.0):
        self.url = url
        self.interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def _run(self):
        while not self._stop.wait(self.interval):
            try:
                requests.get(self.url, timeout=10)
                logger.debug("Keep-alive ping sent to %s", self.url)
            except requests.exceptions.RequestException as e:
                logger.warning("Keep-alive ping to %s failed: %s", self.url, e)

    def start(self):
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        logger.info("Keep-alive thread started (%s every %ss)", self.url, self.interval)

    def stop(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1)
