from fastapi import APIRouter, Depends, HTTPException, Query, Request

from taixiu_ensemble.api.schemas import HistoryOut, PerformanceOut, PredictOut, StatsOut
from taixiu_ensemble.config import settings
from taixiu_ensemble.scoreboard import Scoreboard
from taixiu_ensemble.services import (
    FeedClient, UpstreamFetchError, get_patterns, get_stats, predict_from_payload,
)

router = APIRouter()

FETCH_FAILED = "Failed to fetch data from the source API."


def get_scoreboard(request: Request) -> Scoreboard:
    return request.app.state.scoreboard


def get_feed_client() -> FeedClient:
    return FeedClient(settings.source_url, timeout=settings.fetch_timeout)


def _fetch(feed: FeedClient):
    try:
        return feed.fetch()
    except UpstreamFetchError:
        raise HTTPException(status_code=502, detail=FETCH_FAILED)


@router.get('/predict-tai-xiu', response_model=PredictOut)
def predict(feed: FeedClient = Depends(get_feed_client), board: Scoreboard = Depends(get_scoreboard)):
    return predict_from_payload(_fetch(feed), scoreboard=board)


@router.get('/history', response_model=HistoryOut)
def history(limit: int = Query(100, ge=1, le=100), board: Scoreboard = Depends(get_scoreboard)):
    return {'items': [e.to_dict() for e in board.entries(limit)]}


@router.get('/performance', response_model=PerformanceOut, response_model_by_alias=True)
def performance(board: Scoreboard = Depends(get_scoreboard)):
    st = board.stats()
    return {
        'total_predictions': st.total,
        'correct_predictions': st.correct,
        'incorrect_predictions': st.incorrect,
        'win_rate': st.win_rate_text,
    }


@router.get('/patterns')
def patterns(sample_count: int | None = Query(None, ge=1, le=100), min_run: int = Query(3, ge=2),
             feed: FeedClient = Depends(get_feed_client)):
    return get_patterns(_fetch(feed), sample_count=sample_count, min_run=min_run)


@router.get('/stats', response_model=StatsOut)
def stats(feed: FeedClient = Depends(get_feed_client)):
    return get_stats(_fetch(feed))
