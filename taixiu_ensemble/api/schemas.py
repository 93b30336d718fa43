from pydantic import BaseModel, Field
from typing import Any, Optional


class PredictOut(BaseModel):
    session: Optional[Any] = None
    dice: Optional[Any] = None
    total: Optional[Any] = None
    result: Optional[Any] = None
    next_session: Optional[int] = None
    prediction: str
    confidence: str
    summary: str
    explanation: str


class ScoreboardItem(BaseModel):
    session_id: Any
    predicted: str
    actual: str
    correct: bool
    confidence: int
    recorded_at: str


class HistoryOut(BaseModel):
    items: list[ScoreboardItem]


class PerformanceOut(BaseModel):
    total_predictions: int = Field(serialization_alias="totalPredictions")
    correct_predictions: int = Field(serialization_alias="correctPredictions")
    incorrect_predictions: int = Field(serialization_alias="incorrectPredictions")
    win_rate: str = Field(serialization_alias="winRatePercent")


class StatsOut(BaseModel):
    transition: list[list[float]]
    counts: list[list[int]]
    last_label: str | None
    p_value_row: dict[str, float]
    entropy: float
