"""Prediction accuracy: compare stored predictions with real interview outcomes."""

import logging
import sqlite3

from pydantic import BaseModel, ConfigDict

from careerprep.core.db import get_latest_prediction, list_completed_interviews
from careerprep.core.schemas import Interview, Prediction
from careerprep.scoring.normalizers import round_half_up

logger = logging.getLogger(__name__)

POSITIVE_OUTCOMES = ("passed", "offer", "accepted", "hired")
PREDICTION_THRESHOLD = 50


class PredictionComparison(BaseModel):
    """One completed interview paired with its latest prediction, if any."""

    model_config = ConfigDict(frozen=True)

    interview: Interview
    prediction: Prediction | None = None
    actual_outcome: str
    predicted_outcome: str | None = None
    is_accurate: bool | None = None


class AccuracyStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    accuracy_rate: int = 0
    accurate: int = 0
    total: int = 0
    positive_accuracy_rate: int = 0
    positive_predictions: int = 0
    negative_accuracy_rate: int = 0
    negative_predictions: int = 0
    avg_confidence_when_correct: int = 0
    avg_confidence_when_incorrect: int = 0


class AccuracyReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    comparisons: list[PredictionComparison]
    stats: AccuracyStats | None = None


def classify_outcome(outcome: str | None) -> str:
    return "positive" if (outcome or "").lower().strip() in POSITIVE_OUTCOMES else "negative"


def compare(interview: Interview, prediction: Prediction | None) -> PredictionComparison:
    actual = classify_outcome(interview.outcome)
    if prediction is None:
        return PredictionComparison(interview=interview, actual_outcome=actual)
    predicted = "positive" if prediction.overall_probability >= PREDICTION_THRESHOLD else "negative"
    return PredictionComparison(
        interview=interview,
        prediction=prediction,
        actual_outcome=actual,
        predicted_outcome=predicted,
        is_accurate=predicted == actual,
    )


def _rate(part: int, whole: int) -> int:
    return round_half_up(100.0 * part / whole) if whole else 0


def _avg_probability(items: list[PredictionComparison]) -> int:
    if not items:
        return 0
    total = sum(c.prediction.overall_probability for c in items if c.prediction)
    return round_half_up(total / len(items))


def compute_accuracy_stats(comparisons: list[PredictionComparison]) -> AccuracyStats:
    """Aggregate accuracy over comparisons that have a prediction."""
    scored = [c for c in comparisons if c.prediction is not None]
    correct = [c for c in scored if c.is_accurate]
    incorrect = [c for c in scored if c.is_accurate is False]
    positive = [c for c in scored if c.predicted_outcome == "positive"]
    negative = [c for c in scored if c.predicted_outcome == "negative"]

    return AccuracyStats(
        accuracy_rate=_rate(len(correct), len(scored)),
        accurate=len(correct),
        total=len(scored),
        positive_accuracy_rate=_rate(sum(1 for c in positive if c.is_accurate), len(positive)),
        positive_predictions=len(positive),
        negative_accuracy_rate=_rate(sum(1 for c in negative if c.is_accurate), len(negative)),
        negative_predictions=len(negative),
        avg_confidence_when_correct=_avg_probability(correct),
        avg_confidence_when_incorrect=_avg_probability(incorrect),
    )


def analyze_prediction_accuracy(conn: sqlite3.Connection, user_id: str) -> AccuracyReport:
    """Build the accuracy report for a user's completed interviews.

    Returns an empty report (stats=None) when no interview is completed.
    """
    interviews = list_completed_interviews(conn, user_id)
    if not interviews:
        return AccuracyReport(comparisons=[])

    comparisons = [
        compare(i, get_latest_prediction(conn, i.id, user_id)) for i in interviews
    ]
    stats = compute_accuracy_stats(comparisons)
    logger.info(
        "Prediction accuracy for %s: %d/%d (%d%%)",
        user_id, stats.accurate, stats.total, stats.accuracy_rate,
    )
    return AccuracyReport(comparisons=comparisons, stats=stats)
