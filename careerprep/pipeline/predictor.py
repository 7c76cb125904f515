"""Predictor: wires record loading, scoring, narrative, and the DB write.

Data flow:
  1. Validate identifiers
  2. Load interview + job (required), optional records, user history
  3. Scoring engine → PreparednessScores
  4. One LLM call → NarrativeInsights
  5. One insert → Prediction (read back from the DB)

A failure at any step raises a PredictionError subclass and stores nothing.
"""

import logging
import sqlite3

from careerprep.core.config import Settings
from careerprep.core.db import (
    get_company_research,
    get_interview,
    get_interview_insights,
    get_job,
    get_job_match,
    get_latest_prediction,
    get_prediction,
    insert_prediction,
    list_historical_interviews,
    list_mock_sessions,
    list_question_responses,
)
from careerprep.core.errors import InvalidRequestError, NotFoundError, PersistenceError
from careerprep.core.schemas import Prediction, PreparationInputs
from careerprep.llm import get_provider
from careerprep.llm.base import LLMProvider
from careerprep.pipeline.narrative import generate_narrative
from careerprep.scoring.engine import score_preparedness

logger = logging.getLogger(__name__)


def _require_id(value: str | None, name: str) -> str:
    if value is None or not str(value).strip():
        msg = f"{name} is required"
        raise InvalidRequestError(msg)
    return str(value).strip()


def load_inputs(
    conn: sqlite3.Connection,
    user_id: str,
    interview_id: str,
    job_id: str,
) -> PreparationInputs:
    """Read every record the engine needs. Optional records may be absent."""
    interview = get_interview(conn, interview_id, user_id)
    if interview is None:
        msg = f"Interview not found: {interview_id}"
        raise NotFoundError(msg)

    if get_job(conn, job_id, user_id) is None:
        msg = f"Job not found: {job_id}"
        raise NotFoundError(msg)

    return PreparationInputs(
        interview=interview,
        job_match=get_job_match(conn, job_id),
        company_research=get_company_research(conn, job_id),
        insights=get_interview_insights(conn, job_id),
        mock_sessions=list_mock_sessions(conn, interview_id),
        question_responses=list_question_responses(conn, interview_id),
        history=list_historical_interviews(conn, user_id),
    )


def predict_interview_success(
    conn: sqlite3.Connection,
    user_id: str,
    interview_id: str,
    job_id: str,
    settings: Settings,
    provider: LLMProvider | None = None,
) -> Prediction:
    """Generate, store, and return a new interview success prediction.

    Each call inserts a new row; earlier predictions are left untouched.

    Raises:
        InvalidRequestError: Missing identifiers.
        NotFoundError: Interview or job not owned by the user.
        NarrativeError: LLM unreachable or reply invalid.
        PersistenceError: The insert failed.
    """
    user_id = _require_id(user_id, "user_id")
    interview_id = _require_id(interview_id, "interviewId")
    job_id = _require_id(job_id, "jobId")

    logger.info("Predicting success for interview %s (job %s)", interview_id, job_id)

    inputs = load_inputs(conn, user_id, interview_id, job_id)
    scores = score_preparedness(inputs, settings.scoring)

    if provider is None:
        provider = get_provider(
            settings.llm.provider,
            timeout=settings.llm.timeout_seconds,
            max_tokens=settings.llm.max_tokens,
        )
    narrative = generate_narrative(inputs, scores, provider, model=settings.llm.model)

    try:
        prediction_id = insert_prediction(conn, user_id, interview_id, job_id, scores, narrative)
        stored = get_prediction(conn, prediction_id)
    except sqlite3.Error as e:
        logger.error("Failed to store prediction for interview %s", interview_id, exc_info=True)
        msg = f"Failed to store prediction: {e}"
        raise PersistenceError(msg) from e

    if stored is None:
        msg = "Stored prediction could not be read back"
        raise PersistenceError(msg)

    logger.info(
        "Prediction %d stored: overall=%d%% confidence=%s outcome=%s",
        stored.id, stored.overall_probability, stored.confidence_level, stored.predicted_outcome,
    )
    return stored


def latest_prediction(
    conn: sqlite3.Connection,
    user_id: str,
    interview_id: str,
) -> Prediction | None:
    """Return the newest stored prediction for an interview, or None."""
    user_id = _require_id(user_id, "user_id")
    interview_id = _require_id(interview_id, "interviewId")
    return get_latest_prediction(conn, interview_id, user_id)
