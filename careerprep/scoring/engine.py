"""Preparedness scoring engine: features -> sub-scores -> composite -> confidence.

Pure and deterministic. Rounding happens at every stage (half-up), so the
composite formulas always consume integer sub-scores.
"""

import logging

from careerprep.core.config import ScoringConfig
from careerprep.core.schemas import PreparationInputs, PreparednessScores
from careerprep.scoring import composite, normalizers
from careerprep.scoring.confidence import classify_confidence, count_data_points
from careerprep.scoring.features import PreparationFeatures, extract_features

logger = logging.getLogger(__name__)


def score_features(features: PreparationFeatures, config: ScoringConfig) -> PreparednessScores:
    """Score already-extracted features."""
    task = normalizers.task_completion_score(features.completed_tasks, features.total_tasks)
    mock = normalizers.mock_interview_score(features.mock_session_count, config.mock_session_cap)
    questions = normalizers.question_practice_score(features.question_count, config.question_cap)
    hours = normalizers.practice_hours_score(features.practice_hours, config.practice_hours_cap)
    research = normalizers.company_research_score(features.research_artifacts)
    role_match = normalizers.role_match_score(
        features.match_overall,
        features.match_skills,
        features.match_experience,
        config,
        has_match=features.has_job_match,
    )
    logger.debug(
        "Sub-scores: task=%d mock=%d questions=%d hours=%d research=%d role=%d",
        task, mock, questions, hours, research, role_match,
    )

    preparation = composite.preparation_score(
        task, mock, questions, hours, features.has_insights, config,
    )
    base = composite.base_probability(preparation, role_match, research, hours, config)
    historical, recent, trend = composite.historical_rates(features.history_outcomes, config)
    overall = composite.overall_probability(base, historical, trend, config)

    data_points = count_data_points(features)

    return PreparednessScores(
        task_completion_score=task,
        mock_interview_score=mock,
        question_practice_score=questions,
        practice_hours_score=hours,
        company_research_score=research,
        role_match_score=role_match,
        preparation_score=preparation,
        base_probability=base,
        overall_probability=overall,
        historical_success_rate=historical,
        recent_success_rate=recent,
        trend=trend,
        performance_trend=composite.trend_label(trend),  # type: ignore[arg-type]
        confidence_level=classify_confidence(data_points, config),  # type: ignore[arg-type]
        data_points=data_points,
    )


def score_preparedness(
    inputs: PreparationInputs,
    config: ScoringConfig | None = None,
) -> PreparednessScores:
    """Compute every preparedness score for one interview.

    Args:
        inputs: Loaded records. Only the interview is required.
        config: Caps and weights. Defaults to ScoringConfig().

    Returns:
        PreparednessScores with integer sub-scores in [0, 100].
    """
    config = config or ScoringConfig()
    features = extract_features(inputs)
    scores = score_features(features, config)
    logger.info(
        "Scored interview %s: overall=%d confidence=%s",
        inputs.interview.id, scores.overall_probability, scores.confidence_level,
    )
    return scores
