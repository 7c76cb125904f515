"""Confidence bucket from data completeness.

This is not a statistical confidence interval: it only reports how many of
the five optional data sources were available to the engine.
"""

from careerprep.core.config import ScoringConfig
from careerprep.scoring.features import PreparationFeatures


def count_data_points(features: PreparationFeatures) -> int:
    """Count present sources: match, research, mock sessions, questions, checklist."""
    present = (
        features.has_job_match,
        features.has_company_research,
        features.mock_session_count > 0,
        features.question_count > 0,
        features.total_tasks > 0,
    )
    return sum(1 for p in present if p)


def classify_confidence(data_points: int, config: ScoringConfig | None = None) -> str:
    config = config or ScoringConfig()
    if data_points >= config.high_confidence_min:
        return "high"
    if data_points >= config.medium_confidence_min:
        return "medium"
    return "low"
