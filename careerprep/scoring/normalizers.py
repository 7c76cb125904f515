"""Normalizers: map raw features onto integer 0-100 sub-scores.

Every sub-score uses a saturating linear cap: values at or above the cap
score 100. Each sub-score is rounded half-up as soon as it is produced, and
later stages consume the rounded values.
"""

import math

from careerprep.core.config import ScoringConfig

RESEARCH_ARTIFACT_POINTS = 25


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up.

    Weighted sums such as 0.15 * 48 carry float error that can land just
    below an exact .5; snapping to 9 decimals first keeps those ties rounding up.
    """
    return math.floor(round(value, 9) + 0.5)


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def saturating_score(value: float, cap: float) -> int:
    """Linear 0-100 score that saturates at ``cap``. Non-positive values score 0."""
    if value <= 0 or cap <= 0:
        return 0
    return round_half_up(min(100.0, 100.0 * value / cap))


def task_completion_score(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(clamp(100.0 * completed / total))


def mock_interview_score(session_count: int, cap: float = 3.0) -> int:
    return saturating_score(session_count, cap)


def question_practice_score(question_count: int, cap: float = 10.0) -> int:
    return saturating_score(question_count, cap)


def practice_hours_score(hours: float, cap: float = 5.0) -> int:
    return saturating_score(hours, cap)


def company_research_score(artifacts_present: int) -> int:
    """25 points per research artifact (profile, news, leadership, talking points)."""
    return int(clamp(artifacts_present * RESEARCH_ARTIFACT_POINTS))


def role_match_score(
    overall: float,
    skills: float,
    experience: float,
    config: ScoringConfig,
    *,
    has_match: bool = True,
) -> int:
    """Weighted blend of the job match analysis. 0 when no analysis exists."""
    if not has_match:
        return 0
    blended = (
        config.match_overall_weight * overall
        + config.match_skills_weight * skills
        + config.match_experience_weight * experience
    )
    return round_half_up(clamp(blended))
