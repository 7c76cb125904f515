"""Composite scoring: preparation, base probability, and historical adjustment.

Score range: 0-100 (clamped) at every stage. Additive bonuses and the
historical adjustment can push raw sums outside that range.
"""

import logging

from careerprep.core.config import ScoringConfig
from careerprep.scoring.normalizers import clamp, round_half_up

logger = logging.getLogger(__name__)


def preparation_score(
    task_completion: int,
    mock_interview: int,
    question_practice: int,
    practice_hours: int,
    has_insights: bool,
    config: ScoringConfig,
) -> int:
    """Checklist-dominated preparation blend, plus a bonus for having insights.

    Reaches 105 at full saturation before clamping.
    """
    raw = (
        config.task_weight * task_completion
        + config.mock_weight * mock_interview
        + config.question_weight * question_practice
        + config.hours_weight * practice_hours
        + (config.insights_bonus if has_insights else 0.0)
    )
    return int(clamp(round_half_up(raw)))


def base_probability(
    preparation: int,
    role_match: int,
    company_research: int,
    practice_hours: int,
    config: ScoringConfig,
) -> int:
    """Probability for this specific interview before personal history."""
    raw = (
        config.base_preparation_weight * preparation
        + config.base_role_match_weight * role_match
        + config.base_research_weight * company_research
        + config.base_hours_weight * practice_hours
    )
    return int(clamp(round_half_up(raw)))


def success_rate(outcomes: tuple[str, ...] | list[str], success_outcomes: list[str]) -> float | None:
    """Percentage of successful outcomes, or None when there are none."""
    if not outcomes:
        return None
    successes = sum(1 for o in outcomes if o in success_outcomes)
    return 100.0 * successes / len(outcomes)


def historical_rates(
    outcomes: tuple[str, ...] | list[str],
    config: ScoringConfig,
) -> tuple[float, float, float]:
    """Return (historical_rate, recent_rate, trend).

    A user without history gets the neutral rate and a zero trend. The recent
    window covers the last ``recent_window`` outcomes, or all of them.
    """
    historical = success_rate(outcomes, config.success_outcomes)
    if historical is None:
        neutral = config.neutral_success_rate
        return neutral, neutral, 0.0

    recent = success_rate(outcomes[-config.recent_window:], config.success_outcomes) or 0.0
    return historical, recent, recent - historical


def trend_label(trend: float) -> str:
    if trend > 0:
        return "improving"
    if trend < 0:
        return "declining"
    return "stable"


def overall_probability(
    base: int,
    historical_rate: float,
    trend: float,
    config: ScoringConfig,
) -> int:
    """Fold personal history into the base probability.

    Only deviation from the neutral rate moves the estimate.
    """
    historical_adjustment = config.historical_weight * (historical_rate - config.neutral_success_rate)
    trend_adjustment = config.trend_weight * trend
    raw = base + historical_adjustment + trend_adjustment
    result = int(clamp(round_half_up(raw)))
    logger.debug(
        "Overall probability: base=%d hist_adj=%.2f trend_adj=%.2f -> %d",
        base, historical_adjustment, trend_adjustment, result,
    )
    return result
