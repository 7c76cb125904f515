"""LLM narrative augmentation for computed preparedness scores.

The model only writes qualitative fields. The numbers are embedded in the
prompt as fixed facts, and any numbers echoed back are discarded.
"""

import logging

from pydantic import ValidationError

from careerprep.core.errors import NarrativeError
from careerprep.core.schemas import NarrativeInsights, PreparationInputs, PreparednessScores
from careerprep.llm import parse_json_object
from careerprep.llm.base import SYSTEM_PROMPT, LLMProvider
from careerprep.scoring.features import extract_features

logger = logging.getLogger(__name__)

NARRATIVE_KEYS = (
    "improvement_recommendations",
    "prioritized_actions",
    "strength_areas",
    "weakness_areas",
    "predicted_outcome",
)


def _check(text: str | None) -> str:
    """Blank text counts as missing, as in CompanyResearch.artifacts_present."""
    return "yes" if text and text.strip() else "no"


def _signed(value: float) -> str:
    return f"{'+' if value > 0 else ''}{value:.1f}%"


def build_narrative_prompt(inputs: PreparationInputs, scores: PreparednessScores) -> str:
    """Assemble the user prompt from loaded records and computed scores."""
    interview = inputs.interview
    features = extract_features(inputs)
    research = inputs.company_research
    match = inputs.job_match
    history_total = len(features.history_outcomes)

    task_rate = (
        100.0 * features.completed_tasks / features.total_tasks if features.total_tasks else 0.0
    )
    task_lines = "\n".join(
        f"- {t.task}: {'done' if t.completed else 'not done'}"
        for t in interview.preparation_tasks
    )

    history_section = (
        "HISTORICAL PERFORMANCE\n"
        f"Total past interviews: {history_total}\n"
        f"Historical success rate: {scores.historical_success_rate:.1f}%\n"
        f"Recent success rate: {scores.recent_success_rate:.1f}%\n"
        f"Performance trend: {_signed(scores.trend)}\n"
    )
    if history_total == 0:
        history_section += "No historical data yet\n"

    scores_section = (
        "CALCULATED SCORES (DO NOT CHANGE THESE)\n"
        f"Overall probability: {scores.overall_probability}%\n"
        f"Confidence level: {scores.confidence_level}\n"
        f"Preparation score: {scores.preparation_score}%\n"
        f"Role match score: {scores.role_match_score}%\n"
        f"Company research score: {scores.company_research_score}%\n"
        f"Practice hours score: {scores.practice_hours_score}%\n"
        f"Historical success rate: {scores.historical_success_rate:.1f}%\n"
        f"Performance trend: {scores.performance_trend}\n"
    )

    prep_section = (
        f"PREPARATION TASKS: {features.completed_tasks}/{features.total_tasks} "
        f"completed ({task_rate:.1f}%)\n"
    )
    if task_lines:
        prep_section += f"{task_lines}\n"

    research_section = (
        f"COMPANY RESEARCH: {scores.company_research_score}%\n"
        f"Company profile: {_check(research.company_profile if research else None)}\n"
        f"Recent news: {_check(research.recent_news if research else None)}\n"
        f"Leadership info: {_check(research.leadership_info if research else None)}\n"
        f"Talking points: {_check(research.talking_points if research else None)}\n"
    )

    practice_section = (
        "PRACTICE\n"
        f"Mock sessions: {features.mock_session_count}\n"
        f"Practice hours: {features.practice_hours:.1f}\n"
        f"Questions practiced: {features.question_count}\n"
    )

    if match:
        match_section = (
            f"JOB MATCH: {match.overall_score:g}%\n"
            f"Skills: {match.skills_score:g}%, Experience: {match.experience_score:g}%\n"
        )
    else:
        match_section = "JOB MATCH: not completed\n"

    instructions = (
        "Use the EXACT scores above. Do NOT recalculate them.\n\n"
        "Return ONLY a JSON object (no markdown, no explanation) with these keys:\n"
        "- improvement_recommendations (list[str]): 3-5 specific, actionable recommendations\n"
        "- prioritized_actions (list[str]): top 3-5 immediate actions\n"
        "- strength_areas (list[str]): 2-4 things the candidate is doing well\n"
        "- weakness_areas (list[str]): 2-4 areas that need improvement\n"
        '- predicted_outcome (string): one of "likely", "possible", "uncertain"\n\n'
        "Focus on tasks not yet completed, low-scoring areas, and historical "
        "patterns (encourage an improving trend, address a declining one)."
    )

    return (
        "INTERVIEW\n"
        f"Type: {interview.interview_type or 'not specified'}\n"
        f"Date: {interview.interview_date or 'not specified'}\n\n"
        f"{history_section}\n{scores_section}\n{prep_section}\n"
        f"{research_section}\n{practice_section}\n{match_section}\n{instructions}"
    )


def parse_narrative(raw_text: str) -> NarrativeInsights:
    """Validate an LLM reply against the narrative schema.

    Raises:
        NarrativeError: If the reply is not JSON or any required key is
            missing or malformed.
    """
    try:
        data = parse_json_object(raw_text)
    except ValueError as e:
        raise NarrativeError(str(e)) from e

    missing = [k for k in NARRATIVE_KEYS if k not in data]
    if missing:
        msg = f"LLM response missing required fields: {', '.join(missing)}"
        raise NarrativeError(msg)

    try:
        return NarrativeInsights.model_validate(data)
    except ValidationError as e:
        msg = f"LLM response failed validation: {e.error_count()} error(s)"
        raise NarrativeError(msg) from e


def generate_narrative(
    inputs: PreparationInputs,
    scores: PreparednessScores,
    provider: LLMProvider,
    model: str | None = None,
) -> NarrativeInsights:
    """Ask the LLM for qualitative recommendations about computed scores.

    Makes exactly one provider call. Any provider failure (missing key,
    missing SDK, network error, timeout) or invalid reply raises
    NarrativeError.
    """
    prompt = build_narrative_prompt(inputs, scores)
    try:
        raw = provider.complete(prompt, model=model, system=SYSTEM_PROMPT)
    except Exception as e:
        logger.warning(
            "Narrative request to '%s' failed for interview %s",
            provider.provider_id,
            inputs.interview.id,
            exc_info=True,
        )
        msg = f"LLM request failed: {e}"
        raise NarrativeError(msg) from e

    if not raw:
        msg = "LLM returned an empty response"
        raise NarrativeError(msg)

    return parse_narrative(raw)
