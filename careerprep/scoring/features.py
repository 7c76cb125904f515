"""Feature extraction: raw counts from the records behind one prediction.

Missing optional records produce zero-valued features, never errors.
"""

from pydantic import BaseModel, ConfigDict

from careerprep.core.schemas import PreparationInputs


class PreparationFeatures(BaseModel):
    """Raw, unnormalized signals for the scoring engine."""

    model_config = ConfigDict(frozen=True)

    total_tasks: int = 0
    completed_tasks: int = 0
    mock_session_count: int = 0
    practice_minutes: float = 0.0
    question_count: int = 0
    research_artifacts: int = 0
    has_company_research: bool = False
    has_job_match: bool = False
    has_insights: bool = False
    match_overall: float = 0.0
    match_skills: float = 0.0
    match_experience: float = 0.0
    history_outcomes: tuple[str, ...] = ()

    @property
    def practice_hours(self) -> float:
        return self.practice_minutes / 60.0


def extract_features(inputs: PreparationInputs) -> PreparationFeatures:
    """Collapse loaded records into the counts the normalizers consume."""
    tasks = inputs.interview.preparation_tasks
    research = inputs.company_research
    match = inputs.job_match

    return PreparationFeatures(
        total_tasks=len(tasks),
        completed_tasks=sum(1 for t in tasks if t.completed),
        mock_session_count=len(inputs.mock_sessions),
        practice_minutes=sum(s.duration_minutes or 0.0 for s in inputs.mock_sessions),
        question_count=len(inputs.question_responses),
        research_artifacts=research.artifacts_present if research else 0,
        has_company_research=research is not None,
        has_job_match=match is not None,
        has_insights=inputs.insights is not None,
        match_overall=match.overall_score if match else 0.0,
        match_skills=match.skills_score if match else 0.0,
        match_experience=match.experience_score if match else 0.0,
        history_outcomes=tuple(h.outcome.lower().strip() for h in inputs.history),
    )
