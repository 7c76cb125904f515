"""Core data models for the preparedness scoring service.

Records loaded from the database are frozen; the engine never mutates them.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ConfidenceLevel = Literal["low", "medium", "high"]
PerformanceTrend = Literal["improving", "declining", "stable"]
PredictedOutcome = Literal["likely", "possible", "uncertain"]


class PreparationTask(BaseModel):
    """One checklist item attached to an interview."""

    model_config = ConfigDict(frozen=True)

    task: str
    completed: bool = False


class Interview(BaseModel):
    """A scheduled interview and its preparation checklist."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    job_id: str
    interview_type: str = ""
    interview_date: str = ""
    status: str = "scheduled"
    outcome: str | None = None
    preparation_tasks: list[PreparationTask] = Field(default_factory=list)


class Job(BaseModel):
    """A tracked job application."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    job_title: str = ""
    company_name: str = ""


class JobMatchAnalysis(BaseModel):
    """Profile-to-job match scores produced by a separate matching process."""

    model_config = ConfigDict(frozen=True)

    job_id: str
    overall_score: float = Field(default=0.0, ge=0.0, le=100.0)
    skills_score: float = Field(default=0.0, ge=0.0, le=100.0)
    experience_score: float = Field(default=0.0, ge=0.0, le=100.0)


class CompanyResearch(BaseModel):
    """Company research artifacts for a job. Empty text counts as absent."""

    model_config = ConfigDict(frozen=True)

    job_id: str
    company_profile: str | None = None
    recent_news: str | None = None
    leadership_info: str | None = None
    talking_points: str | None = None

    @property
    def artifacts_present(self) -> int:
        fields = (self.company_profile, self.recent_news, self.leadership_info, self.talking_points)
        return sum(1 for f in fields if f and f.strip())


class InterviewInsights(BaseModel):
    """Generated interview insights for a job. Only its presence is scored."""

    model_config = ConfigDict(frozen=True)

    job_id: str


class MockInterviewSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    interview_id: str
    duration_minutes: float | None = Field(default=None, ge=0.0)


class QuestionResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    interview_id: str
    question: str = ""


class HistoricalInterview(BaseModel):
    """A past interview of the same user with a recorded outcome."""

    model_config = ConfigDict(frozen=True)

    interview_id: str
    outcome: str
    interview_date: str = ""


class PreparationInputs(BaseModel):
    """Everything the engine reads for one prediction. Only interview is required."""

    model_config = ConfigDict(frozen=True)

    interview: Interview
    job_match: JobMatchAnalysis | None = None
    company_research: CompanyResearch | None = None
    insights: InterviewInsights | None = None
    mock_sessions: list[MockInterviewSession] = Field(default_factory=list)
    question_responses: list[QuestionResponse] = Field(default_factory=list)
    history: list[HistoricalInterview] = Field(default_factory=list)


class PreparednessScores(BaseModel):
    """Deterministic engine output. All scores are integers in [0, 100]."""

    model_config = ConfigDict(frozen=True)

    task_completion_score: int = Field(ge=0, le=100)
    mock_interview_score: int = Field(ge=0, le=100)
    question_practice_score: int = Field(ge=0, le=100)
    practice_hours_score: int = Field(ge=0, le=100)
    company_research_score: int = Field(ge=0, le=100)
    role_match_score: int = Field(ge=0, le=100)
    preparation_score: int = Field(ge=0, le=100)
    base_probability: int = Field(ge=0, le=100)
    overall_probability: int = Field(ge=0, le=100)
    historical_success_rate: float = Field(ge=0.0, le=100.0)
    recent_success_rate: float = Field(ge=0.0, le=100.0)
    trend: float
    performance_trend: PerformanceTrend
    confidence_level: ConfidenceLevel
    data_points: int = Field(ge=0, le=5)


class NarrativeInsights(BaseModel):
    """Qualitative fields authored by the LLM.

    Every key is required. Numeric keys echoed back by the model are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    improvement_recommendations: list[str]
    prioritized_actions: list[str]
    strength_areas: list[str]
    weakness_areas: list[str]
    predicted_outcome: PredictedOutcome


class Prediction(BaseModel):
    """A stored interview success prediction. Never updated in place."""

    model_config = ConfigDict(frozen=True)

    id: int
    user_id: str
    interview_id: str
    job_id: str
    overall_probability: int = Field(ge=0, le=100)
    confidence_level: ConfidenceLevel
    preparation_score: int = Field(ge=0, le=100)
    role_match_score: int = Field(ge=0, le=100)
    company_research_score: int = Field(ge=0, le=100)
    practice_hours_score: int = Field(ge=0, le=100)
    historical_success_rate: float
    performance_trend: PerformanceTrend
    improvement_recommendations: list[str] = Field(default_factory=list)
    prioritized_actions: list[str] = Field(default_factory=list)
    strength_areas: list[str] = Field(default_factory=list)
    weakness_areas: list[str] = Field(default_factory=list)
    predicted_outcome: PredictedOutcome
    created_at: datetime
