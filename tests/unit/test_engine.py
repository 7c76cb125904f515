"""Tests for the preparedness scoring engine end to end (pure, no DB)."""

import pytest

from careerprep.core.config import ScoringConfig
from careerprep.core.schemas import (
    CompanyResearch,
    HistoricalInterview,
    Interview,
    InterviewInsights,
    JobMatchAnalysis,
    MockInterviewSession,
    PreparationInputs,
    PreparationTask,
    QuestionResponse,
)
from careerprep.scoring.engine import score_preparedness


def _tasks(completed: int, total: int) -> list[PreparationTask]:
    return [PreparationTask(task=f"Task {i}", completed=i < completed) for i in range(total)]


def _inputs(
    *,
    completed: int = 0,
    total: int = 0,
    sessions: list[float | None] | None = None,
    questions: int = 0,
    research: CompanyResearch | None = None,
    match: JobMatchAnalysis | None = None,
    insights: bool = False,
    outcomes: list[str] | None = None,
) -> PreparationInputs:
    interview = Interview(
        id="int-1",
        user_id="user-1",
        job_id="job-1",
        interview_type="technical",
        interview_date="2026-11-02",
        preparation_tasks=_tasks(completed, total),
    )
    return PreparationInputs(
        interview=interview,
        job_match=match,
        company_research=research,
        insights=InterviewInsights(job_id="job-1") if insights else None,
        mock_sessions=[
            MockInterviewSession(interview_id="int-1", duration_minutes=d) for d in sessions or []
        ],
        question_responses=[
            QuestionResponse(interview_id="int-1", question=f"Q{i}") for i in range(questions)
        ],
        history=[
            HistoricalInterview(interview_id=f"past-{i}", outcome=o, interview_date=f"2026-01-{i + 10}")
            for i, o in enumerate(outcomes or [])
        ],
    )


def _full_research() -> CompanyResearch:
    return CompanyResearch(
        job_id="job-1",
        company_profile="profile",
        recent_news="news",
        leadership_info="leaders",
        talking_points="points",
    )


# ---------------------------------------------------------------------------
# Worked example
# ---------------------------------------------------------------------------


class TestWorkedExample:
    @pytest.fixture()
    def scores(self):  # type: ignore[no-untyped-def]
        return score_preparedness(
            _inputs(
                completed=8,
                total=10,
                sessions=[90, 90],
                questions=12,
                research=_full_research(),
                match=JobMatchAnalysis(
                    job_id="job-1", overall_score=80, skills_score=70, experience_score=60
                ),
                insights=True,
                outcomes=["rejected", "offer", "rejected"],
            )
        )

    def test_sub_scores(self, scores) -> None:  # type: ignore[no-untyped-def]
        assert scores.task_completion_score == 80
        assert scores.mock_interview_score == 67
        assert scores.question_practice_score == 100
        assert scores.practice_hours_score == 60
        assert scores.company_research_score == 100

    def test_role_match(self, scores) -> None:  # type: ignore[no-untyped-def]
        # 0.5*80 + 0.3*70 + 0.2*60 = 40 + 21 + 12
        assert scores.role_match_score == 73

    def test_preparation(self, scores) -> None:  # type: ignore[no-untyped-def]
        # 0.40*80 + 0.25*67 + 0.20*100 + 0.10*60 + 5 = 79.75
        assert scores.preparation_score == 80

    def test_base(self, scores) -> None:  # type: ignore[no-untyped-def]
        # 0.35*80 + 0.30*73 + 0.20*100 + 0.15*60 = 78.9
        assert scores.base_probability == 79

    def test_history(self, scores) -> None:  # type: ignore[no-untyped-def]
        assert scores.historical_success_rate == pytest.approx(33.333, abs=0.01)
        assert scores.trend == 0.0
        assert scores.performance_trend == "stable"

    def test_overall(self, scores) -> None:  # type: ignore[no-untyped-def]
        # 79 + 0.30 * (33.33 - 50) = 74.0
        assert scores.overall_probability == 74

    def test_confidence(self, scores) -> None:  # type: ignore[no-untyped-def]
        assert scores.data_points == 5
        assert scores.confidence_level == "high"


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


class TestEmptyInputs:
    def test_all_sub_scores_zero(self) -> None:
        scores = score_preparedness(_inputs())
        assert scores.task_completion_score == 0
        assert scores.mock_interview_score == 0
        assert scores.question_practice_score == 0
        assert scores.practice_hours_score == 0
        assert scores.company_research_score == 0
        assert scores.role_match_score == 0
        assert scores.preparation_score == 0

    def test_low_confidence(self) -> None:
        scores = score_preparedness(_inputs())
        assert scores.data_points == 0
        assert scores.confidence_level == "low"


class TestNeutralPrior:
    def test_no_history_gives_fifty(self) -> None:
        scores = score_preparedness(_inputs(completed=3, total=4, sessions=[60]))
        assert scores.historical_success_rate == 50.0
        assert scores.trend == 0.0

    def test_overall_equals_base_without_history(self) -> None:
        scores = score_preparedness(
            _inputs(completed=3, total=4, sessions=[60], questions=4, research=_full_research())
        )
        assert scores.overall_probability == scores.base_probability


class TestClamping:
    def test_preparation_capped_at_100(self) -> None:
        # 40 + 25 + 20 + 10 + 5 = 105 before clamping
        scores = score_preparedness(
            _inputs(completed=5, total=5, sessions=[120, 120, 120], questions=10, insights=True)
        )
        assert scores.preparation_score == 100

    def test_overall_capped_at_100(self) -> None:
        scores = score_preparedness(
            _inputs(
                completed=5,
                total=5,
                sessions=[120, 120, 120],
                questions=10,
                insights=True,
                research=_full_research(),
                match=JobMatchAnalysis(
                    job_id="job-1", overall_score=100, skills_score=100, experience_score=100
                ),
                outcomes=["offer"] * 6,
            )
        )
        assert scores.base_probability == 100
        assert scores.overall_probability == 100

    def test_overall_floored_at_zero(self) -> None:
        scores = score_preparedness(_inputs(outcomes=["rejected"] * 5))
        assert scores.base_probability == 0
        assert scores.overall_probability == 0


class TestTrend:
    def test_improving(self) -> None:
        outcomes = ["rejected"] * 5 + ["offer"] * 5
        scores = score_preparedness(_inputs(outcomes=outcomes))
        assert scores.historical_success_rate == 50.0
        assert scores.recent_success_rate == 100.0
        assert scores.trend == 50.0
        assert scores.performance_trend == "improving"

    def test_declining(self) -> None:
        outcomes = ["offer"] * 5 + ["rejected"] * 5
        scores = score_preparedness(_inputs(outcomes=outcomes))
        assert scores.performance_trend == "declining"

    def test_trend_moves_overall(self) -> None:
        common = {"completed": 5, "total": 5, "research": _full_research()}
        improving = score_preparedness(
            _inputs(outcomes=["rejected"] * 5 + ["offer"] * 5, **common)  # type: ignore[arg-type]
        )
        declining = score_preparedness(
            _inputs(outcomes=["offer"] * 5 + ["rejected"] * 5, **common)  # type: ignore[arg-type]
        )
        # Base 34 either way; only the trend differs: +5 vs -5
        assert improving.base_probability == 34
        assert improving.overall_probability == 39
        assert declining.overall_probability == 29

    def test_outcomes_case_insensitive(self) -> None:
        scores = score_preparedness(_inputs(outcomes=["Offer", "ACCEPTED"]))
        assert scores.historical_success_rate == 100.0


class TestConfigOverrides:
    def test_custom_mock_cap(self) -> None:
        config = ScoringConfig(mock_session_cap=2)
        scores = score_preparedness(_inputs(sessions=[30, 30]), config)
        assert scores.mock_interview_score == 100

    def test_none_duration_counts_as_zero(self) -> None:
        scores = score_preparedness(_inputs(sessions=[None, 150]))
        assert scores.mock_interview_score == 67
        assert scores.practice_hours_score == 50
