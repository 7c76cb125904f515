"""Tests for narrative prompt assembly and LLM reply validation."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from careerprep.core.errors import NarrativeError
from careerprep.core.schemas import (
    CompanyResearch,
    HistoricalInterview,
    Interview,
    JobMatchAnalysis,
    PreparationInputs,
    PreparationTask,
)
from careerprep.llm.base import SYSTEM_PROMPT, LLMProvider
from careerprep.pipeline.narrative import (
    build_narrative_prompt,
    generate_narrative,
    parse_narrative,
)
from careerprep.scoring.engine import score_preparedness

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


def _load_sample_response() -> str:
    return (FIXTURES_DIR / "sample_narrative_response.json").read_text()


def _inputs(*, history: bool = True, match: bool = True) -> PreparationInputs:
    return PreparationInputs(
        interview=Interview(
            id="int-1",
            user_id="user-1",
            job_id="job-1",
            interview_type="behavioral",
            interview_date="2026-11-02",
            preparation_tasks=[
                PreparationTask(task="Review STAR stories", completed=True),
                PreparationTask(task="Research the team", completed=False),
            ],
        ),
        job_match=(
            JobMatchAnalysis(job_id="job-1", overall_score=80, skills_score=70, experience_score=60)
            if match
            else None
        ),
        company_research=CompanyResearch(job_id="job-1", company_profile="Profile"),
        history=(
            [HistoricalInterview(interview_id="p1", outcome="offer", interview_date="2026-01-01")]
            if history
            else []
        ),
    )


def _mock_provider(reply: str | None = None, error: Exception | None = None) -> MagicMock:
    provider = MagicMock(spec=LLMProvider)
    provider.provider_id = "mock"
    if error is not None:
        provider.complete.side_effect = error
    else:
        provider.complete.return_value = reply
    return provider


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------


class TestBuildNarrativePrompt:
    def test_contains_scores_as_fixed_facts(self) -> None:
        inputs = _inputs()
        scores = score_preparedness(inputs)
        prompt = build_narrative_prompt(inputs, scores)

        assert "CALCULATED SCORES (DO NOT CHANGE THESE)" in prompt
        assert f"Overall probability: {scores.overall_probability}%" in prompt
        assert f"Confidence level: {scores.confidence_level}" in prompt
        assert f"Role match score: {scores.role_match_score}%" in prompt
        assert "Do NOT recalculate" in prompt

    def test_lists_tasks_with_status(self) -> None:
        inputs = _inputs()
        prompt = build_narrative_prompt(inputs, score_preparedness(inputs))
        assert "PREPARATION TASKS: 1/2 completed (50.0%)" in prompt
        assert "- Review STAR stories: done" in prompt
        assert "- Research the team: not done" in prompt

    def test_research_flags(self) -> None:
        inputs = _inputs()
        prompt = build_narrative_prompt(inputs, score_preparedness(inputs))
        assert "Company profile: yes" in prompt
        assert "Recent news: no" in prompt

    def test_blank_research_text_is_not_present(self) -> None:
        inputs = _inputs().model_copy(update={
            "company_research": CompanyResearch(
                job_id="job-1",
                company_profile="Profile",
                recent_news="   ",
                leadership_info="CTO bio",
                talking_points="",
            ),
        })
        scores = score_preparedness(inputs)
        prompt = build_narrative_prompt(inputs, scores)
        assert scores.company_research_score == 50
        assert "COMPANY RESEARCH: 50%" in prompt
        assert "Recent news: no" in prompt
        assert "Talking points: no" in prompt
        assert "Leadership info: yes" in prompt

    def test_no_history_note(self) -> None:
        inputs = _inputs(history=False)
        prompt = build_narrative_prompt(inputs, score_preparedness(inputs))
        assert "No historical data yet" in prompt
        assert "Total past interviews: 0" in prompt

    def test_missing_job_match(self) -> None:
        inputs = _inputs(match=False)
        prompt = build_narrative_prompt(inputs, score_preparedness(inputs))
        assert "JOB MATCH: not completed" in prompt

    def test_lists_required_keys(self) -> None:
        inputs = _inputs()
        prompt = build_narrative_prompt(inputs, score_preparedness(inputs))
        for key in ("improvement_recommendations", "prioritized_actions", "predicted_outcome"):
            assert key in prompt


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParseNarrative:
    def test_valid_reply(self) -> None:
        narrative = parse_narrative(_load_sample_response())
        assert narrative.predicted_outcome == "likely"
        assert len(narrative.improvement_recommendations) == 3
        assert narrative.strength_areas[0] == "Thorough company research"

    def test_echoed_numbers_ignored(self) -> None:
        narrative = parse_narrative(_load_sample_response())
        dumped = narrative.model_dump()
        assert "overall_probability" not in dumped
        assert "confidence_level" not in dumped

    def test_fenced_reply(self) -> None:
        narrative = parse_narrative(f"```json\n{_load_sample_response()}\n```")
        assert narrative.predicted_outcome == "likely"

    def test_not_json(self) -> None:
        with pytest.raises(NarrativeError, match="Failed to parse"):
            parse_narrative("I could not analyze this interview.")

    def test_missing_keys(self) -> None:
        data = json.loads(_load_sample_response())
        del data["weakness_areas"]
        del data["predicted_outcome"]
        with pytest.raises(NarrativeError, match="weakness_areas, predicted_outcome"):
            parse_narrative(json.dumps(data))

    def test_invalid_predicted_outcome(self) -> None:
        data = json.loads(_load_sample_response())
        data["predicted_outcome"] = "certain"
        with pytest.raises(NarrativeError, match="failed validation"):
            parse_narrative(json.dumps(data))

    def test_wrong_list_type(self) -> None:
        data = json.loads(_load_sample_response())
        data["strength_areas"] = "everything"
        with pytest.raises(NarrativeError):
            parse_narrative(json.dumps(data))


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


class TestGenerateNarrative:
    def test_single_call_with_system_prompt(self) -> None:
        inputs = _inputs()
        scores = score_preparedness(inputs)
        provider = _mock_provider(_load_sample_response())

        narrative = generate_narrative(inputs, scores, provider, model="m-1")

        assert narrative.predicted_outcome == "likely"
        provider.complete.assert_called_once()
        args, kwargs = provider.complete.call_args
        assert "CALCULATED SCORES" in args[0]
        assert kwargs == {"model": "m-1", "system": SYSTEM_PROMPT}

    def test_provider_error_wrapped(self) -> None:
        inputs = _inputs()
        provider = _mock_provider(error=TimeoutError("timed out"))
        with pytest.raises(NarrativeError, match="LLM request failed: timed out"):
            generate_narrative(inputs, score_preparedness(inputs), provider)

    def test_missing_key_error_wrapped(self) -> None:
        inputs = _inputs()
        provider = _mock_provider(error=ValueError("GOOGLE_API_KEY environment variable is required"))
        with pytest.raises(NarrativeError, match="GOOGLE_API_KEY"):
            generate_narrative(inputs, score_preparedness(inputs), provider)

    def test_empty_reply(self) -> None:
        inputs = _inputs()
        provider = _mock_provider("")
        with pytest.raises(NarrativeError, match="empty response"):
            generate_narrative(inputs, score_preparedness(inputs), provider)
