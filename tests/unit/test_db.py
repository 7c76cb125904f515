"""Tests for the SQLite database layer."""

import sqlite3
from datetime import datetime
from pathlib import Path

import pytest

from careerprep.core.db import (
    get_company_research,
    get_interview,
    get_interview_insights,
    get_job,
    get_job_match,
    get_latest_prediction,
    get_prediction,
    get_user_for_token,
    init_db,
    insert_auth_token,
    insert_interview,
    insert_job,
    insert_job_match,
    insert_mock_session,
    insert_prediction,
    insert_question_response,
    list_completed_interviews,
    list_historical_interviews,
    list_mock_sessions,
    list_question_responses,
    record_interview_outcome,
    update_interview_tasks,
    upsert_company_research,
    upsert_interview_insights,
)
from careerprep.core.schemas import (
    CompanyResearch,
    Interview,
    Job,
    JobMatchAnalysis,
    NarrativeInsights,
    PreparationTask,
    PreparednessScores,
)


@pytest.fixture()
def conn(tmp_path: Path) -> sqlite3.Connection:
    return init_db(tmp_path / "test.db")


def _scores(overall: int = 74) -> PreparednessScores:
    return PreparednessScores(
        task_completion_score=80,
        mock_interview_score=67,
        question_practice_score=100,
        practice_hours_score=60,
        company_research_score=100,
        role_match_score=73,
        preparation_score=80,
        base_probability=79,
        overall_probability=overall,
        historical_success_rate=100 / 3,
        recent_success_rate=100 / 3,
        trend=0.0,
        performance_trend="stable",
        confidence_level="high",
        data_points=5,
    )


def _narrative() -> NarrativeInsights:
    return NarrativeInsights(
        improvement_recommendations=["Do a mock"],
        prioritized_actions=["Finish tasks"],
        strength_areas=["Research"],
        weakness_areas=["Hours"],
        predicted_outcome="possible",
    )


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class TestInitDb:
    def test_creates_tables(self, conn: sqlite3.Connection) -> None:
        tables = {
            r["name"]
            for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
        }
        assert {
            "auth_tokens",
            "jobs",
            "interviews",
            "job_match_analyses",
            "company_research",
            "interview_insights",
            "mock_interview_sessions",
            "interview_question_responses",
            "interview_success_predictions",
        } <= tables

    def test_idempotent(self, tmp_path: Path) -> None:
        init_db(tmp_path / "test.db").close()
        init_db(tmp_path / "test.db").close()

    def test_creates_parent_dir(self, tmp_path: Path) -> None:
        init_db(tmp_path / "nested" / "dir" / "test.db").close()
        assert (tmp_path / "nested" / "dir" / "test.db").exists()


# ---------------------------------------------------------------------------
# Auth, jobs, interviews
# ---------------------------------------------------------------------------


class TestAuth:
    def test_token_lookup(self, conn: sqlite3.Connection) -> None:
        insert_auth_token(conn, "tok", "user-1")
        assert get_user_for_token(conn, "tok") == "user-1"
        assert get_user_for_token(conn, "other") is None


class TestInterviews:
    def test_job_scoped_to_user(self, conn: sqlite3.Connection) -> None:
        insert_job(conn, Job(id="job-1", user_id="user-1", job_title="SWE"))
        assert get_job(conn, "job-1", "user-1") is not None
        assert get_job(conn, "job-1", "user-2") is None

    def test_tasks_roundtrip_and_update(self, conn: sqlite3.Connection) -> None:
        insert_interview(conn, Interview(
            id="int-1", user_id="user-1", job_id="job-1",
            preparation_tasks=[PreparationTask(task="A"), PreparationTask(task="B", completed=True)],
        ))
        interview = get_interview(conn, "int-1", "user-1")
        assert interview is not None
        assert [t.completed for t in interview.preparation_tasks] == [False, True]

        update_interview_tasks(conn, "int-1", [PreparationTask(task="A", completed=True)])
        updated = get_interview(conn, "int-1", "user-1")
        assert updated is not None
        assert updated.preparation_tasks == [PreparationTask(task="A", completed=True)]

    def test_interview_scoped_to_user(self, conn: sqlite3.Connection) -> None:
        insert_interview(conn, Interview(id="int-1", user_id="user-1", job_id="job-1"))
        assert get_interview(conn, "int-1", "user-2") is None

    def test_history_ordered_by_date(self, conn: sqlite3.Connection) -> None:
        for iid, date, outcome in [
            ("c", "2026-03-01", "offer"),
            ("a", "2026-01-01", "rejected"),
            ("b", "2026-02-01", None),
            ("d", "2026-04-01", "rejected"),
        ]:
            insert_interview(conn, Interview(
                id=iid, user_id="user-1", job_id="job-1", interview_date=date, outcome=outcome,
            ))
        history = list_historical_interviews(conn, "user-1")
        assert [h.interview_id for h in history] == ["a", "c", "d"]
        assert [h.outcome for h in history] == ["rejected", "offer", "rejected"]

    def test_completed_newest_first(self, conn: sqlite3.Connection) -> None:
        insert_interview(conn, Interview(id="old", user_id="u", job_id="j", interview_date="2026-01-01"))
        insert_interview(conn, Interview(id="new", user_id="u", job_id="j", interview_date="2026-02-01"))
        insert_interview(conn, Interview(id="open", user_id="u", job_id="j", interview_date="2026-03-01"))
        record_interview_outcome(conn, "old", "rejected")
        record_interview_outcome(conn, "new", "offer")

        completed = list_completed_interviews(conn, "u")
        assert [i.id for i in completed] == ["new", "old"]
        assert completed[0].status == "completed"


# ---------------------------------------------------------------------------
# Optional records
# ---------------------------------------------------------------------------


class TestOptionalRecords:
    def test_absent_records(self, conn: sqlite3.Connection) -> None:
        assert get_job_match(conn, "job-1") is None
        assert get_company_research(conn, "job-1") is None
        assert get_interview_insights(conn, "job-1") is None
        assert list_mock_sessions(conn, "int-1") == []
        assert list_question_responses(conn, "int-1") == []

    def test_newest_job_match(self, conn: sqlite3.Connection) -> None:
        insert_job_match(conn, JobMatchAnalysis(job_id="job-1", overall_score=40))
        insert_job_match(conn, JobMatchAnalysis(job_id="job-1", overall_score=90))
        match = get_job_match(conn, "job-1")
        assert match is not None
        assert match.overall_score == 90

    def test_research_upsert(self, conn: sqlite3.Connection) -> None:
        upsert_company_research(conn, CompanyResearch(job_id="job-1", company_profile="v1"))
        upsert_company_research(
            conn, CompanyResearch(job_id="job-1", company_profile="v2", recent_news="n")
        )
        research = get_company_research(conn, "job-1")
        assert research is not None
        assert research.company_profile == "v2"
        assert research.artifacts_present == 2

    def test_insights_presence(self, conn: sqlite3.Connection) -> None:
        upsert_interview_insights(conn, "job-1", {"rounds": 3})
        assert get_interview_insights(conn, "job-1") is not None

    def test_practice_records(self, conn: sqlite3.Connection) -> None:
        insert_mock_session(conn, "int-1", 45)
        insert_mock_session(conn, "int-1", None)
        insert_question_response(conn, "int-1", "Tell me about yourself")
        sessions = list_mock_sessions(conn, "int-1")
        assert [s.duration_minutes for s in sessions] == [45, None]
        assert len(list_question_responses(conn, "int-1")) == 1


# ---------------------------------------------------------------------------
# Predictions
# ---------------------------------------------------------------------------


class TestPredictions:
    def test_insert_and_get(self, conn: sqlite3.Connection) -> None:
        pid = insert_prediction(conn, "user-1", "int-1", "job-1", _scores(), _narrative())
        prediction = get_prediction(conn, pid)
        assert prediction is not None
        assert prediction.overall_probability == 74
        assert prediction.role_match_score == 73
        assert prediction.confidence_level == "high"
        assert prediction.historical_success_rate == 33.3
        assert prediction.prioritized_actions == ["Finish tasks"]
        assert prediction.predicted_outcome == "possible"

    def test_get_missing(self, conn: sqlite3.Connection) -> None:
        assert get_prediction(conn, 999) is None

    def test_always_inserts(self, conn: sqlite3.Connection) -> None:
        first = insert_prediction(conn, "user-1", "int-1", "job-1", _scores(), _narrative())
        second = insert_prediction(conn, "user-1", "int-1", "job-1", _scores(), _narrative())
        assert first != second
        count = conn.execute("SELECT COUNT(*) FROM interview_success_predictions").fetchone()[0]
        assert count == 2

    def test_latest_by_created_at(self, conn: sqlite3.Connection) -> None:
        insert_prediction(
            conn, "user-1", "int-1", "job-1", _scores(50), _narrative(),
            created_at=datetime(2026, 10, 2),
        )
        insert_prediction(
            conn, "user-1", "int-1", "job-1", _scores(60), _narrative(),
            created_at=datetime(2026, 10, 1),
        )
        latest = get_latest_prediction(conn, "int-1")
        assert latest is not None
        assert latest.overall_probability == 50

    def test_latest_scoped_to_user(self, conn: sqlite3.Connection) -> None:
        insert_prediction(conn, "user-1", "int-1", "job-1", _scores(), _narrative())
        assert get_latest_prediction(conn, "int-1", "user-2") is None
        assert get_latest_prediction(conn, "int-1", "user-1") is not None
