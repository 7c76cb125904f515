"""SQLite database layer for interviews, preparation records, and predictions."""

import json
import sqlite3
from datetime import datetime
from pathlib import Path

from careerprep.core.schemas import (
    CompanyResearch,
    HistoricalInterview,
    Interview,
    InterviewInsights,
    Job,
    JobMatchAnalysis,
    MockInterviewSession,
    NarrativeInsights,
    Prediction,
    PreparationTask,
    PreparednessScores,
    QuestionResponse,
)

_AUTH_TOKENS_TABLE = """
CREATE TABLE IF NOT EXISTS auth_tokens (
    token       TEXT PRIMARY KEY,
    user_id     TEXT NOT NULL
);
"""

_JOBS_TABLE = """
CREATE TABLE IF NOT EXISTS jobs (
    id              TEXT PRIMARY KEY,
    user_id         TEXT NOT NULL,
    job_title       TEXT NOT NULL DEFAULT '',
    company_name    TEXT NOT NULL DEFAULT '',
    created_at      TEXT NOT NULL
);
"""

_INTERVIEWS_TABLE = """
CREATE TABLE IF NOT EXISTS interviews (
    id                  TEXT PRIMARY KEY,
    user_id             TEXT NOT NULL,
    job_id              TEXT NOT NULL,
    interview_type      TEXT NOT NULL DEFAULT '',
    interview_date      TEXT NOT NULL DEFAULT '',
    status              TEXT NOT NULL DEFAULT 'scheduled',
    outcome             TEXT,
    preparation_tasks   TEXT NOT NULL DEFAULT '[]'
);
"""

_JOB_MATCH_TABLE = """
CREATE TABLE IF NOT EXISTS job_match_analyses (
    id                  INTEGER PRIMARY KEY AUTOINCREMENT,
    job_id              TEXT NOT NULL,
    overall_score       REAL,
    skills_score        REAL,
    experience_score    REAL,
    created_at          TEXT NOT NULL
);
"""

_COMPANY_RESEARCH_TABLE = """
CREATE TABLE IF NOT EXISTS company_research (
    job_id              TEXT PRIMARY KEY,
    company_profile     TEXT,
    recent_news         TEXT,
    leadership_info     TEXT,
    talking_points      TEXT
);
"""

_INSIGHTS_TABLE = """
CREATE TABLE IF NOT EXISTS interview_insights (
    job_id          TEXT PRIMARY KEY,
    insights_json   TEXT NOT NULL DEFAULT '{}',
    created_at      TEXT NOT NULL
);
"""

_MOCK_SESSIONS_TABLE = """
CREATE TABLE IF NOT EXISTS mock_interview_sessions (
    id                  INTEGER PRIMARY KEY AUTOINCREMENT,
    interview_id        TEXT NOT NULL,
    duration_minutes    REAL,
    created_at          TEXT NOT NULL
);
"""

_QUESTION_RESPONSES_TABLE = """
CREATE TABLE IF NOT EXISTS interview_question_responses (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    interview_id    TEXT NOT NULL,
    question        TEXT NOT NULL DEFAULT '',
    created_at      TEXT NOT NULL
);
"""

_PREDICTIONS_TABLE = """
CREATE TABLE IF NOT EXISTS interview_success_predictions (
    id                          INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id                     TEXT    NOT NULL,
    interview_id                TEXT    NOT NULL,
    job_id                      TEXT    NOT NULL,
    overall_probability         INTEGER NOT NULL,
    confidence_level            TEXT    NOT NULL,
    preparation_score           INTEGER NOT NULL,
    role_match_score            INTEGER NOT NULL,
    company_research_score      INTEGER NOT NULL,
    practice_hours_score        INTEGER NOT NULL,
    historical_success_rate     REAL    NOT NULL,
    performance_trend           TEXT    NOT NULL,
    improvement_recommendations TEXT    NOT NULL DEFAULT '[]',
    prioritized_actions         TEXT    NOT NULL DEFAULT '[]',
    strength_areas              TEXT    NOT NULL DEFAULT '[]',
    weakness_areas              TEXT    NOT NULL DEFAULT '[]',
    predicted_outcome           TEXT    NOT NULL,
    created_at                  TEXT    NOT NULL
);
"""

_TABLES = (
    _AUTH_TOKENS_TABLE,
    _JOBS_TABLE,
    _INTERVIEWS_TABLE,
    _JOB_MATCH_TABLE,
    _COMPANY_RESEARCH_TABLE,
    _INSIGHTS_TABLE,
    _MOCK_SESSIONS_TABLE,
    _QUESTION_RESPONSES_TABLE,
    _PREDICTIONS_TABLE,
)


def init_db(path: str | Path, *, check_same_thread: bool = True) -> sqlite3.Connection:
    """Create the database and tables, returning a connection."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), check_same_thread=check_same_thread)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    for ddl in _TABLES:
        conn.execute(ddl)
    conn.commit()
    return conn


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


def insert_auth_token(conn: sqlite3.Connection, token: str, user_id: str) -> None:
    conn.execute(
        "INSERT OR REPLACE INTO auth_tokens (token, user_id) VALUES (?, ?)",
        (token, user_id),
    )
    conn.commit()


def get_user_for_token(conn: sqlite3.Connection, token: str) -> str | None:
    """Return the user id owning a bearer token, or None."""
    row = conn.execute(
        "SELECT user_id FROM auth_tokens WHERE token = ?", (token,)
    ).fetchone()
    return row["user_id"] if row else None


# ---------------------------------------------------------------------------
# Jobs and interviews
# ---------------------------------------------------------------------------


def insert_job(conn: sqlite3.Connection, job: Job) -> None:
    conn.execute(
        "INSERT INTO jobs (id, user_id, job_title, company_name, created_at) VALUES (?, ?, ?, ?, ?)",
        (job.id, job.user_id, job.job_title, job.company_name, datetime.now().isoformat()),
    )
    conn.commit()


def get_job(conn: sqlite3.Connection, job_id: str, user_id: str) -> Job | None:
    row = conn.execute(
        "SELECT id, user_id, job_title, company_name FROM jobs WHERE id = ? AND user_id = ?",
        (job_id, user_id),
    ).fetchone()
    if row is None:
        return None
    return Job(**dict(row))


def insert_interview(conn: sqlite3.Connection, interview: Interview) -> None:
    tasks_json = json.dumps([t.model_dump() for t in interview.preparation_tasks])
    conn.execute(
        """
        INSERT INTO interviews
            (id, user_id, job_id, interview_type, interview_date, status, outcome,
             preparation_tasks)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            interview.id,
            interview.user_id,
            interview.job_id,
            interview.interview_type,
            interview.interview_date,
            interview.status,
            interview.outcome,
            tasks_json,
        ),
    )
    conn.commit()


def update_interview_tasks(
    conn: sqlite3.Connection,
    interview_id: str,
    tasks: list[PreparationTask],
) -> None:
    """Replace the checklist of an interview (tasks checked off or added)."""
    conn.execute(
        "UPDATE interviews SET preparation_tasks = ? WHERE id = ?",
        (json.dumps([t.model_dump() for t in tasks]), interview_id),
    )
    conn.commit()


def record_interview_outcome(
    conn: sqlite3.Connection,
    interview_id: str,
    outcome: str,
    status: str = "completed",
) -> None:
    conn.execute(
        "UPDATE interviews SET outcome = ?, status = ? WHERE id = ?",
        (outcome, status, interview_id),
    )
    conn.commit()


def get_interview(conn: sqlite3.Connection, interview_id: str, user_id: str) -> Interview | None:
    row = conn.execute(
        "SELECT * FROM interviews WHERE id = ? AND user_id = ?",
        (interview_id, user_id),
    ).fetchone()
    if row is None:
        return None
    return _row_to_interview(row)


def list_historical_interviews(conn: sqlite3.Connection, user_id: str) -> list[HistoricalInterview]:
    """Return the user's interviews with a recorded outcome, oldest first."""
    rows = conn.execute(
        """
        SELECT id, outcome, interview_date FROM interviews
        WHERE user_id = ? AND outcome IS NOT NULL
        ORDER BY interview_date ASC, rowid ASC
        """,
        (user_id,),
    ).fetchall()
    return [
        HistoricalInterview(
            interview_id=r["id"], outcome=r["outcome"], interview_date=r["interview_date"]
        )
        for r in rows
    ]


def list_completed_interviews(conn: sqlite3.Connection, user_id: str) -> list[Interview]:
    """Return completed interviews with an outcome, newest first."""
    rows = conn.execute(
        """
        SELECT * FROM interviews
        WHERE user_id = ? AND status = 'completed' AND outcome IS NOT NULL
        ORDER BY interview_date DESC, rowid DESC
        """,
        (user_id,),
    ).fetchall()
    return [_row_to_interview(r) for r in rows]


def _row_to_interview(row: sqlite3.Row) -> Interview:
    tasks = [PreparationTask.model_validate(t) for t in json.loads(row["preparation_tasks"] or "[]")]
    return Interview(
        id=row["id"],
        user_id=row["user_id"],
        job_id=row["job_id"],
        interview_type=row["interview_type"],
        interview_date=row["interview_date"],
        status=row["status"],
        outcome=row["outcome"],
        preparation_tasks=tasks,
    )


# ---------------------------------------------------------------------------
# Optional per-job records
# ---------------------------------------------------------------------------


def insert_job_match(conn: sqlite3.Connection, match: JobMatchAnalysis) -> None:
    conn.execute(
        """
        INSERT INTO job_match_analyses
            (job_id, overall_score, skills_score, experience_score, created_at)
        VALUES (?, ?, ?, ?, ?)
        """,
        (
            match.job_id,
            match.overall_score,
            match.skills_score,
            match.experience_score,
            datetime.now().isoformat(),
        ),
    )
    conn.commit()


def get_job_match(conn: sqlite3.Connection, job_id: str) -> JobMatchAnalysis | None:
    """Return the newest match analysis for a job, or None."""
    row = conn.execute(
        """
        SELECT job_id, overall_score, skills_score, experience_score
        FROM job_match_analyses
        WHERE job_id = ?
        ORDER BY created_at DESC, id DESC
        LIMIT 1
        """,
        (job_id,),
    ).fetchone()
    if row is None:
        return None
    return JobMatchAnalysis(
        job_id=row["job_id"],
        overall_score=row["overall_score"] or 0.0,
        skills_score=row["skills_score"] or 0.0,
        experience_score=row["experience_score"] or 0.0,
    )


def upsert_company_research(conn: sqlite3.Connection, research: CompanyResearch) -> None:
    conn.execute(
        """
        INSERT INTO company_research
            (job_id, company_profile, recent_news, leadership_info, talking_points)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(job_id)
        DO UPDATE SET
            company_profile = excluded.company_profile,
            recent_news = excluded.recent_news,
            leadership_info = excluded.leadership_info,
            talking_points = excluded.talking_points
        """,
        (
            research.job_id,
            research.company_profile,
            research.recent_news,
            research.leadership_info,
            research.talking_points,
        ),
    )
    conn.commit()


def get_company_research(conn: sqlite3.Connection, job_id: str) -> CompanyResearch | None:
    row = conn.execute(
        "SELECT * FROM company_research WHERE job_id = ?", (job_id,)
    ).fetchone()
    if row is None:
        return None
    return CompanyResearch(**dict(row))


def upsert_interview_insights(conn: sqlite3.Connection, job_id: str, insights: dict) -> None:
    conn.execute(
        """
        INSERT INTO interview_insights (job_id, insights_json, created_at)
        VALUES (?, ?, ?)
        ON CONFLICT(job_id)
        DO UPDATE SET insights_json = excluded.insights_json
        """,
        (job_id, json.dumps(insights), datetime.now().isoformat()),
    )
    conn.commit()


def get_interview_insights(conn: sqlite3.Connection, job_id: str) -> InterviewInsights | None:
    row = conn.execute(
        "SELECT job_id FROM interview_insights WHERE job_id = ?", (job_id,)
    ).fetchone()
    return InterviewInsights(job_id=row["job_id"]) if row else None


# ---------------------------------------------------------------------------
# Practice records
# ---------------------------------------------------------------------------


def insert_mock_session(
    conn: sqlite3.Connection,
    interview_id: str,
    duration_minutes: float | None,
) -> int:
    cursor = conn.execute(
        """
        INSERT INTO mock_interview_sessions (interview_id, duration_minutes, created_at)
        VALUES (?, ?, ?)
        """,
        (interview_id, duration_minutes, datetime.now().isoformat()),
    )
    conn.commit()
    return cursor.lastrowid or 0


def list_mock_sessions(conn: sqlite3.Connection, interview_id: str) -> list[MockInterviewSession]:
    rows = conn.execute(
        "SELECT interview_id, duration_minutes FROM mock_interview_sessions WHERE interview_id = ?",
        (interview_id,),
    ).fetchall()
    return [MockInterviewSession(**dict(r)) for r in rows]


def insert_question_response(conn: sqlite3.Connection, interview_id: str, question: str) -> int:
    cursor = conn.execute(
        """
        INSERT INTO interview_question_responses (interview_id, question, created_at)
        VALUES (?, ?, ?)
        """,
        (interview_id, question, datetime.now().isoformat()),
    )
    conn.commit()
    return cursor.lastrowid or 0


def list_question_responses(conn: sqlite3.Connection, interview_id: str) -> list[QuestionResponse]:
    rows = conn.execute(
        "SELECT interview_id, question FROM interview_question_responses WHERE interview_id = ?",
        (interview_id,),
    ).fetchall()
    return [QuestionResponse(**dict(r)) for r in rows]


# ---------------------------------------------------------------------------
# Predictions
# ---------------------------------------------------------------------------


def insert_prediction(
    conn: sqlite3.Connection,
    user_id: str,
    interview_id: str,
    job_id: str,
    scores: PreparednessScores,
    narrative: NarrativeInsights,
    created_at: datetime | None = None,
) -> int:
    """Record a prediction. Always inserts a new row. Returns the row ID."""
    cursor = conn.execute(
        """
        INSERT INTO interview_success_predictions
            (user_id, interview_id, job_id, overall_probability, confidence_level,
             preparation_score, role_match_score, company_research_score,
             practice_hours_score, historical_success_rate, performance_trend,
             improvement_recommendations, prioritized_actions, strength_areas,
             weakness_areas, predicted_outcome, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id,
            interview_id,
            job_id,
            scores.overall_probability,
            scores.confidence_level,
            scores.preparation_score,
            scores.role_match_score,
            scores.company_research_score,
            scores.practice_hours_score,
            round(scores.historical_success_rate, 1),
            scores.performance_trend,
            json.dumps(narrative.improvement_recommendations),
            json.dumps(narrative.prioritized_actions),
            json.dumps(narrative.strength_areas),
            json.dumps(narrative.weakness_areas),
            narrative.predicted_outcome,
            (created_at or datetime.now()).isoformat(),
        ),
    )
    conn.commit()
    return cursor.lastrowid or 0


def get_prediction(conn: sqlite3.Connection, prediction_id: int) -> Prediction | None:
    row = conn.execute(
        "SELECT * FROM interview_success_predictions WHERE id = ?", (prediction_id,)
    ).fetchone()
    return _row_to_prediction(row) if row else None


def get_latest_prediction(
    conn: sqlite3.Connection,
    interview_id: str,
    user_id: str | None = None,
) -> Prediction | None:
    """Return the newest prediction for an interview, optionally scoped to a user."""
    query = "SELECT * FROM interview_success_predictions WHERE interview_id = ?"
    params: tuple[str, ...] = (interview_id,)
    if user_id is not None:
        query += " AND user_id = ?"
        params += (user_id,)
    query += " ORDER BY created_at DESC, id DESC LIMIT 1"
    row = conn.execute(query, params).fetchone()
    return _row_to_prediction(row) if row else None


def _row_to_prediction(row: sqlite3.Row) -> Prediction:
    data = dict(row)
    for key in (
        "improvement_recommendations",
        "prioritized_actions",
        "strength_areas",
        "weakness_areas",
    ):
        data[key] = json.loads(data[key] or "[]")
    data["created_at"] = datetime.fromisoformat(data["created_at"])
    return Prediction.model_validate(data)
