#!/usr/bin/env python3
"""Seed a SQLite database with a demo user, job, and interview.

Creates an auth token, a job with match analysis and full company research,
an interview with 8/10 checklist tasks done, two 90-minute mock sessions,
12 practiced questions, and three past interviews (one offer). Prints the
engine scores so they can be checked without calling an LLM.

Usage:
    python scripts/seed_demo.py
    python scripts/seed_demo.py --db data/demo.db --token demo-token
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on the path when run as a script
sys.path.insert(0, str(Path(__file__).parent.parent))

from careerprep.core.db import (
    init_db,
    insert_auth_token,
    insert_interview,
    insert_job,
    insert_job_match,
    insert_mock_session,
    insert_question_response,
    upsert_company_research,
    upsert_interview_insights,
)
from careerprep.core.schemas import (
    CompanyResearch,
    Interview,
    Job,
    JobMatchAnalysis,
    PreparationTask,
)
from careerprep.pipeline.predictor import load_inputs
from careerprep.scoring.engine import score_preparedness

logging.basicConfig(level=logging.WARNING)

USER_ID = "demo-user"
JOB_ID = "job-demo"
INTERVIEW_ID = "interview-demo"


def seed(db_path: str, token: str) -> None:
    conn = init_db(db_path)
    insert_auth_token(conn, token, USER_ID)
    insert_job(conn, Job(id=JOB_ID, user_id=USER_ID, job_title="Backend Engineer",
                         company_name="Acme"))
    insert_job_match(conn, JobMatchAnalysis(job_id=JOB_ID, overall_score=80,
                                            skills_score=70, experience_score=60))
    upsert_company_research(conn, CompanyResearch(
        job_id=JOB_ID,
        company_profile="Series C logistics platform",
        recent_news="Opened a Berlin office",
        leadership_info="CTO previously at a large marketplace",
        talking_points="Event-driven order pipeline",
    ))
    upsert_interview_insights(conn, JOB_ID, {"process": "3 rounds"})

    tasks = [PreparationTask(task=f"Task {i + 1}", completed=i < 8) for i in range(10)]
    insert_interview(conn, Interview(
        id=INTERVIEW_ID, user_id=USER_ID, job_id=JOB_ID,
        interview_type="technical", interview_date="2026-11-02", preparation_tasks=tasks,
    ))
    for _ in range(2):
        insert_mock_session(conn, INTERVIEW_ID, 90)
    for i in range(12):
        insert_question_response(conn, INTERVIEW_ID, f"Practice question {i + 1}")

    for i, outcome in enumerate(["rejected", "offer", "rejected"]):
        insert_interview(conn, Interview(
            id=f"past-{i + 1}", user_id=USER_ID, job_id=JOB_ID, status="completed",
            interview_date=f"2026-0{i + 1}-15", outcome=outcome,
        ))

    scores = score_preparedness(load_inputs(conn, USER_ID, INTERVIEW_ID, JOB_ID))
    conn.close()

    print(f"Seeded {db_path} (token: {token})")
    print(scores.model_dump_json(indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed a demo database")
    parser.add_argument("--db", default="data/demo.db", help="SQLite path (default: data/demo.db)")
    parser.add_argument("--token", default="demo-token", help="Bearer token for the demo user")
    args = parser.parse_args()
    seed(args.db, args.token)


if __name__ == "__main__":
    main()
