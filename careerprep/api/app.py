"""HTTP API for interview success predictions.

Every failure is returned as ``{"error": "<message>"}`` with a non-2xx status.

There is no module-level app; settings are read only when the factory runs:

    uvicorn careerprep.api.app:create_app --factory
"""

import logging
import os
import sqlite3
from collections.abc import Iterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from careerprep.core.config import Settings
from careerprep.core.db import get_user_for_token, init_db
from careerprep.core.errors import (
    AuthenticationError,
    InvalidRequestError,
    NarrativeError,
    NotFoundError,
    PersistenceError,
    PredictionError,
)
from careerprep.llm.base import LLMProvider
from careerprep.pipeline.accuracy import analyze_prediction_accuracy
from careerprep.pipeline.predictor import latest_prediction, predict_interview_success

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CAREERPREP_CONFIG"

_STATUS_BY_ERROR: list[tuple[type[PredictionError], int]] = [
    (InvalidRequestError, 400),
    (AuthenticationError, 401),
    (NotFoundError, 404),
    (NarrativeError, 502),
    (PersistenceError, 500),
]


class PredictionRequest(BaseModel):
    """Body of POST /calculate-interview-success."""

    model_config = ConfigDict(populate_by_name=True)

    interview_id: str = Field(alias="interviewId")
    job_id: str = Field(alias="jobId")


def load_settings() -> Settings:
    """Settings from $CAREERPREP_CONFIG when set, defaults otherwise."""
    path = os.environ.get(CONFIG_ENV_VAR)
    return Settings.from_yaml(path) if path else Settings()


def create_app(
    settings: Settings | None = None,
    provider: LLMProvider | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Service settings. None loads them via load_settings().
        provider: LLM provider override. None builds one from settings.llm
            on each request.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # type: ignore[no-untyped-def]
        init_db(settings.database.path).close()
        logger.info("Database ready at %s", settings.database.path)
        yield

    app = FastAPI(title="careerprep API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.provider = provider

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    @app.exception_handler(PredictionError)
    async def prediction_error_handler(request: Request, exc: PredictionError) -> JSONResponse:
        status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 500)
        if status >= 500:
            logger.error("Could not generate prediction: %s", exc)
            message = f"Could not generate prediction: {exc}"
        else:
            message = str(exc)
        return JSONResponse(status_code=status, content={"error": message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": f"Could not generate prediction: {exc}"},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ) -> JSONResponse:
        fields = sorted(
            {".".join(str(p) for p in err.get("loc", ())[1:]) or "body" for err in exc.errors()}
        )
        return JSONResponse(
            status_code=400,
            content={"error": f"Invalid request: {', '.join(fields)}"},
        )

    _register_routes(app)
    return app


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[no-any-return]


def get_conn(settings: Settings = Depends(get_settings)) -> Iterator[sqlite3.Connection]:
    """One SQLite connection per request."""
    conn = init_db(settings.database.path, check_same_thread=False)
    try:
        yield conn
    finally:
        conn.close()


def get_current_user(
    authorization: str | None = Header(default=None),
    conn: sqlite3.Connection = Depends(get_conn),
) -> str:
    """Resolve the bearer token in the Authorization header to a user id."""
    if not authorization:
        msg = "No authorization header"
        raise AuthenticationError(msg)
    token = authorization.removeprefix("Bearer ").strip()
    user_id = get_user_for_token(conn, token) if token else None
    if user_id is None:
        msg = "Invalid user"
        raise AuthenticationError(msg)
    return user_id


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


def _register_routes(app: FastAPI) -> None:
    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/calculate-interview-success")
    def calculate_interview_success(
        req: PredictionRequest,
        request: Request,
        user_id: str = Depends(get_current_user),
        conn: sqlite3.Connection = Depends(get_conn),
        settings: Settings = Depends(get_settings),
    ) -> dict:
        prediction = predict_interview_success(
            conn,
            user_id,
            req.interview_id,
            req.job_id,
            settings,
            provider=request.app.state.provider,
        )
        return prediction.model_dump(mode="json")

    @app.get("/interviews/{interview_id}/prediction")
    def get_interview_prediction(
        interview_id: str,
        user_id: str = Depends(get_current_user),
        conn: sqlite3.Connection = Depends(get_conn),
    ) -> dict:
        prediction = latest_prediction(conn, user_id, interview_id)
        if prediction is None:
            msg = f"No prediction for interview {interview_id}"
            raise NotFoundError(msg)
        return prediction.model_dump(mode="json")

    @app.get("/predictions/accuracy")
    def get_prediction_accuracy(
        user_id: str = Depends(get_current_user),
        conn: sqlite3.Connection = Depends(get_conn),
    ) -> dict:
        return analyze_prediction_accuracy(conn, user_id).model_dump(mode="json")

